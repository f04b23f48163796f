"""Versioned data API."""

from briefsnap.api.v1.router import api_router

__all__ = ["api_router"]
