"""Shared utilities (datetime helpers)."""
