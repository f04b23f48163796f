"""Logging and OpenTelemetry helpers."""

from briefsnap.shared.telemetry.logging import setup_logging
from briefsnap.shared.telemetry.tracing import record_cache_outcome, traced

__all__ = ["record_cache_outcome", "setup_logging", "traced"]
