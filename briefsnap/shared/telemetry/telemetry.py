"""OpenTelemetry wiring for the BriefSnap service.

Traces cover inbound requests, outbound httpx calls (Firestore, moderation,
weather, geocoding, Pages deploys) and sitemap cache commands on Redis.
Health checks are excluded so they do not flood the exporter.
"""

from __future__ import annotations

import logging
import threading

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.instrumentation.redis import RedisInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased

from briefsnap.core.config import Settings

logger = logging.getLogger(__name__)

EXCLUDED_URLS = "/api/v1/health,/api/v1/health/ready"

_provider: TracerProvider | None = None
_lock = threading.RLock()


def _exporter(settings: Settings) -> SpanExporter | None:
    kind = settings.telemetry_exporter
    if kind == "none":
        return None
    if kind == "otlp" and settings.telemetry_otlp_endpoint:
        endpoint = settings.telemetry_otlp_endpoint
        logger.info("Using OTLP span exporter: %s", endpoint)
        return OTLPSpanExporter(endpoint=endpoint, insecure=endpoint.startswith("http://"))
    if kind != "console":
        logger.warning("Unknown exporter type '%s', using console", kind)
    return ConsoleSpanExporter()


def setup_telemetry(app: FastAPI, settings: Settings) -> TracerProvider | None:
    """Install the global tracer provider and instrument the app.

    Returns None when telemetry is disabled or setup fails; the service runs
    untraced in that case.
    """
    global _provider
    if not settings.telemetry_enabled:
        return None
    try:
        provider = TracerProvider(
            resource=Resource(
                attributes={
                    SERVICE_NAME: settings.app_name,
                    SERVICE_VERSION: settings.app_version,
                    "deployment.environment": settings.telemetry_environment,
                }
            ),
            sampler=TraceIdRatioBased(settings.telemetry_sample_rate),
        )
        exporter = _exporter(settings)
        if exporter is not None:
            provider.add_span_processor(BatchSpanProcessor(exporter))
        trace.set_tracer_provider(provider)

        FastAPIInstrumentor.instrument_app(
            app, tracer_provider=provider, excluded_urls=EXCLUDED_URLS
        )
        HTTPXClientInstrumentor().instrument(tracer_provider=provider)
        RedisInstrumentor().instrument(tracer_provider=provider)
        LoggingInstrumentor().instrument(tracer_provider=provider, set_logging_format=False)
    except Exception:
        logger.exception("Failed to initialize telemetry")
        return None

    with _lock:
        _provider = provider
    logger.info(
        "Telemetry initialized: service=%s version=%s exporter=%s",
        settings.app_name,
        settings.app_version,
        settings.telemetry_exporter,
    )
    return provider


def shutdown_telemetry() -> None:
    """Flush pending spans and forget the provider. Safe to call when disabled."""
    global _provider
    with _lock:
        provider, _provider = _provider, None
    if provider is None:
        return
    try:
        provider.shutdown()
        logger.info("Telemetry shutdown complete")
    except Exception:
        logger.exception("Error during telemetry shutdown")
