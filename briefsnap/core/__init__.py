"""Core configuration, lifespan wiring, exception handlers and rate limits."""
