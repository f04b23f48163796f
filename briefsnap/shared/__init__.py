"""Cross-cutting helpers: telemetry, debounce, datetime utilities."""
