"""Infrastructure services (rendering)."""
