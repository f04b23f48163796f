"""Result objects returned by application services (no transport concerns)."""
