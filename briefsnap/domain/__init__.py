"""Domain layer: typed records and exceptions (no infrastructure imports)."""
