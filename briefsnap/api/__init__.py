"""HTTP layer: versioned data API and the edge-function routes."""
