"""Infrastructure layer: caches, Firestore REST access, third-party clients."""
