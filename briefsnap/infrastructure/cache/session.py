"""Single owner of the per-instance caches.

Built once in the application lifespan, stored on app.state and handed to
services by dependency injection; cleared on explicit cache-busting and at
shutdown.
"""

from __future__ import annotations

import logging

from briefsnap.infrastructure.cache.durable_cache import SitemapCache
from briefsnap.infrastructure.cache.keys import sitemap_key
from briefsnap.infrastructure.cache.memory_cache import CacheStore

logger = logging.getLogger(__name__)


class CacheSession:
    """Holds the in-memory CacheStore and the optional durable SitemapCache."""

    def __init__(self, store: CacheStore, sitemap: SitemapCache | None = None) -> None:
        self.store = store
        self.sitemap = sitemap

    async def clear(self) -> None:
        """Drop every cached entry, including the durable sitemap listing."""
        self.store.clear()
        if self.sitemap is not None:
            await self.sitemap.delete(sitemap_key())
        logger.info("Cache session cleared")

    async def close(self) -> None:
        """Release the in-memory entries and disconnect the durable store."""
        self.store.clear()
        if self.sitemap is not None:
            await self.sitemap.disconnect()
