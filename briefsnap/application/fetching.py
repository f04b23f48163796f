"""Cache-first fetch used by every data-fetching service.

A CachedFetch is created per request: it checks the CacheStore, calls the
loader only on a miss, writes successful results back, and keeps its own
error state. Errors are never written to the cache.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Generic, TypeVar

from briefsnap.domain.exceptions import BriefSnapException, FetchFailedException
from briefsnap.infrastructure.cache.memory_cache import CacheStore
from briefsnap.infrastructure.cache.namespaces import Namespace
from briefsnap.shared.telemetry.tracing import record_cache_outcome

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FetchState(str, Enum):
    """Lifecycle of one fetch."""

    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class CachedFetch(Generic[T]):
    """One cache-first fetch for a (namespace, key).

    A hit goes straight to SUCCESS without a LOADING phase. SUCCESS and
    ERROR are terminal: a second run() raises RuntimeError.
    """

    def __init__(self, store: CacheStore, namespace: Namespace | str, key: str) -> None:
        self.store = store
        self.namespace = Namespace(namespace)
        self.key = key
        self.state = FetchState.IDLE
        self.error: BaseException | None = None
        self.from_cache = False

    async def run(
        self,
        loader: Callable[[], Awaitable[T]],
        cache_if: Callable[[T], bool] | None = None,
    ) -> T:
        """Return the cached value, or load, store and return a fresh one.

        cache_if, when given, decides whether a loaded value is stored.
        """
        if self.state is not FetchState.IDLE:
            raise RuntimeError(f"Fetch for {self.key!r} already ran (state={self.state.value})")

        cached = self.store.get(self.namespace, self.key)
        record_cache_outcome(self.namespace.value, self.key, cached is not None)
        if cached is not None:
            self.from_cache = True
            self.state = FetchState.SUCCESS
            return cached

        self.state = FetchState.LOADING
        try:
            value = await loader()
        except BriefSnapException as e:
            self.state = FetchState.ERROR
            self.error = e
            logger.warning("Fetch failed for %s: %s", self.key, e.message)
            raise
        except Exception as e:
            self.state = FetchState.ERROR
            wrapped = FetchFailedException(f"Failed to load {self.namespace.value}", source=self.key)
            self.error = wrapped
            logger.exception("Fetch failed for %s", self.key)
            raise wrapped from e

        if cache_if is None or cache_if(value):
            self.store.put(self.namespace, self.key, value)
        self.state = FetchState.SUCCESS
        return value


async def cached_fetch(
    store: CacheStore,
    namespace: Namespace | str,
    key: str,
    loader: Callable[[], Awaitable[T]],
) -> T:
    """Run a single CachedFetch and return its value."""
    return await CachedFetch[T](store, namespace, key).run(loader)
