"""In-memory, per-instance cache with fixed per-namespace expiry.

One CacheStore is built per application instance (see CacheSession) and
passed by reference to the services that need it. Access happens on the
event loop thread only and never awaits, so no locking is used.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from briefsnap.infrastructure.cache.namespaces import (
    DURABLE_NAMESPACES,
    WEEK_BOUND_NAMESPACES,
    Namespace,
    default_durations,
)
from briefsnap.shared.utils.datetime import iso_week, utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """Stored value plus write time (and ISO week for week-bound namespaces)."""

    data: Any
    stored_at: datetime
    week: tuple[int, int] | None = None


class CacheStore:
    """Independent expiring key/value maps, one per namespace.

    get() treats an entry as absent once its age reaches the namespace
    duration, or (calendar only) once the ISO week differs from the week
    it was written in; stale entries are removed on lookup. There is no
    other eviction and no background sweep.
    """

    def __init__(
        self,
        durations: Mapping[Namespace, timedelta] | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize empty namespaces.

        Args:
            durations: Per-namespace expiry; missing namespaces use the defaults.
            clock: Returns the current UTC time (injectable for tests).
        """
        self._durations = default_durations()
        if durations:
            self._durations.update(durations)
        self._clock = clock
        self._maps: dict[Namespace, dict[str, CacheEntry]] = {
            ns: {} for ns in self._durations
        }

    def duration(self, namespace: Namespace | str) -> timedelta:
        """Return the expiry duration for a namespace."""
        return self._durations[self._resolve(namespace)]

    def put(self, namespace: Namespace | str, key: str, value: Any) -> None:
        """Store value under (namespace, key), replacing any prior entry."""
        ns = self._resolve(namespace)
        now = self._clock()
        week = iso_week(now) if ns in WEEK_BOUND_NAMESPACES else None
        self._maps[ns][key] = CacheEntry(data=value, stored_at=now, week=week)
        logger.debug("Cache SET: %s/%s", ns.value, key)

    def get(self, namespace: Namespace | str, key: str) -> Any | None:
        """Return the fresh value for (namespace, key), or None.

        A stale entry is deleted as a side effect (lazy eviction).
        """
        ns = self._resolve(namespace)
        entries = self._maps[ns]
        entry = entries.get(key)
        if entry is None:
            logger.debug("Cache MISS: %s/%s", ns.value, key)
            return None
        now = self._clock()
        if now - entry.stored_at >= self._durations[ns]:
            del entries[key]
            logger.debug("Cache EXPIRED: %s/%s", ns.value, key)
            return None
        if entry.week is not None and entry.week != iso_week(now):
            del entries[key]
            logger.debug("Cache EXPIRED (week changed): %s/%s", ns.value, key)
            return None
        logger.debug("Cache HIT: %s/%s", ns.value, key)
        return entry.data

    def clear(self) -> None:
        """Remove every entry in every namespace."""
        total = len(self)
        self._maps = {ns: {} for ns in self._durations}
        logger.info("Cache CLEARED: %s entries dropped", total)

    def __len__(self) -> int:
        """Number of stored entries, fresh or not yet evicted."""
        return sum(len(entries) for entries in self._maps.values())

    def _resolve(self, namespace: Namespace | str) -> Namespace:
        ns = Namespace(namespace)
        if ns in DURABLE_NAMESPACES:
            raise ValueError(
                f"Namespace {ns.value!r} is durable; use SitemapCache instead of CacheStore"
            )
        return ns
