"""Redis-backed durable cache for the sitemap listing.

The sitemap namespace alone outlives the process: its value is kept in
Redis with a 1-hour TTL (SETEX). Like the in-memory store it never fails:
when Redis is unreachable a get is a miss and a set is dropped.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import redis.asyncio as redis

from briefsnap.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

_CONNECTION_ERRORS = (redis.ConnectionError, redis.TimeoutError)


class SitemapCache:
    """Async Redis cache for the sitemap article listing.

    Call connect() at startup and disconnect() at shutdown. A client passed
    in (tests, DI) counts as connected.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.redis = redis_client
        self.settings = settings or get_settings()
        self.ttl = self.settings.sitemap_cache_ttl_seconds
        self._connected = redis_client is not None

    def _new_client(self) -> redis.Redis:
        password = self.settings.redis_password
        return redis.Redis(
            host=self.settings.redis_host,
            port=self.settings.redis_port,
            db=self.settings.redis_db,
            password=password.get_secret_value() if password else None,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_keepalive=True,
        )

    async def connect(self) -> None:
        if self.redis is not None:
            return
        client = self._new_client()
        try:
            await client.ping()
        except _CONNECTION_ERRORS as e:
            logger.warning("Redis unreachable (%s); sitemap listing will not persist", e)
            await client.aclose()
            return
        self.redis = client
        self._connected = True
        logger.info(
            "Sitemap cache connected: %s:%s", self.settings.redis_host, self.settings.redis_port
        )

    async def disconnect(self) -> None:
        if self.redis is None:
            return
        await self.redis.aclose()
        self.redis = None
        self._connected = False
        logger.info("Sitemap cache disconnected")

    async def _reconnect(self) -> bool:
        """Drop a broken connection and open a new one. True if usable again."""
        if self.redis is not None:
            try:
                await self.redis.aclose()
            except redis.RedisError:
                logger.debug("Ignoring error while closing stale Redis connection")
        self.redis = None
        self._connected = False
        await self.connect()
        return self._connected

    def is_available(self) -> bool:
        return self._connected and self.redis is not None

    async def _run(
        self,
        action: str,
        key: str,
        command: Callable[[redis.Redis], Awaitable[T]],
        default: T,
    ) -> T:
        """Run one Redis command; on a dropped connection reconnect once and retry.

        Any Redis failure is logged and answered with default.
        """
        if not self.is_available() or self.redis is None:
            return default
        try:
            return await command(self.redis)
        except _CONNECTION_ERRORS:
            if not await self._reconnect() or self.redis is None:
                logger.warning("Sitemap cache %s skipped for %s: Redis unavailable", action, key)
                return default
            try:
                return await command(self.redis)
            except redis.RedisError:
                logger.exception("Sitemap cache %s failed for %s after reconnect", action, key)
                return default
        except redis.RedisError:
            logger.exception("Sitemap cache %s failed for %s", action, key)
            return default

    async def get(self, key: str) -> Any | None:
        """Stored listing (JSON-decoded), or None when missing or Redis is down."""
        raw = await self._run("get", key, lambda r: r.get(key), None)
        logger.debug("Durable cache %s: %s", "MISS" if raw is None else "HIT", key)
        return None if raw is None else json.loads(raw)

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Store value for ttl seconds (default sitemap_cache_ttl_seconds). True on success."""
        ttl = ttl or self.ttl
        payload = json.dumps(value)

        async def setex(client: redis.Redis) -> bool:
            await client.setex(key, ttl, payload)
            return True

        return await self._run("set", key, setex, False)

    async def delete(self, key: str) -> bool:
        """Remove key. True if the command ran."""

        async def delete(client: redis.Redis) -> bool:
            await client.delete(key)
            return True

        return await self._run("delete", key, delete, False)
