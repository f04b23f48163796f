"""Timeout and retry policy per external call type.

Each outbound call runs under a CallPolicy: a per-request timeout and a
bounded number of retries on network errors (tenacity). HTTP status errors
are answers, not network failures, and are never retried here.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from briefsnap.core.config import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CallPolicy:
    """Timeout plus retry budget for one kind of external call.

    Attributes:
        name: Call type, used in logs.
        timeout_seconds: Per-attempt timeout passed to httpx.
        retries: Extra attempts after the first failure.
        wait_seconds: Fixed pause between attempts.
        retry_on: Exception types that trigger a retry.
    """

    name: str
    timeout_seconds: float
    retries: int = 1
    wait_seconds: float = 0.0
    retry_on: tuple[type[BaseException], ...] = field(default=(httpx.TransportError,))

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            retry=retry_if_exception_type(self.retry_on),
            stop=stop_after_attempt(self.retries + 1),
            wait=wait_fixed(self.wait_seconds),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

    async def call(self, func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """Await func(*args, **kwargs), retrying per policy; the last error propagates."""
        async for attempt in self._retrying():
            with attempt:
                return await func(*args, **kwargs)
        raise AssertionError("unreachable")  # pragma: no cover

    async def request(
        self, client: httpx.AsyncClient, method: str, url: str, **kwargs: Any
    ) -> httpx.Response:
        """Send one HTTP request under this policy's timeout and retry budget."""
        kwargs.setdefault("timeout", self.timeout_seconds)
        return await self.call(client.request, method, url, **kwargs)


@dataclass(frozen=True)
class CallPolicies:
    """The policy for every external call type the service makes."""

    moderation: CallPolicy
    geocoding: CallPolicy
    weather: CallPolicy
    calendar: CallPolicy
    deploy: CallPolicy
    auth_proxy: CallPolicy
    comment_write: CallPolicy

    @classmethod
    def from_settings(cls, settings: Settings) -> CallPolicies:
        timeout = settings.external_timeout_seconds
        retries = settings.external_network_retries
        return cls(
            moderation=CallPolicy("moderation", timeout, retries),
            geocoding=CallPolicy("geocoding", timeout, retries),
            weather=CallPolicy("weather", timeout, retries),
            calendar=CallPolicy("calendar", timeout, retries),
            deploy=CallPolicy("deploy", timeout, retries),
            auth_proxy=CallPolicy("auth_proxy", timeout, retries),
            # The comment write retries any failure, not just network errors
            comment_write=CallPolicy(
                "comment_write",
                timeout,
                retries=settings.comment_write_attempts - 1,
                wait_seconds=settings.comment_write_retry_delay_seconds,
                retry_on=(Exception,),
            ),
        )
