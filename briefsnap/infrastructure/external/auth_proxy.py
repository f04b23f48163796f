"""Reverse proxy to the identity provider's `/__/auth/` handler pages."""

from __future__ import annotations

import logging
from dataclasses import replace

import httpx

from briefsnap.infrastructure.external.http_policy import CallPolicy

logger = logging.getLogger(__name__)

# Hop-by-hop and routing headers that must not be forwarded either way
_SKIP_REQUEST_HEADERS = frozenset({"host", "content-length", "connection", "accept-encoding"})
_SKIP_RESPONSE_HEADERS = frozenset(
    {"content-length", "content-encoding", "transfer-encoding", "connection"}
)

# Methods safe to resend after a network error
_IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "OPTIONS", "PUT", "DELETE"})


class AuthProxy:
    """Forwards method, headers, body and query string to https://<auth_domain>/__/auth/<path>."""

    def __init__(self, http: httpx.AsyncClient, auth_domain: str, policy: CallPolicy) -> None:
        self._http = http
        self._base = f"https://{auth_domain}/__/auth"
        self._policy = policy

    def target_url(self, path: str, query: str = "") -> str:
        url = f"{self._base}/{path.lstrip('/')}"
        return f"{url}?{query}" if query else url

    async def forward(
        self,
        method: str,
        path: str,
        query: str,
        headers: dict[str, str],
        body: bytes,
    ) -> httpx.Response:
        """Send the request upstream and return the upstream response.

        Only idempotent methods are retried; a POST is sent once.
        """
        url = self.target_url(path, query)
        logger.debug("Proxying %s to %s", method, url)
        forwarded = {k: v for k, v in headers.items() if k.lower() not in _SKIP_REQUEST_HEADERS}
        policy = self._policy
        if method.upper() not in _IDEMPOTENT_METHODS:
            policy = replace(policy, retries=0)
        return await policy.request(
            self._http,
            method,
            url,
            headers=forwarded,
            content=body if method.upper() not in ("GET", "HEAD") else None,
        )

    @staticmethod
    def response_headers(response: httpx.Response) -> list[tuple[str, str]]:
        """Upstream headers to relay; repeated headers (set-cookie) stay separate."""
        return [
            (k, v)
            for k, v in response.headers.multi_items()
            if k.lower() not in _SKIP_RESPONSE_HEADERS
        ]
