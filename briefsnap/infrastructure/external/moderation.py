"""Content-moderation API client (OpenAI moderations endpoint over httpx)."""

from __future__ import annotations

import logging

import httpx

from briefsnap.application.dtos.moderation import ModerationVerdict
from briefsnap.domain.exceptions import ModerationUnavailableException
from briefsnap.infrastructure.external.http_policy import CallPolicy
from briefsnap.shared.telemetry import traced

logger = logging.getLogger(__name__)


class OpenAIModerationClient:
    """Classifies comment text. Every failure maps to ModerationUnavailableException."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_key: str,
        policy: CallPolicy,
        url: str = "https://api.openai.com/v1/moderations",
    ) -> None:
        self._http = http
        self._api_key = api_key
        self._policy = policy
        self._url = url

    @traced("moderation.moderate")
    async def moderate(self, text: str) -> ModerationVerdict:
        try:
            resp = await self._policy.request(
                self._http,
                "POST",
                self._url,
                headers={"Authorization": f"Bearer {self._api_key}"},
                json={"input": text},
            )
            resp.raise_for_status()
            result = resp.json()["results"][0]
            categories = result.get("categories") or {}
            return ModerationVerdict(
                flagged=bool(result["flagged"]),
                categories={k: bool(v) for k, v in categories.items()},
            )
        except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError) as e:
            logger.error("Moderation API call failed: %s", e)
            raise ModerationUnavailableException() from e
