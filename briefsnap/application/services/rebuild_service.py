"""Rebuild webhook: verify the caller, then trigger a static-site deployment."""

from __future__ import annotations

import hmac
import logging
from enum import Enum
from typing import Any

from briefsnap.application.interfaces import IDeploymentTrigger
from briefsnap.domain.exceptions import AuthenticationException
from briefsnap.shared.debounce import Debouncer
from briefsnap.shared.telemetry import traced

logger = logging.getLogger(__name__)

ARTICLE_CREATE_EVENT = "google.firestore.document.create"


class RebuildOutcome(str, Enum):
    TRIGGERED = "Build triggered"
    FAILED = "Failed to trigger build"
    SCHEDULED = "Build scheduled"
    NO_ACTION = "No action needed"


def is_article_create(payload: dict[str, Any]) -> bool:
    """True for a document-create event on the articles collection.

    Raises ValueError when the payload is not an object or resource is not a string.
    """
    if not isinstance(payload, dict):
        raise ValueError("Webhook payload must be a JSON object")
    if payload.get("eventType") != ARTICLE_CREATE_EVENT:
        return False
    resource = payload.get("resource")
    if not isinstance(resource, str):
        raise ValueError("Webhook payload has no resource")
    return "/articles/" in resource


class RebuildService:
    def __init__(
        self,
        trigger: IDeploymentTrigger,
        secret: str | None,
        debounce_seconds: float = 0.0,
    ) -> None:
        self._trigger = trigger
        self._secret = secret
        self._debouncer: Debouncer[bool] | None = (
            Debouncer(debounce_seconds, trigger.trigger) if debounce_seconds > 0 else None
        )

    @property
    def debouncer(self) -> Debouncer[bool] | None:
        return self._debouncer

    def verify(self, authorization: str | None) -> None:
        """Check the bearer secret in constant time; raise AuthenticationException."""
        if not self._secret or not authorization:
            raise AuthenticationException("Unauthorized")
        expected = f"Bearer {self._secret}".encode()
        if not hmac.compare_digest(authorization.encode(), expected):
            raise AuthenticationException("Unauthorized")

    @traced("webhook.rebuild")
    async def handle(self, payload: dict[str, Any]) -> RebuildOutcome:
        if not is_article_create(payload):
            return RebuildOutcome.NO_ACTION

        logger.info("New article detected, triggering rebuild")
        if self._debouncer is not None:
            self._debouncer.call()
            return RebuildOutcome.SCHEDULED

        if await self._trigger.trigger():
            return RebuildOutcome.TRIGGERED
        return RebuildOutcome.FAILED

    def cancel_pending(self) -> None:
        if self._debouncer is not None:
            self._debouncer.cancel()
