"""Cloudflare Pages deployment trigger (implements IDeploymentTrigger)."""

from __future__ import annotations

import logging

import httpx

from briefsnap.core.config import Settings
from briefsnap.infrastructure.external.http_policy import CallPolicy
from briefsnap.shared.telemetry import traced

logger = logging.getLogger(__name__)

_COMPATIBILITY_DATE = "2023-05-18"


class CloudflarePagesTrigger:
    """Starts a new deployment of the static site."""

    def __init__(self, http: httpx.AsyncClient, settings: Settings, policy: CallPolicy) -> None:
        self._http = http
        self._policy = policy
        self._url = (
            f"{settings.cloudflare_api_base.rstrip('/')}/accounts/{settings.cloudflare_account_id}"
            f"/pages/projects/{settings.cloudflare_project_name}/deployments"
        )
        self._token = (
            settings.cloudflare_api_token.get_secret_value() if settings.cloudflare_api_token else ""
        )

    @traced("deploy.trigger")
    async def trigger(self) -> bool:
        """Return True when the platform accepted the deployment request."""
        try:
            resp = await self._policy.request(
                self._http,
                "POST",
                self._url,
                headers={"Authorization": f"Bearer {self._token}"},
                json={"compatibility_date": _COMPATIBILITY_DATE, "compatibility_flags": []},
            )
        except httpx.HTTPError as e:
            logger.error("Failed to trigger build: %s", e)
            return False
        if not resp.is_success:
            logger.error("Failed to trigger build: %s %s", resp.status_code, resp.text)
            return False
        logger.info("Build triggered successfully")
        return True
