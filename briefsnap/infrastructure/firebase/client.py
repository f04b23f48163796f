"""Firestore client construction from service-account credentials.

FIREBASE_SERVICE_ACCOUNT_KEY (inline JSON) wins over
FIREBASE_SERVICE_ACCOUNT_PATH (a key file). With neither, or with an
unusable key, there is no client: the app still starts, crawlers get the
SPA shell and data endpoints answer 503.
"""

import json
import logging
from pathlib import Path

import httpx

from briefsnap.core.config import Settings
from briefsnap.infrastructure.firebase._rest_client import (
    FirestoreRESTClient,
    _get_credentials,
)

logger = logging.getLogger(__name__)


def _service_account(settings: Settings) -> dict | None:
    if settings.firebase_service_account_key:
        raw = settings.firebase_service_account_key.get_secret_value()
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValueError("FIREBASE_SERVICE_ACCOUNT_KEY is not valid JSON") from e
    if not settings.firebase_service_account_path:
        return None
    path = Path(settings.firebase_service_account_path).expanduser()
    if not path.is_file():
        logger.warning("Service account file not found: %s", path)
        return None
    return json.loads(path.read_text(encoding="utf-8"))


def init_firebase(
    settings: Settings, http_client: httpx.AsyncClient | None = None
) -> FirestoreRESTClient | None:
    """Return a Firestore client, or None when credentials are absent or unusable."""
    try:
        account = _service_account(settings)
        if not account:
            logger.info("Firestore not configured; data endpoints disabled")
            return None
        project_id = account.get("project_id")
        if not project_id:
            logger.error("Service account JSON has no project_id")
            return None
        client = FirestoreRESTClient(project_id, _get_credentials(account), http_client=http_client)
    except Exception:
        logger.exception("Firestore initialization failed")
        return None
    logger.info("Firestore client ready for project %s", project_id)
    return client


async def close_firebase(client: FirestoreRESTClient | None) -> None:
    if client is not None:
        await client.aclose()
        logger.info("Firestore HTTP client closed")
