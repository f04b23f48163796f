"""Firebase Auth ID-token verification (google-auth, no firebase-admin)."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from google.auth import exceptions as google_auth_exceptions
from google.auth.transport.requests import Request
from google.oauth2 import id_token

from briefsnap.domain.exceptions import AuthenticationException

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthenticatedUser:
    uid: str
    email: str | None = None
    name: str | None = None
    picture: str | None = None


class FirebaseTokenVerifier:
    """Checks Firebase ID tokens against Google's public certificates.

    The check (certificate fetch + signature) is blocking, so it runs in a
    worker thread.
    """

    def __init__(self, project_id: str) -> None:
        self.project_id = project_id
        self._request = Request()

    def _verify_sync(self, token: str) -> dict[str, Any]:
        return id_token.verify_firebase_token(token, self._request, audience=self.project_id)

    async def verify(self, token: str) -> AuthenticatedUser:
        """Return the token's user; raise AuthenticationException if invalid."""
        try:
            claims = await asyncio.to_thread(self._verify_sync, token)
        except (ValueError, google_auth_exceptions.GoogleAuthError) as e:
            logger.info("Rejected ID token: %s", e)
            raise AuthenticationException("Invalid ID token") from e
        uid = (claims or {}).get("user_id") or (claims or {}).get("sub")
        if not uid:
            raise AuthenticationException("Invalid ID token")
        return AuthenticatedUser(
            uid=uid,
            email=claims.get("email"),
            name=claims.get("name"),
            picture=claims.get("picture"),
        )
