"""GoogleCalendarGateway.reauthorize: every auth-library failure gives None."""

import pytest
from google.auth.exceptions import RefreshError, TransportError

from briefsnap.core.config import Settings
from briefsnap.infrastructure.external.google_calendar import GoogleCalendarGateway
from briefsnap.infrastructure.external.http_policy import CallPolicy


@pytest.fixture
def gateway() -> GoogleCalendarGateway:
    settings = Settings(google_oauth_client_id="client-id", google_oauth_client_secret="secret")
    return GoogleCalendarGateway(settings, CallPolicy("calendar", timeout_seconds=5))


@pytest.mark.parametrize(
    "error",
    [RefreshError("invalid_grant"), TransportError("connection reset")],
)
async def test_reauthorize_failure_gives_none(gateway, monkeypatch, error) -> None:
    def refresh(refresh_token: str):
        raise error

    monkeypatch.setattr(gateway, "_refresh_sync", refresh)
    assert await gateway.reauthorize({"refresh_token": "r1"}) is None


async def test_reauthorize_without_refresh_token_gives_none(gateway) -> None:
    assert await gateway.reauthorize({"access_token": "a1"}) is None
