"""Clients for third-party HTTP APIs, each running under a CallPolicy."""

from briefsnap.infrastructure.external.auth_proxy import AuthProxy
from briefsnap.infrastructure.external.cloudflare_pages import CloudflarePagesTrigger
from briefsnap.infrastructure.external.google_calendar import GoogleCalendarGateway
from briefsnap.infrastructure.external.http_policy import CallPolicies, CallPolicy
from briefsnap.infrastructure.external.moderation import OpenAIModerationClient
from briefsnap.infrastructure.external.nominatim_tomorrow import WeatherApiClient

__all__ = [
    "AuthProxy",
    "CallPolicies",
    "CallPolicy",
    "CloudflarePagesTrigger",
    "GoogleCalendarGateway",
    "OpenAIModerationClient",
    "WeatherApiClient",
]
