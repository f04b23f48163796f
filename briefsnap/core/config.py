"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Cross-field rules are validated at load time; Firestore
and third-party credentials are optional so the app can start without them.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    Every setting has a default. Features whose credentials are missing
    (Firestore, moderation, weather, deploy hook) answer 503 at request time
    instead of failing startup.
    """

    # App
    app_name: str = "briefsnap"
    app_version: str = "1.0.0"
    debug: bool = False
    site_base_url: str = "https://briefsnap.com"
    site_name: str = "BriefSnap"
    twitter_handle: str = "@briefsnap"
    # Built single-page app (index.html, pre-generated article/<slug>.html pages)
    static_root: str = "build"

    # CORS
    allowed_origins: str = "*"

    # Firebase / Firestore: use key (env) or path (file).
    firebase_service_account_key: SecretStr | None = None
    firebase_service_account_path: str | None = None
    firebase_auth_domain: str = "briefsnap-76b64.firebaseapp.com"

    # In-memory cache durations (seconds)
    cache_ttl_default_seconds: int = 300
    cache_ttl_weather_seconds: int = 1800
    cache_ttl_calendar_seconds: int = 300

    # Durable sitemap cache (Redis)
    redis_enabled: bool = True
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None
    sitemap_cache_ttl_seconds: int = 3600

    # Comment moderation
    openai_api_key: SecretStr | None = None
    moderation_url: str = "https://api.openai.com/v1/moderations"
    moderation_rate_limit: int = 5
    moderation_rate_window_seconds: int = 60
    comment_write_attempts: int = 3
    comment_write_retry_delay_seconds: float = 1.0

    # Weather / geocoding
    tomorrow_io_api_key: SecretStr | None = None
    weather_forecast_url: str = "https://api.tomorrow.io/v4/weather/forecast"
    nominatim_base_url: str = "https://nominatim.openstreetmap.org"
    nominatim_user_agent: str = "BriefSnap/1.0 (+https://briefsnap.com)"
    weather_max_retries: int = 3
    weather_retry_delay_seconds: float = 5.0

    # Google Calendar (refresh-token grant for re-authorization)
    google_oauth_client_id: str | None = None
    google_oauth_client_secret: SecretStr | None = None
    google_token_uri: str = "https://oauth2.googleapis.com/token"

    # Rebuild webhook / Cloudflare Pages
    webhook_secret: SecretStr | None = None
    cloudflare_account_id: str | None = None
    cloudflare_project_name: str | None = None
    cloudflare_api_token: SecretStr | None = None
    cloudflare_api_base: str = "https://api.cloudflare.com/client/v4"
    rebuild_debounce_seconds: float = 0.0

    # Outbound calls: per-call timeout and single retry on network error
    external_timeout_seconds: float = 10.0
    external_network_retries: int = 1

    # Request / middleware
    request_timeout_seconds: int = 60
    request_id_header: str = "X-Request-ID"

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_limits(self) -> "Settings":
        """Validate durations and limits.

        - Cache TTLs must be positive.
        - Moderation rate limit must allow at least one request per window.
        - Rebuild debounce delay cannot be negative (0 disables debouncing).
        """
        for name in (
            "cache_ttl_default_seconds",
            "cache_ttl_weather_seconds",
            "cache_ttl_calendar_seconds",
            "sitemap_cache_ttl_seconds",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)!r}")
        if self.moderation_rate_limit < 1 or self.moderation_rate_window_seconds < 1:
            raise ValueError(
                "moderation_rate_limit and moderation_rate_window_seconds must be >= 1"
            )
        if self.comment_write_attempts < 1:
            raise ValueError("comment_write_attempts must be >= 1")
        if self.rebuild_debounce_seconds < 0:
            raise ValueError("rebuild_debounce_seconds must be >= 0")
        if self.external_network_retries < 0:
            raise ValueError("external_network_retries must be >= 0")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
