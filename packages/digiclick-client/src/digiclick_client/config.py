"""Client configuration via environment variables."""

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Seconds. 0 means the endpoint is never cached.
DEFAULT_ENDPOINT_CACHE_DURATIONS: dict[str, float] = {
    "/api/contact": 0,
    "/api/demo": 0,
    "/api/newsletter": 300,
    "/api/analytics": 1800,
    "/api/services": 3600,
    "/api/pricing": 3600,
    "/api/team": 86400,
    "/api/testimonials": 3600,
    "/api/blog": 1800,
    "/api/faq": 86400,
}

# Writes to the key endpoint also invalidate cached reads of these.
RELATED_ENDPOINTS: dict[str, tuple[str, ...]] = {
    "/api/contact": ("/api/analytics",),
    "/api/demo": ("/api/analytics",),
    "/api/newsletter": ("/api/analytics",),
    "/api/services": ("/api/pricing",),
    "/api/team": ("/api/services",),
    "/api/blog": ("/api/analytics",),
}


class Settings(BaseSettings):
    """Client settings loaded from environment variables and .env file."""

    api_url: str = "http://localhost:3001"
    environment: str = "development"

    request_retries: int = 3
    retry_delay_seconds: float = 1.0
    request_timeout_seconds: float = 30.0

    cache_duration_seconds: float = 300
    endpoint_cache_durations: dict[str, float] = Field(
        default_factory=lambda: dict(DEFAULT_ENDPOINT_CACHE_DURATIONS)
    )

    rate_limit_max_requests: int = 60
    rate_limit_window_seconds: float = 60.0

    model_config = SettingsConfigDict(
        env_prefix="DIGICLICK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def validate_limits(self) -> None:
        """Raise if retry, timeout or rate-limit settings are unusable."""
        if self.request_retries < 0:
            raise ValueError("request_retries must be >= 0")
        if self.retry_delay_seconds < 0:
            raise ValueError("retry_delay_seconds must be >= 0")
        if self.request_timeout_seconds <= 0:
            raise ValueError("request_timeout_seconds must be > 0")
        if self.rate_limit_max_requests < 1:
            raise ValueError("rate_limit_max_requests must be >= 1")
        if self.rate_limit_window_seconds <= 0:
            raise ValueError("rate_limit_window_seconds must be > 0")

    def cache_duration_for(self, endpoint: str) -> float:
        """Return the cache TTL for an endpoint, matching the longest path prefix."""
        path = endpoint.split("?", 1)[0]
        best: str | None = None
        for prefix in self.endpoint_cache_durations:
            if path.startswith(prefix) and (best is None or len(prefix) > len(best)):
                best = prefix
        if best is None:
            return self.cache_duration_seconds
        return self.endpoint_cache_durations[best]


def configure_logging(settings: Settings) -> None:
    """Set up root logging the same way for the CLI and embedding applications."""
    logging.basicConfig(
        level=logging.DEBUG if settings.environment == "development" else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings singleton."""
    return Settings()
