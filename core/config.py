"""Application configuration with environment-specific profiles.

Supports dev, staging, production and test environments via APP_ENV.
All values can be overridden by environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache

from core.services.training_load import WindowConfig


@dataclass(frozen=True)
class Settings:
    """Immutable application settings resolved from environment."""

    database_url: str
    app_env: str = "dev"
    log_level: str = "INFO"

    # Load windows (chronic = acute * multiplier in the product configuration)
    acute_days: int = 7
    chronic_multiplier: int = 4

    # Readiness bands (badge and board flag)
    readiness_green_min: float = 80.0
    readiness_amber_min: float = 60.0

    # Read-model cache
    redis_url: str = "redis://localhost:6379/0"
    cache_prefix: str = "loadwatch"
    cache_ttl_seconds: int = 60

    # Rate limiting (slowapi)
    rate_limit_enabled: bool = True
    rate_limit_storage_uri: str = "memory://"
    ingest_rate_limit: str = "120/minute"
    board_rate_limit: str = "60/minute"

    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:5173"])
    request_id_header_name: str = "X-Request-ID"

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"

    @property
    def chronic_days(self) -> int:
        return self.acute_days * self.chronic_multiplier

    def window_config(self, acute_days: int | None = None) -> WindowConfig:
        """Build the window config for an acute window, deriving the chronic window."""
        return WindowConfig.from_acute(acute_days or self.acute_days, self.chronic_multiplier)


# -- Environment profiles --

_ENV_PROFILES: dict[str, dict] = {
    "dev": {
        "log_level": "DEBUG",
        "cache_ttl_seconds": 5,
        "rate_limit_enabled": False,
    },
    "test": {
        "log_level": "WARNING",
        "cache_ttl_seconds": 60,
        "rate_limit_enabled": False,
    },
    "staging": {
        "log_level": "INFO",
        "cache_ttl_seconds": 60,
    },
    "production": {
        "log_level": "WARNING",
        "cache_ttl_seconds": 300,
    },
}


def get_database_url() -> str:
    """Resolve database URL from the environment, falling back to a local default."""
    env_url = os.getenv("DATABASE_URL")
    if env_url:
        return env_url
    return "postgresql+psycopg2://localhost:5432/loadwatch"


def _split_csv(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build Settings by merging environment profile with env-var overrides."""
    app_env = os.getenv("APP_ENV", "dev")
    profile = _ENV_PROFILES.get(app_env, _ENV_PROFILES["dev"])

    return Settings(
        database_url=get_database_url(),
        app_env=app_env,
        log_level=os.getenv("LOG_LEVEL", profile.get("log_level", "INFO")),
        acute_days=int(os.getenv("ACUTE_DAYS", "7")),
        chronic_multiplier=int(os.getenv("CHRONIC_MULTIPLIER", "4")),
        readiness_green_min=float(os.getenv("READINESS_GREEN_MIN", "80")),
        readiness_amber_min=float(os.getenv("READINESS_AMBER_MIN", "60")),
        redis_url=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
        cache_prefix=os.getenv("CACHE_PREFIX", "loadwatch"),
        cache_ttl_seconds=int(os.getenv("CACHE_TTL_SECONDS", str(profile.get("cache_ttl_seconds", 60)))),
        cors_origins=_split_csv(os.getenv("CORS_ORIGINS", "http://localhost:5173")),
        rate_limit_enabled=os.getenv("RATE_LIMIT_ENABLED", str(profile.get("rate_limit_enabled", True))).lower() in {"1", "true", "yes"},
        rate_limit_storage_uri=os.getenv("RATE_LIMIT_STORAGE_URI", "memory://"),
        ingest_rate_limit=os.getenv("INGEST_RATE_LIMIT", "120/minute"),
        board_rate_limit=os.getenv("BOARD_RATE_LIMIT", "60/minute"),
        request_id_header_name=os.getenv("REQUEST_ID_HEADER", "X-Request-ID"),
    )


def database_url() -> str:
    return get_settings().database_url
