"""Application settings and configuration management.

This module provides Pydantic-based settings management that loads
configuration from environment variables or a .env file. Settings cover
the upstream geological-features service, the viewport cache policy
(time-to-live, capacity, padding), CORS origins and logging.

Example:
    Settings can be accessed via the cached get_settings() function:
        >>> from geoid.core.config import get_settings
        >>> settings = get_settings()
        >>> print(settings.features_api_base_url)

    Environment variables can override defaults:
        >>> FEATURES_API_BASE_URL=https://geoid.example.com
        >>> CACHE_TTL_SECONDS=120
        >>> MAX_CACHE_ENTRIES=25
"""

import functools

import pydantic
import pydantic_settings


class Settings(pydantic_settings.BaseSettings):
    """Runtime configuration pulled from environment variables or defaults.

    All settings can be overridden via environment variables or .env file.

    Attributes:
        features_api_base_url: Base URL of the upstream service exposing
            /api/geological-features, /api/explore-pois and
            /api/fault-deep-dive.
        request_timeout_seconds: Timeout applied to every upstream request.
        cache_ttl_seconds: Age at which a cached viewport expires.
        max_cache_entries: Number of viewports kept before FIFO eviction.
        cache_padding_fraction: Fraction of the requested height/width added
            to each side of a cached viewport.
        allow_origins: List of allowed CORS origins (["*"] allows all).
        log_level: Root log level name.
        log_json: Emit JSON log lines instead of plain text.

    Example:
        Create settings with custom values:
            >>> settings = Settings(
            ...     features_api_base_url="http://localhost:5000",
            ...     cache_ttl_seconds=60,
            ...     max_cache_entries=5,
            ... )
    """

    features_api_base_url: pydantic.AnyHttpUrl = pydantic.Field(
        default="http://localhost:5000", validate_default=True
    )
    request_timeout_seconds: float = pydantic.Field(default=15.0, gt=0)
    cache_ttl_seconds: float = pydantic.Field(default=300.0, gt=0)
    max_cache_entries: int = pydantic.Field(default=10, ge=1)
    cache_padding_fraction: float = pydantic.Field(default=0.2, ge=0)
    allow_origins: list[str] = ["*"]
    log_level: str = "INFO"
    log_json: bool = True

    model_config = pydantic_settings.SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @property
    def features_base_url(self) -> str:
        """Base URL without a trailing slash."""
        return str(self.features_api_base_url).rstrip("/")


@functools.lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Settings are loaded from environment variables or .env file and cached
    for the lifetime of the application. Subsequent calls return the same
    cached instance.

    Returns:
        Settings instance with all configuration values populated.
    """
    return Settings()
