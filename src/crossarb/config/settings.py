"""
Application settings with environment variable support.

Uses Pydantic Settings for type-safe configuration with automatic
environment variable loading and validation.
"""

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, Literal

import orjson
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from crossarb.config.constants import (
    DEFAULT_HOST,
    DEFAULT_MAX_CONCURRENCY,
    DEFAULT_PORT,
    DEFAULT_THRESHOLD_PCT,
    DEFAULT_VENUE_TIMEOUT_MS,
    DEFAULT_VENUES,
)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables
    or a local .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Venues
    # =========================================================================

    venues: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_VENUES),
        min_length=1,
        description="Ordered ccxt exchange ids to scan (comma separated or JSON list)",
    )

    venue_timeout_ms: int = Field(
        default=DEFAULT_VENUE_TIMEOUT_MS,
        ge=1,
        description="Timeout for a single venue request in milliseconds",
    )

    venue_timeouts_ms: dict[str, int] = Field(
        default_factory=dict,
        description="Per-venue timeout overrides in milliseconds",
    )

    # =========================================================================
    # Scanning
    # =========================================================================

    threshold_pct: float = Field(
        default=DEFAULT_THRESHOLD_PCT,
        ge=0.0,
        description="Minimum price divergence to report, in percent (0.5 = 0.5%)",
    )

    max_concurrency: int = Field(
        default=DEFAULT_MAX_CONCURRENCY,
        ge=1,
        le=1024,
        description="Maximum venue requests in flight (1 = sequential)",
    )

    # =========================================================================
    # HTTP Server
    # =========================================================================

    host: str = Field(
        default=DEFAULT_HOST,
        description="Interface the HTTP server binds to",
    )

    port: int = Field(
        default=DEFAULT_PORT,
        ge=1,
        le=65535,
        description="Port the HTTP server listens on",
    )

    static_dir: Path | None = Field(
        default=None,
        description="Directory of static files served at the site root",
    )

    # =========================================================================
    # Operation Mode
    # =========================================================================

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )

    log_file: Path | None = Field(
        default=None,
        description="Optional file that receives DEBUG-level logs",
    )

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("venues", mode="before")
    @classmethod
    def split_venues(cls, v: Any) -> Any:
        """Accept a comma separated string as well as a list."""
        if isinstance(v, str):
            stripped = v.strip()
            if stripped.startswith("["):
                return orjson.loads(stripped)
            return [item.strip() for item in stripped.split(",") if item.strip()]
        return v

    @field_validator("venues", mode="after")
    @classmethod
    def validate_venues(cls, v: list[str]) -> list[str]:
        """Ensure venue ids are normalized, non-empty and unique."""
        normalized = [venue.strip().lower() for venue in v]
        if any(not venue for venue in normalized):
            raise ValueError("Venue id cannot be empty")
        if len(set(normalized)) != len(normalized):
            raise ValueError(f"Duplicate venue ids in {normalized}")
        return normalized

    @field_validator("venue_timeouts_ms", mode="after")
    @classmethod
    def validate_timeouts(cls, v: dict[str, int]) -> dict[str, int]:
        """Ensure per-venue overrides are positive."""
        for venue, timeout in v.items():
            if timeout < 1:
                raise ValueError(f"Timeout for {venue} must be at least 1 ms")
        return {venue.lower(): timeout for venue, timeout in v.items()}

    @model_validator(mode="after")
    def validate_overrides_known(self) -> "Settings":
        """Warn about timeout overrides for venues that are not scanned."""
        unknown = set(self.venue_timeouts_ms) - set(self.venues)
        if unknown:
            import warnings

            warnings.warn(
                f"Timeout overrides for unconfigured venues are ignored: {sorted(unknown)}",
                stacklevel=2,
            )
        return self

    # =========================================================================
    # Computed Properties
    # =========================================================================

    def timeout_ms_for(self, venue_id: str) -> int:
        """Get the request timeout for a venue in milliseconds."""
        return self.venue_timeouts_ms.get(venue_id, self.venue_timeout_ms)

    def timeout_for(self, venue_id: str) -> float:
        """Get the request timeout for a venue in seconds."""
        return self.timeout_ms_for(venue_id) / 1000.0

    @property
    def is_sequential(self) -> bool:
        """Whether venue requests run one at a time."""
        return self.max_concurrency == 1


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to ensure settings are loaded only once.
    Clear cache with `get_settings.cache_clear()` if needed.
    """
    return Settings()
