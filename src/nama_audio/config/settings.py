"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.constants import ChantConstants
from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import VolumePercent


class LedgerSettings(BaseModel):
    """Ledger database configuration."""

    model_config = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

    url: str = Field(
        default="sqlite:///data/namas.db",
        validation_alias=AliasChoices("url", "database_url", "db_url"),
    )
    busy_timeout_ms: int = Field(
        default=5000,
        ge=1000,
        le=30000,
        validation_alias=AliasChoices("busy_timeout_ms", "busy_timeout"),
    )
    connection_timeout_s: int = Field(
        default=10,
        ge=1,
        le=60,
        validation_alias=AliasChoices("connection_timeout_s", "connection_timeout"),
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate ledger URL format."""
        if not v.startswith("sqlite://") and v != ":memory:":
            raise ValueError(ErrorMessages.INVALID_LEDGER_URL)
        return v


class CatalogSettings(BaseModel):
    """Audio catalog configuration."""

    model_config = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

    media_dir: str = Field(
        default="media", validation_alias=AliasChoices("media_dir", "audio_dir")
    )
    audio_extensions: tuple[str, ...] = (".mp3", ".wav", ".ogg", ".m4a", ".aac", ".flac")
    repeating_prefix: str = Field(default="NamaJapa_", min_length=1)
    repeating_max_loops: int = Field(default=ChantConstants.REPEATING_MAX_LOOPS, ge=1, le=108)
    single_max_loops: int = Field(default=ChantConstants.DEFAULT_MAX_LOOPS, ge=1, le=108)

    @field_validator("audio_extensions", mode="before")
    @classmethod
    def normalize_extensions(cls, v: tuple[str, ...] | list[str]) -> tuple[str, ...]:
        """Lower-case extensions and make sure each starts with a dot."""
        return tuple(ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in v)


class PlaybackSettings(BaseModel):
    """External player configuration."""

    model_config = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

    ffplay_path: str = Field(
        default="ffplay", validation_alias=AliasChoices("ffplay_path", "player_path")
    )
    ready_timeout_s: float = Field(default=10.0, gt=0.0, le=120.0)
    volume: VolumePercent = 100


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, LOG_LEVEL (top-level)
    - LEDGER__URL, LEDGER__BUSY_TIMEOUT_MS, ... (nested with delimiter)
    - CATALOG__MEDIA_DIR, CATALOG__REPEATING_PREFIX, ...
    - PLAYBACK__FFPLAY_PATH, PLAYBACK__READY_TIMEOUT_S, ...
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        strict=True,
    )

    environment: Literal["development", "production", "test"] = "development"
    log_level: str = "INFO"

    ledger: LedgerSettings = Field(default_factory=LedgerSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    playback: PlaybackSettings = Field(default_factory=PlaybackSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels))
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
