"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

import shlex
import sys
from functools import lru_cache
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import VolumeFloat
from ..domain.shared.validators import split_csv, validate_discord_snowflake

AudioFormat = Literal["mp3", "opus", "m4a", "wav"]

DEFAULT_RESOLVER_COMMAND: tuple[str, ...] = (sys.executable, "-m", "yt_dlp")
DEFAULT_MAX_OUTPUT_BYTES: int = 10 * 1024 * 1024  # 10 MiB


class DiscordSettings(BaseModel):
    """Discord bot configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    token: SecretStr = Field(
        default=SecretStr(""), validation_alias=AliasChoices("token", "bot_token", "discord_token")
    )
    application_id: int | None = Field(
        default=None, validation_alias=AliasChoices("application_id", "app_id")
    )
    guild_ids: tuple[int, ...] = Field(
        default_factory=tuple, validation_alias=AliasChoices("guild_ids", "guilds")
    )
    sync_on_startup: bool = False

    @field_validator("guild_ids", mode="before")
    @classmethod
    def validate_snowflake_ids(cls, v: Any) -> tuple[int, ...]:
        """Validate Discord snowflake IDs; accept a JSON array or a comma-separated string."""
        if isinstance(v, str):
            v = [int(part) for part in split_csv(v)]
        if isinstance(v, int):
            v = (v,)
        v = tuple(v)
        for snowflake in v:
            validate_discord_snowflake(snowflake)
        return v


class AudioSettings(BaseModel):
    """Audio download and playback configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    temp_dir: str = Field(
        default="temp_music", validation_alias=AliasChoices("temp_dir", "download_dir")
    )
    audio_format: AudioFormat = "mp3"
    default_volume: VolumeFloat = 0.5
    ffmpeg_options: dict[str, str] = Field(
        default_factory=lambda: {
            "before_options": "-nostdin",
            "options": "-vn",
        }
    )


class ResolverSettings(BaseModel):
    """yt-dlp process configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    command: tuple[str, ...] = Field(
        default=DEFAULT_RESOLVER_COMMAND,
        validation_alias=AliasChoices("command", "ytdlp_command"),
    )
    timeout_seconds: float = Field(default=120.0, gt=0.0, le=3600.0)
    max_output_bytes: int = Field(default=DEFAULT_MAX_OUTPUT_BYTES, ge=1024)

    @field_validator("command", mode="before")
    @classmethod
    def validate_command(cls, v: Any) -> tuple[str, ...]:
        """Accept an argv list or a shell-style string such as ``"yt-dlp --cookies c.txt"``."""
        if isinstance(v, str):
            v = shlex.split(v)
        v = tuple(v)
        if not v:
            raise ValueError(ErrorMessages.EMPTY_RESOLVER_COMMAND)
        return v


class PlaybackSettings(BaseModel):
    """Per-guild playback engine configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    idle_disconnect_seconds: int = Field(
        default=300,
        ge=0,
        validation_alias=AliasChoices("idle_disconnect_seconds", "idle_timeout"),
    )
    max_advance_attempts: int = Field(default=10, ge=1, le=100)
    connect_timeout_seconds: float = Field(default=10.0, gt=0.0, le=120.0)


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - DISCORD__TOKEN, DISCORD__GUILD_IDS, DISCORD__SYNC_ON_STARTUP
    - AUDIO__TEMP_DIR, AUDIO__AUDIO_FORMAT, AUDIO__DEFAULT_VOLUME, AUDIO__FFMPEG_OPTIONS
    - RESOLVER__COMMAND, RESOLVER__TIMEOUT_SECONDS, RESOLVER__MAX_OUTPUT_BYTES
    - PLAYBACK__IDLE_DISCONNECT_SECONDS, PLAYBACK__MAX_ADVANCE_ATTEMPTS,
      PLAYBACK__CONNECT_TIMEOUT_SECONDS
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    discord: DiscordSettings = Field(default_factory=DiscordSettings)
    audio: AudioSettings = Field(default_factory=AudioSettings)
    resolver: ResolverSettings = Field(default_factory=ResolverSettings)
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
