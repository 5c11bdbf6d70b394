"""
Unit Tests for Application Settings Configuration

Tests for:
- Default values for every settings group
- Loading settings from environment variables
- Custom validators (snowflake IDs, resolver command, log level)
- Settings caching and clearing
"""

import sys

import pytest
from pydantic import SecretStr, ValidationError

from bongo_player.config.settings import (
    AudioSettings,
    DiscordSettings,
    PlaybackSettings,
    ResolverSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)

# =============================================================================
# DiscordSettings Tests
# =============================================================================


class TestDiscordSettings:
    def test_defaults(self):
        """Should default to an empty token and no guilds."""
        discord = DiscordSettings()

        assert discord.token.get_secret_value() == ""
        assert discord.application_id is None
        assert discord.guild_ids == ()
        assert discord.sync_on_startup is False

    def test_token_alias(self):
        """Should accept bot_token as an alias."""
        discord = DiscordSettings(bot_token="abc")

        assert discord.token == SecretStr("abc")

    def test_guild_ids_from_csv(self):
        """Should parse a comma-separated list of snowflakes."""
        discord = DiscordSettings(guild_ids="123, 456,,789")

        assert discord.guild_ids == (123, 456, 789)

    def test_single_guild_id(self):
        """Should wrap a single integer into a tuple."""
        assert DiscordSettings(guild_ids=123).guild_ids == (123,)

    def test_invalid_guild_id(self):
        """Should reject non-positive snowflakes."""
        with pytest.raises(ValidationError, match="must be positive"):
            DiscordSettings(guild_ids=[0])


# =============================================================================
# Audio / Resolver / Playback Settings Tests
# =============================================================================


class TestAudioSettings:
    def test_defaults(self):
        """Should use mp3 in temp_music at half volume."""
        audio = AudioSettings()

        assert audio.temp_dir == "temp_music"
        assert audio.audio_format == "mp3"
        assert audio.default_volume == 0.5
        assert audio.ffmpeg_options["options"] == "-vn"

    def test_unsupported_format(self):
        """Should reject formats yt-dlp is not asked to produce."""
        with pytest.raises(ValidationError):
            AudioSettings(audio_format="flac")

    def test_volume_bounds(self):
        """Should reject volumes above 2.0."""
        with pytest.raises(ValidationError):
            AudioSettings(default_volume=2.5)


class TestResolverSettings:
    def test_default_command_runs_module(self):
        """Should run yt-dlp as a module of the current interpreter."""
        assert ResolverSettings().command == (sys.executable, "-m", "yt_dlp")

    def test_command_from_string(self):
        """Should split a shell-style command string."""
        settings = ResolverSettings(command="yt-dlp --cookies 'my cookies.txt'")

        assert settings.command == ("yt-dlp", "--cookies", "my cookies.txt")

    def test_empty_command(self):
        """Should reject an empty command."""
        with pytest.raises(ValidationError, match="cannot be empty"):
            ResolverSettings(command="")

    def test_output_limit_minimum(self):
        """Should require at least 1 KiB of output headroom."""
        with pytest.raises(ValidationError):
            ResolverSettings(max_output_bytes=10)


class TestPlaybackSettings:
    def test_defaults(self):
        """Should disconnect after five idle minutes by default."""
        playback = PlaybackSettings()

        assert playback.idle_disconnect_seconds == 300
        assert playback.max_advance_attempts == 10
        assert playback.connect_timeout_seconds == 10.0

    def test_zero_disables_idle_disconnect(self):
        """Should accept 0 to disable the idle timer."""
        assert PlaybackSettings(idle_timeout=0).idle_disconnect_seconds == 0

    def test_negative_idle_rejected(self):
        """Should reject negative idle timeouts."""
        with pytest.raises(ValidationError):
            PlaybackSettings(idle_disconnect_seconds=-1)


# =============================================================================
# Settings Tests
# =============================================================================


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "ENVIRONMENT",
        "DEBUG",
        "LOG_LEVEL",
        "DISCORD__TOKEN",
        "DISCORD__GUILD_IDS",
        "AUDIO__AUDIO_FORMAT",
        "PLAYBACK__IDLE_DISCONNECT_SECONDS",
        "RESOLVER__TIMEOUT_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:
    def test_defaults(self, clean_env):
        """Should build with defaults when nothing is configured."""
        settings = Settings(_env_file=None)

        assert settings.environment == "development"
        assert settings.log_level == "INFO"
        assert settings.playback.idle_disconnect_seconds == 300

    def test_nested_env_vars(self, clean_env):
        """Should read nested groups from double-underscore variables."""
        clean_env.setenv("DISCORD__TOKEN", "secret-token")
        clean_env.setenv("DISCORD__GUILD_IDS", "[111, 222]")
        clean_env.setenv("AUDIO__AUDIO_FORMAT", "opus")
        clean_env.setenv("PLAYBACK__IDLE_DISCONNECT_SECONDS", "0")
        clean_env.setenv("RESOLVER__TIMEOUT_SECONDS", "30")

        settings = Settings(_env_file=None)

        assert settings.discord.token.get_secret_value() == "secret-token"
        assert settings.discord.guild_ids == (111, 222)
        assert settings.audio.audio_format == "opus"
        assert settings.playback.idle_disconnect_seconds == 0
        assert settings.resolver.timeout_seconds == 30.0

    def test_log_level_is_normalized(self, clean_env):
        """Should upper-case valid log levels."""
        clean_env.setenv("LOG_LEVEL", "debug")

        assert Settings(_env_file=None).log_level == "DEBUG"

    def test_invalid_log_level(self, clean_env):
        """Should reject unknown log levels."""
        with pytest.raises(ValidationError, match="Invalid log level"):
            Settings(_env_file=None, log_level="LOUD")

    def test_settings_are_frozen(self, clean_env):
        """Should refuse mutation of nested groups."""
        settings = Settings(_env_file=None)

        with pytest.raises(ValidationError):
            settings.playback.idle_disconnect_seconds = 5

    def test_get_settings_is_cached(self, clean_env):
        """Should return the same instance until the cache is cleared."""
        clear_settings_cache()
        try:
            first = get_settings()
            assert get_settings() is first
            clear_settings_cache()
            assert get_settings() is not first
        finally:
            clear_settings_cache()
