"""
Unit Tests for Dependency Injection Container

Tests for:
- Lazy initialization and caching of every component
- Bot instance management (set_bot, bot property, error when not set)
- Wiring of settings into the adapters
- Lifecycle methods (initialize, shutdown)
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from bongo_player.application.commands.dispatch_control import CommandDispatcher
from bongo_player.application.services.background_jobs import BackgroundJobRunner
from bongo_player.application.services.guild_registry import GuildRegistry
from bongo_player.application.services.playback_engine import PlaybackEngine
from bongo_player.config.container import Container, create_container
from bongo_player.config.settings import Settings
from bongo_player.infrastructure.audio.temp_storage import TempTrackStorage
from bongo_player.infrastructure.audio.ytdlp_resolver import YtDlpResolver
from bongo_player.infrastructure.discord.adapters.voice_adapter import DiscordVoiceTransport

from conftest import build_track


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        audio={"temp_dir": str(tmp_path / "music"), "audio_format": "opus"},
        playback={"idle_disconnect_seconds": 0, "max_advance_attempts": 3},
    )


@pytest.fixture
def container(settings):
    container = create_container(settings)
    container.set_bot(MagicMock())
    return container


class TestBot:
    def test_bot_required(self, settings):
        """Should raise until set_bot has been called."""
        container = Container(settings)

        with pytest.raises(RuntimeError, match="Bot not initialized"):
            _ = container.bot

    def test_set_bot(self, settings):
        bot = MagicMock()
        container = Container(settings)
        container.set_bot(bot)

        assert container.bot is bot


class TestLazyComponents:
    def test_components_have_expected_types(self, container):
        """Should build each component on first access."""
        assert isinstance(container.track_storage, TempTrackStorage)
        assert isinstance(container.audio_resolver, YtDlpResolver)
        assert isinstance(container.voice_transport, DiscordVoiceTransport)
        assert isinstance(container.guild_registry, GuildRegistry)
        assert isinstance(container.playback_engine, PlaybackEngine)
        assert isinstance(container.command_dispatcher, CommandDispatcher)
        assert isinstance(container.job_runner, BackgroundJobRunner)

    @pytest.mark.parametrize(
        "name",
        [
            "track_storage",
            "audio_resolver",
            "voice_transport",
            "guild_registry",
            "playback_engine",
            "command_dispatcher",
            "job_runner",
        ],
    )
    def test_components_are_cached(self, container, name):
        assert getattr(container, name) is getattr(container, name)

    def test_storage_uses_audio_settings(self, container, settings, tmp_path):
        storage = container.track_storage

        assert storage.directory == (tmp_path / "music").resolve()
        assert storage.extension == "opus"

    def test_transport_requires_bot(self, settings):
        """Should not build the voice transport without a bot."""
        with pytest.raises(RuntimeError):
            _ = Container(settings).voice_transport


class TestLifecycle:
    async def test_initialize_purges_leftovers(self, container):
        """Should delete files from a previous run and build the engine."""
        leftover = build_track(container.track_storage.directory, "stale")

        await container.initialize()

        assert container._playback_engine is not None
        assert not container.track_storage.exists(leftover)

    async def test_shutdown_stops_jobs_and_sessions(self, container):
        """Should cancel jobs, stop every guild and empty storage in that order."""
        calls = []
        container._job_runner = MagicMock()
        container._job_runner.shutdown = AsyncMock(side_effect=lambda: calls.append("jobs"))
        container._playback_engine = MagicMock()
        container._playback_engine.shutdown = AsyncMock(side_effect=lambda: calls.append("engine"))
        leftover = build_track(container.track_storage.directory, "late")

        await container.shutdown()

        assert calls == ["jobs", "engine"]
        assert not container.track_storage.exists(leftover)

    async def test_shutdown_before_anything_was_built(self, settings):
        await Container(settings).shutdown()
