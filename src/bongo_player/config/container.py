"""Dependency Injection Container

Wires the playback orchestrator together. Components are created on first
access and cached; the voice transport (and everything built on the registry)
needs the bot, so ``set_bot`` must be called before those are touched.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import ErrorMessages

if TYPE_CHECKING:
    from discord.ext.commands import Bot

    from ..application.commands.dispatch_control import CommandDispatcher
    from ..application.interfaces.audio_resolver import AudioResolver
    from ..application.interfaces.track_storage import TrackStorage
    from ..application.interfaces.voice_transport import VoiceTransport
    from ..application.services.background_jobs import BackgroundJobRunner
    from ..application.services.guild_registry import GuildRegistry
    from ..application.services.playback_engine import PlaybackEngine
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    Components are lazily initialized when first accessed.
    """

    settings: Settings
    _bot: Bot | None = None

    # Infrastructure adapters
    _track_storage: TrackStorage | None = None
    _audio_resolver: AudioResolver | None = None
    _voice_transport: VoiceTransport | None = None

    # Application services
    _guild_registry: GuildRegistry | None = None
    _playback_engine: PlaybackEngine | None = None
    _command_dispatcher: CommandDispatcher | None = None
    _job_runner: BackgroundJobRunner | None = None

    def set_bot(self, bot: Bot) -> None:
        """Set the Discord bot instance."""
        self._bot = bot

    @property
    def bot(self) -> Bot:
        if self._bot is None:
            raise RuntimeError(ErrorMessages.BOT_NOT_INITIALIZED)
        return self._bot

    # === Infrastructure Adapters ===

    @property
    def track_storage(self) -> TrackStorage:
        if self._track_storage is None:
            from ..infrastructure.audio.temp_storage import TempTrackStorage

            self._track_storage = TempTrackStorage(
                self.settings.audio.temp_dir, audio_format=self.settings.audio.audio_format
            )
        return self._track_storage

    @property
    def audio_resolver(self) -> AudioResolver:
        if self._audio_resolver is None:
            from ..infrastructure.audio.ytdlp_resolver import YtDlpResolver

            self._audio_resolver = YtDlpResolver(
                self.track_storage,
                self.settings.resolver,
                audio_format=self.settings.audio.audio_format,
            )
        return self._audio_resolver

    @property
    def voice_transport(self) -> VoiceTransport:
        if self._voice_transport is None:
            from ..infrastructure.discord.adapters.voice_adapter import DiscordVoiceTransport

            self._voice_transport = DiscordVoiceTransport(
                self.bot,
                self.settings.audio,
                connect_timeout=self.settings.playback.connect_timeout_seconds,
            )
        return self._voice_transport

    # === Application Services ===

    @property
    def guild_registry(self) -> GuildRegistry:
        if self._guild_registry is None:
            from ..application.services.guild_registry import GuildRegistry

            self._guild_registry = GuildRegistry(self.voice_transport)
        return self._guild_registry

    @property
    def playback_engine(self) -> PlaybackEngine:
        if self._playback_engine is None:
            from ..application.services.playback_engine import PlaybackEngine

            self._playback_engine = PlaybackEngine(
                registry=self.guild_registry,
                storage=self.track_storage,
                max_advance_attempts=self.settings.playback.max_advance_attempts,
                idle_disconnect_seconds=self.settings.playback.idle_disconnect_seconds,
            )
        return self._playback_engine

    @property
    def command_dispatcher(self) -> CommandDispatcher:
        if self._command_dispatcher is None:
            from ..application.commands.dispatch_control import CommandDispatcher

            self._command_dispatcher = CommandDispatcher(
                registry=self.guild_registry, engine=self.playback_engine
            )
        return self._command_dispatcher

    @property
    def job_runner(self) -> BackgroundJobRunner:
        if self._job_runner is None:
            from ..application.services.background_jobs import BackgroundJobRunner

            self._job_runner = BackgroundJobRunner(
                registry=self.guild_registry,
                engine=self.playback_engine,
                resolver=self.audio_resolver,
                storage=self.track_storage,
            )
        return self._job_runner

    # === Lifecycle ===

    async def initialize(self) -> None:
        """Clear files left behind by a previous run and build the playback graph."""
        self.track_storage.purge()
        # Building the engine registers its player event handler on the registry.
        _ = self.playback_engine

    async def shutdown(self) -> None:
        """Cancel in-flight jobs, tear down every session, and empty temp storage."""
        if self._job_runner is not None:
            await self._job_runner.shutdown()
        if self._playback_engine is not None:
            await self._playback_engine.shutdown()
        if self._track_storage is not None:
            self._track_storage.purge()


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
