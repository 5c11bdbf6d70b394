"""discord.py implementations of the voice transport, connection and audio player ports."""

from __future__ import annotations

import asyncio
import logging

import discord

from bongo_player.application.interfaces.voice_transport import (
    AudioPlayer,
    PlayerEvent,
    PlayerListener,
    PlayerStatus,
    VoiceConnection,
    VoiceTransport,
)
from bongo_player.config.settings import AudioSettings
from bongo_player.domain.shared.exceptions import PlaybackError, TransportError
from bongo_player.domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT: float = 10.0


class DiscordAudioPlayer(AudioPlayer):
    """Plays local files through FFmpeg on a ``discord.VoiceClient``.

    discord.py calls the ``after`` hook exactly once per source, on its audio
    thread, whether the source finished, was stopped, or failed. That hook is
    turned into a single ``IDLE`` or ``ERROR`` event.
    """

    def __init__(self, settings: AudioSettings | None = None) -> None:
        self._settings = settings or AudioSettings()
        self._volume = self._settings.default_volume
        self._ffmpeg_options = self._settings.ffmpeg_options
        self._voice_client: discord.VoiceClient | None = None
        self._listener: PlayerListener | None = None

    def attach(self, voice_client: discord.VoiceClient) -> None:
        self._voice_client = voice_client

    @property
    def status(self) -> PlayerStatus:
        vc = self._voice_client
        if vc is None:
            return PlayerStatus.IDLE
        if vc.is_paused():
            return PlayerStatus.PAUSED
        if vc.is_playing():
            return PlayerStatus.PLAYING
        return PlayerStatus.IDLE

    def set_listener(self, listener: PlayerListener | None) -> None:
        self._listener = listener

    def _emit(self, event: PlayerEvent, error: Exception | None = None) -> None:
        listener = self._listener
        if listener is not None:
            listener(event, error)

    def play(self, path: str) -> None:
        vc = self._voice_client
        if vc is None:
            raise PlaybackError(path, ErrorMessages.PLAYER_NOT_SUBSCRIBED)

        try:
            source = discord.FFmpegPCMAudio(
                path,
                before_options=self._ffmpeg_options.get("before_options", ""),
                options=self._ffmpeg_options.get("options", ""),
            )
            volume_source = discord.PCMVolumeTransformer(source, volume=self._volume)

            def after_callback(error: Exception | None = None) -> None:
                if error:
                    self._emit(PlayerEvent.ERROR, error)
                else:
                    self._emit(PlayerEvent.IDLE)

            vc.play(volume_source, after=after_callback)
        except (discord.ClientException, OSError) as e:
            raise PlaybackError(path, str(e)) from e

        self._emit(PlayerEvent.PLAYING)

    def stop(self) -> None:
        vc = self._voice_client
        if vc is not None and (vc.is_playing() or vc.is_paused()):
            vc.stop()

    def pause(self) -> None:
        vc = self._voice_client
        if vc is not None and vc.is_playing():
            vc.pause()
            self._emit(PlayerEvent.PAUSED)

    def resume(self) -> None:
        vc = self._voice_client
        if vc is not None and vc.is_paused():
            vc.resume()
            self._emit(PlayerEvent.PLAYING)


class DiscordVoiceConnection(VoiceConnection):
    def __init__(self, guild_id: int, voice_client: discord.VoiceClient) -> None:
        self._guild_id = guild_id
        self._voice_client = voice_client
        self._destroyed = False

    @property
    def channel_id(self) -> int:
        return self._voice_client.channel.id

    @property
    def voice_client(self) -> discord.VoiceClient:
        return self._voice_client

    def subscribe(self, player: AudioPlayer) -> None:
        if not isinstance(player, DiscordAudioPlayer):
            raise TypeError(f"Cannot subscribe {type(player).__name__} to a discord voice client")
        player.attach(self._voice_client)

    async def destroy(self) -> None:
        if self._destroyed:
            return
        self._destroyed = True
        try:
            await self._voice_client.disconnect(force=True)
            logger.info(LogTemplates.VOICE_DISCONNECTED, self._guild_id)
        except Exception as e:
            logger.warning(LogTemplates.VOICE_DISCONNECT_FAILED, self._guild_id, e)


class DiscordVoiceTransport(VoiceTransport):
    """Joins voice channels through the bot's gateway connection."""

    def __init__(
        self,
        bot: discord.Client,
        settings: AudioSettings | None = None,
        *,
        connect_timeout: float = CONNECT_TIMEOUT,
    ) -> None:
        self._bot = bot
        self._settings = settings or AudioSettings()
        self._connect_timeout = connect_timeout

    async def join(self, guild_id: int, channel_id: int) -> DiscordVoiceConnection:
        guild = self._bot.get_guild(guild_id)
        channel = guild.get_channel(channel_id) if guild else None
        if not isinstance(channel, discord.VoiceChannel | discord.StageChannel):
            raise TransportError(
                guild_id, ErrorMessages.VOICE_CHANNEL_NOT_FOUND.format(channel_id=channel_id)
            )

        try:
            async with asyncio.timeout(self._connect_timeout):
                voice_client = await channel.connect(self_deaf=True)
        except TimeoutError:
            raise TransportError(
                guild_id, ErrorMessages.VOICE_JOIN_TIMEOUT.format(channel_id=channel_id)
            ) from None
        except discord.Forbidden as e:
            raise TransportError(
                guild_id, ErrorMessages.VOICE_JOIN_FORBIDDEN.format(channel_id=channel_id)
            ) from e
        except discord.ClientException as e:
            raise TransportError(guild_id, str(e)) from e

        logger.info(LogTemplates.VOICE_CONNECTED, channel.name, guild_id)
        return DiscordVoiceConnection(guild_id, voice_client)

    def create_player(self) -> DiscordAudioPlayer:
        return DiscordAudioPlayer(self._settings)
