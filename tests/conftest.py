import asyncio
import random
from pathlib import Path

import pytest

from bongo_player.application.interfaces.audio_resolver import AudioResolver
from bongo_player.application.interfaces.followup import FollowupChannel
from bongo_player.application.interfaces.output_channel import OutputChannel
from bongo_player.application.interfaces.voice_transport import (
    AudioPlayer,
    PlayerEvent,
    PlayerStatus,
    VoiceConnection,
    VoiceTransport,
)
from bongo_player.domain.music.entities import Track, format_duration
from bongo_player.domain.shared.exceptions import PlaybackError, TransportError

GUILD_ID = 111111111111111111
VOICE_CHANNEL_ID = 222222222222222222

# ============================================================================
# Transport Fakes
# ============================================================================


class FakePlayer(AudioPlayer):
    """In-memory player that emits the same events as the discord.py adapter."""

    def __init__(self) -> None:
        self._status = PlayerStatus.IDLE
        self._listener = None
        self.played: list[str] = []
        self.refused_paths: set[str] = set()

    @property
    def status(self) -> PlayerStatus:
        return self._status

    def set_listener(self, listener) -> None:
        self._listener = listener

    def _emit(self, event: PlayerEvent, error: Exception | None = None) -> None:
        if self._listener is not None:
            self._listener(event, error)

    def play(self, path: str) -> None:
        if path in self.refused_paths:
            raise PlaybackError(path, "source refused")
        self.played.append(path)
        self._status = PlayerStatus.PLAYING
        self._emit(PlayerEvent.PLAYING)

    def stop(self) -> None:
        if self._status is PlayerStatus.IDLE:
            return
        self._status = PlayerStatus.IDLE
        self._emit(PlayerEvent.IDLE)

    def pause(self) -> None:
        if self._status is PlayerStatus.PLAYING:
            self._status = PlayerStatus.PAUSED
            self._emit(PlayerEvent.PAUSED)

    def resume(self) -> None:
        if self._status is PlayerStatus.PAUSED:
            self._status = PlayerStatus.PLAYING
            self._emit(PlayerEvent.PLAYING)

    def finish(self) -> None:
        """Simulate the current track running to its end."""
        self._status = PlayerStatus.IDLE
        self._emit(PlayerEvent.IDLE)

    def crash(self, error: Exception) -> None:
        """Simulate the audio thread failing mid-track."""
        self._status = PlayerStatus.IDLE
        self._emit(PlayerEvent.ERROR, error)


class FakeConnection(VoiceConnection):
    def __init__(self, channel_id: int) -> None:
        self._channel_id = channel_id
        self.player: AudioPlayer | None = None
        self.destroy_calls = 0

    @property
    def channel_id(self) -> int:
        return self._channel_id

    @property
    def destroyed(self) -> bool:
        return self.destroy_calls > 0

    def subscribe(self, player: AudioPlayer) -> None:
        self.player = player

    async def destroy(self) -> None:
        self.destroy_calls += 1


class FakeTransport(VoiceTransport):
    def __init__(self) -> None:
        self.join_calls: list[tuple[int, int]] = []
        self.connections: list[FakeConnection] = []
        self.players: list[FakePlayer] = []
        self.fail_with: TransportError | None = None
        self.fail_create_player: Exception | None = None
        self.join_delay = 0.0
        self.join_delays: dict[int, float] = {}

    async def join(self, guild_id: int, channel_id: int) -> FakeConnection:
        self.join_calls.append((guild_id, channel_id))
        delay = self.join_delays.get(guild_id, self.join_delay)
        if delay:
            await asyncio.sleep(delay)
        if self.fail_with is not None:
            raise self.fail_with
        connection = FakeConnection(channel_id)
        self.connections.append(connection)
        return connection

    def create_player(self) -> FakePlayer:
        if self.fail_create_player is not None:
            raise self.fail_create_player
        player = FakePlayer()
        self.players.append(player)
        return player


# ============================================================================
# Port Fakes
# ============================================================================


class FakeOutput(OutputChannel):
    def __init__(self) -> None:
        self.panels = []
        self.notices: list[str] = []

    async def send_panel(self, snapshot) -> None:
        self.panels.append(snapshot)

    async def send_notice(self, text: str) -> None:
        self.notices.append(text)


class FakeFollowup(FollowupChannel):
    def __init__(self) -> None:
        self.messages: list[tuple[str, bool]] = []

    async def send(self, content: str, *, ephemeral: bool = False) -> None:
        self.messages.append((content, ephemeral))

    @property
    def contents(self) -> list[str]:
        return [content for content, _ in self.messages]


class FakeResolver(AudioResolver):
    """Returns canned tracks (or raises canned errors) per query.

    When ``gate`` is set, ``resolve`` signals ``entered`` and then blocks on it.
    """

    def __init__(self) -> None:
        self.results: dict[str, Track | Exception] = {}
        self.calls: list[str] = []
        self.gate: asyncio.Event | None = None
        self.entered = asyncio.Event()

    def is_url(self, query: str) -> bool:
        return query.startswith("http")

    async def resolve(self, query: str) -> Track:
        self.calls.append(query)
        self.entered.set()
        if self.gate is not None:
            await self.gate.wait()
        result = self.results[query]
        if isinstance(result, Exception):
            raise result
        return result


# ============================================================================
# Helpers
# ============================================================================


async def settle(session, rounds: int = 5) -> None:
    """Let posted player events reach the session's actor and run."""
    for _ in range(rounds):
        await asyncio.sleep(0)
        await session.submit(lambda: asyncio.sleep(0))


def build_track(
    directory: Path | None,
    title: str,
    *,
    seconds: int = 185,
    create_file: bool = True,
) -> Track:
    local_path = None
    if directory is not None:
        path = directory / f"audio-0-{title}.mp3"
        if create_file:
            path.write_bytes(b"ID3")
        local_path = str(path)
    return Track(
        title=title,
        source_url=f"https://example.com/watch?v={title}",
        duration=format_duration(seconds),
        duration_seconds=seconds,
        author="Some Artist",
        local_file_path=local_path,
    )


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def storage(tmp_path):
    from bongo_player.infrastructure.audio.temp_storage import TempTrackStorage

    return TempTrackStorage(tmp_path / "temp_music")


@pytest.fixture
def make_track(storage):
    def _make(title: str, **kwargs) -> Track:
        return build_track(storage.directory, title, **kwargs)

    return _make


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def output():
    return FakeOutput()


@pytest.fixture
def followup():
    return FakeFollowup()


@pytest.fixture
def resolver():
    return FakeResolver()


@pytest.fixture
def registry(transport):
    from bongo_player.application.services.guild_registry import GuildRegistry

    return GuildRegistry(transport)


@pytest.fixture
def engine_factory(registry, storage):
    from bongo_player.application.services.playback_engine import PlaybackEngine

    def _make(**kwargs):
        kwargs.setdefault("idle_disconnect_seconds", 0)
        kwargs.setdefault("rng", random.Random(1234))
        return PlaybackEngine(registry=registry, storage=storage, **kwargs)

    return _make


@pytest.fixture
def engine(engine_factory):
    return engine_factory()


@pytest.fixture
async def session(registry, engine, output):
    session = await registry.acquire(GUILD_ID, VOICE_CHANNEL_ID, output)
    yield session
    await registry.release(GUILD_ID)
