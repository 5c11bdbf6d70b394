"""Background job runner for the deferred play flow.

A play request is acknowledged immediately; joining voice, resolving the
query and queueing the track happen in a tracked background task whose
outcome is delivered through the request's follow-up channel.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING

from ...domain.shared.exceptions import (
    InvalidOperationError,
    ResolutionError,
    TransportError,
    ValidationError,
)
from ...domain.shared.messages import LogTemplates
from ...domain.shared.types import DiscordSnowflake
from ..commands.play_track import Acknowledgement, PlayRequest, PlayResult

if TYPE_CHECKING:
    from ...domain.music.entities import Track
    from ..interfaces.audio_resolver import AudioResolver
    from ..interfaces.followup import FollowupChannel
    from ..interfaces.output_channel import OutputChannel
    from ..interfaces.track_storage import TrackStorage
    from .guild_registry import GuildRegistry, GuildSession
    from .playback_engine import PlaybackEngine

logger = logging.getLogger(__name__)


class BackgroundJobRunner:
    """Runs play requests off the interaction path and reports back via follow-up."""

    def __init__(
        self,
        *,
        registry: GuildRegistry,
        engine: PlaybackEngine,
        resolver: AudioResolver,
        storage: TrackStorage,
    ) -> None:
        self._registry = registry
        self._engine = engine
        self._resolver = resolver
        self._storage = storage
        self._jobs: set[asyncio.Task[PlayResult]] = set()

    @property
    def in_flight(self) -> int:
        return len(self._jobs)

    def submit_play(
        self,
        request: PlayRequest,
        followup: FollowupChannel,
        output: OutputChannel,
    ) -> Acknowledgement:
        """Validate *request* and start its background job.

        Validation failures are returned as a rejected acknowledgement and no
        job is started.
        """
        try:
            request.ensure_valid()
        except ValidationError as exc:
            return Acknowledgement.rejected(exc.message)

        job = asyncio.create_task(
            self._run_play(request, followup, output), name=f"play-{request.guild_id}"
        )
        self._jobs.add(job)
        job.add_done_callback(self._jobs.discard)
        logger.info(LogTemplates.JOB_SUBMITTED, request.query, request.guild_id)
        return Acknowledgement.deferred(job)

    async def shutdown(self) -> None:
        """Cancel every in-flight job and wait for them to unwind."""
        jobs = list(self._jobs)
        if not jobs:
            return
        for job in jobs:
            job.cancel()
        await asyncio.gather(*jobs, return_exceptions=True)
        logger.info(LogTemplates.JOB_CANCELLED, len(jobs))

    async def _run_play(
        self,
        request: PlayRequest,
        followup: FollowupChannel,
        output: OutputChannel,
    ) -> PlayResult:
        try:
            result = await self._play(request, output)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception(LogTemplates.JOB_FAILED, request.query, request.guild_id)
            result = PlayResult.error()

        await followup.send(result.message)
        return result

    async def _play(self, request: PlayRequest, output: OutputChannel) -> PlayResult:
        guild_id, channel_id = request.guild_id, request.voice_channel_id
        if guild_id is None or channel_id is None:
            return PlayResult.join_failed()

        try:
            session = await self._registry.acquire(guild_id, channel_id, output)
        except TransportError as exc:
            logger.warning(LogTemplates.JOB_JOIN_FAILED, guild_id, exc.message)
            return PlayResult.join_failed()

        try:
            track = await self._resolver.resolve(request.query)
        except ResolutionError as exc:
            logger.info(LogTemplates.RESOLVER_FAILED, request.query, exc.message)
            await self._arm_idle_if_empty(session)
            return PlayResult.no_results(request.query)

        track = track.with_requester(request.requester_name)

        # A stop that landed while we were resolving closes the session.
        if session.is_closed:
            return self._discard(track, guild_id)
        try:
            started = await self._engine.enqueue(session, track)
        except InvalidOperationError:
            return self._discard(track, guild_id)

        return PlayResult.queued(track, started_playing=started is not None)

    def _discard(self, track: Track, guild_id: DiscordSnowflake) -> PlayResult:
        logger.info(LogTemplates.TRACK_DISCARDED, track.title, guild_id)
        self._storage.release(track)
        return PlayResult.discarded(track)

    async def _arm_idle_if_empty(self, session: GuildSession) -> None:
        if session.is_closed:
            return
        with contextlib.suppress(InvalidOperationError):
            await self._engine.ensure_idle_timer(session)
