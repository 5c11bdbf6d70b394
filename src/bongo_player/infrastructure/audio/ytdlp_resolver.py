"""AudioResolver implementation that downloads tracks by running yt-dlp as a subprocess."""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import re
import time
from pathlib import Path
from typing import Final

from pydantic import ValidationError as PydanticValidationError

from bongo_player.application.interfaces.audio_resolver import AudioResolver
from bongo_player.application.interfaces.track_storage import TrackStorage
from bongo_player.config.settings import ResolverSettings
from bongo_player.domain.music.entities import Track, format_duration
from bongo_player.domain.shared.exceptions import ResolutionError
from bongo_player.domain.shared.messages import ErrorMessages, LogTemplates
from bongo_player.infrastructure.audio.models import YtDlpTrackInfo

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE: Final[int] = 64 * 1024
LOG_STDERR_TRUNCATE: Final[int] = 500
SEARCH_PREFIX: Final[str] = "ytsearch1:"

URL_PATTERNS: Final[list[re.Pattern[str]]] = [
    re.compile(r"https?://\S", re.IGNORECASE),
    re.compile(r"www\.\S", re.IGNORECASE),
]


class _OutputLimitExceeded(Exception):
    pass


class YtDlpResolver(AudioResolver):
    """Resolves a query by downloading its audio into temp storage.

    yt-dlp is started with ``--print-json`` so each downloaded entry is
    reported as one JSON object per line on stdout. The first usable record
    becomes the track.
    """

    def __init__(
        self,
        storage: TrackStorage,
        settings: ResolverSettings | None = None,
        *,
        audio_format: str = "mp3",
    ) -> None:
        self._storage = storage
        self._settings = settings or ResolverSettings()
        self._audio_format = audio_format

    def is_url(self, query: str) -> bool:
        """True when *query* starts with a scheme or ``www.``."""
        query = query.strip()
        return any(pattern.match(query) for pattern in URL_PATTERNS)

    def build_command(self, query: str, output_template: str) -> list[str]:
        """Return the full argv used to download *query*."""
        args = [
            *self._settings.command,
            "-x",
            "--audio-format",
            self._audio_format,
            "--print-json",
            "--no-progress",
            "--output",
            output_template,
        ]
        if self.is_url(query):
            args += ["--no-playlist", query]
        else:
            args.append(f"{SEARCH_PREFIX}{query}")
        return args

    async def resolve(self, query: str) -> Track:
        query = query.strip()
        if not query:
            raise ResolutionError(query, ErrorMessages.EMPTY_QUERY)

        timestamp_ms = int(time.time() * 1000)
        command = self.build_command(query, self._storage.allocate_template(timestamp_ms))
        logger.info(LogTemplates.RESOLVER_STARTED, query, self.is_url(query))

        try:
            returncode, stdout, stderr = await self._run(query, command)
        except ResolutionError as exc:
            logger.warning(LogTemplates.RESOLVER_FAILED, query, exc.message)
            raise

        if stderr.strip():
            logger.debug(LogTemplates.RESOLVER_STDERR, query, stderr[:LOG_STDERR_TRUNCATE])

        if returncode != 0:
            message = ErrorMessages.RESOLVER_EXIT_CODE.format(code=returncode)
            logger.warning(LogTemplates.RESOLVER_FAILED, query, message)
            raise ResolutionError(query, message)

        track = self.parse_output(query, stdout, timestamp_ms)
        if track is None:
            logger.warning(LogTemplates.RESOLVER_FAILED, query, ErrorMessages.RESOLVER_NO_RECORDS)
            raise ResolutionError(query, ErrorMessages.RESOLVER_NO_RECORDS)

        logger.info(LogTemplates.RESOLVER_RESOLVED, query, track.title, track.duration)
        return track

    def parse_output(self, query: str, stdout: str, timestamp_ms: int) -> Track | None:
        """Return a track built from the first usable JSON record in *stdout*."""
        for line in stdout.splitlines():
            line = line.strip()
            if not line.startswith("{"):
                continue

            try:
                data = json.loads(line)
            except json.JSONDecodeError as e:
                logger.warning(LogTemplates.RESOLVER_BAD_JSON, query, e)
                continue
            if not isinstance(data, dict):
                continue

            try:
                info = YtDlpTrackInfo.model_validate(data)
            except PydanticValidationError as e:
                logger.warning(LogTemplates.RESOLVER_BAD_JSON, query, e)
                continue

            if info.is_playlist:
                logger.debug(LogTemplates.RESOLVER_SKIPPED_PLAYLIST, query)
                continue

            missing = info.missing_fields
            if missing:
                logger.warning(LogTemplates.RESOLVER_SKIPPED_MALFORMED, query, ", ".join(missing))
                continue

            track = self._info_to_track(query, info, timestamp_ms)
            if track is not None:
                return track

        return None

    def _info_to_track(self, query: str, info: YtDlpTrackInfo, timestamp_ms: int) -> Track | None:
        if info.title is None or info.duration is None:
            return None

        source_url = info.source_url
        if source_url is None:
            logger.warning(LogTemplates.RESOLVER_SKIPPED_MALFORMED, query, "webpage_url")
            return None

        reported = info.reported_path
        if reported:
            local_path: Path = self._storage.normalize_path(reported)
        else:
            local_path = self._storage.resolve_path(timestamp_ms, info.title)

        try:
            return Track(
                title=info.title[:500],
                source_url=source_url,
                duration=format_duration(info.duration),
                duration_seconds=info.duration,
                author=info.author,
                local_file_path=str(local_path),
                thumbnail_url=info.thumbnail,
            )
        except PydanticValidationError as e:
            logger.warning(LogTemplates.RESOLVER_SKIPPED_MALFORMED, query, e)
            return None

    async def _run(self, query: str, command: list[str]) -> tuple[int, str, str]:
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ResolutionError(query, ErrorMessages.RESOLVER_NOT_STARTED.format(error=e)) from e

        limit = self._settings.max_output_bytes
        try:
            async with asyncio.timeout(self._settings.timeout_seconds):
                stdout, stderr = await asyncio.gather(
                    self._read_bounded(process.stdout, limit),
                    self._read_bounded(process.stderr, limit),
                )
                returncode = await process.wait()
        except TimeoutError:
            await self._kill(process)
            raise ResolutionError(
                query, ErrorMessages.RESOLVER_TIMEOUT.format(seconds=self._settings.timeout_seconds)
            ) from None
        except _OutputLimitExceeded:
            await self._kill(process)
            raise ResolutionError(
                query, ErrorMessages.RESOLVER_OUTPUT_TOO_LARGE.format(limit=limit)
            ) from None

        return (
            returncode,
            stdout.decode("utf-8", errors="replace"),
            stderr.decode("utf-8", errors="replace"),
        )

    @staticmethod
    async def _read_bounded(stream: asyncio.StreamReader | None, limit: int) -> bytes:
        if stream is None:
            return b""
        buffer = bytearray()
        while True:
            chunk = await stream.read(READ_CHUNK_SIZE)
            if not chunk:
                return bytes(buffer)
            buffer.extend(chunk)
            if len(buffer) > limit:
                raise _OutputLimitExceeded()

    @staticmethod
    async def _kill(process: asyncio.subprocess.Process) -> None:
        if process.returncode is None:
            with contextlib.suppress(ProcessLookupError):
                process.kill()
        await process.wait()
