#!/usr/bin/env python3
"""Entry point: configure logging, check the host can play audio, then run the bot."""

from __future__ import annotations

import json
import logging
import logging.config
import shutil
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from bongo_player.domain.shared.messages import ErrorMessages, LogTemplates
from bongo_player.utils.logging import ColoredFormatter

if TYPE_CHECKING:
    from bongo_player.config.settings import Settings

_LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"
_FALLBACK_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_FALLBACK_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(log_level: str = "INFO", config_path: Path = _LOGGING_CONFIG_PATH) -> None:
    """Apply ``logging_config.json``, or a colored console handler if it cannot be read."""
    resolved_level = getattr(logging, log_level.upper(), logging.INFO)

    try:
        config = json.loads(Path(config_path).read_text())
        logging.config.dictConfig(config)
    except (OSError, json.JSONDecodeError, ValueError) as e:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            ColoredFormatter(_FALLBACK_FORMAT, datefmt=_FALLBACK_DATEFMT, stream=sys.stdout)
        )
        logging.basicConfig(level=resolved_level, handlers=[handler])
        # Same level as the "discord" logger in logging_config.json.
        logging.getLogger("discord").setLevel(logging.WARNING)
        logging.getLogger(__name__).warning(LogTemplates.LOGGING_CONFIG_FALLBACK, config_path, e)

    logging.getLogger().setLevel(resolved_level)
    logging.getLogger("bongo_player").setLevel(resolved_level)


def check_runtime(settings: Settings) -> list[str]:
    """Return one message per missing prerequisite for resolving and playing tracks."""
    problems: list[str] = []

    if shutil.which("ffmpeg") is None:
        problems.append(ErrorMessages.FFMPEG_NOT_FOUND)

    executable = settings.resolver.command[0]
    if shutil.which(executable) is None:
        problems.append(ErrorMessages.RESOLVER_COMMAND_NOT_FOUND.format(command=executable))

    temp_dir = Path(settings.audio.temp_dir)
    try:
        temp_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        problems.append(ErrorMessages.TEMP_DIR_UNUSABLE.format(path=temp_dir, error=e))

    return problems


def main() -> int:
    from bongo_player.config.settings import get_settings

    settings = get_settings()
    setup_logging(settings.log_level)

    logger = logging.getLogger(__name__)

    token_value = settings.discord.token.get_secret_value()
    if not token_value:
        logger.error(ErrorMessages.DISCORD_TOKEN_REQUIRED)
        return 1

    problems = check_runtime(settings)
    for problem in problems:
        logger.error(LogTemplates.BOT_RUNTIME_CHECK_FAILED, problem)
    if problems:
        return 1

    logger.info(LogTemplates.BOT_STARTING, settings.environment)
    logger.info(
        LogTemplates.BOT_AUDIO_CONFIG,
        settings.audio.audio_format,
        settings.audio.temp_dir,
        settings.playback.idle_disconnect_seconds,
    )

    from bongo_player.config.container import create_container
    from bongo_player.infrastructure.discord.bot import create_bot

    container = create_container(settings)
    bot = create_bot(container, settings)

    try:
        bot.run_with_graceful_shutdown(token_value)
        logger.info(LogTemplates.BOT_STOPPED)
        return 0
    except KeyboardInterrupt:
        logger.info(LogTemplates.BOT_KEYBOARD_INTERRUPT)
        return 0
    except Exception as e:
        logger.exception(LogTemplates.BOT_FATAL_ERROR, e)
        return 1


def cli() -> None:
    """Console script entry point (used by pyproject.toml [project.scripts])."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
