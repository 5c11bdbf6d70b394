"""Tests for ColoredFormatter."""

import logging
from io import StringIO

import pytest

from bongo_player.utils.logging import ColoredFormatter

RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[1;31m",
}


def _make_record(level: int, message: str = "test") -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )


def _stream(tty: bool) -> StringIO:
    stream = StringIO()
    stream.isatty = lambda: tty  # type: ignore[method-assign]
    return stream


class TestColoredFormatter:
    """Tests for ANSI color formatting."""

    @pytest.fixture(autouse=True)
    def _no_color_unset(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)

    @pytest.mark.parametrize(
        "level",
        [logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL],
    )
    def test_color_applied_per_level(self, level: int):
        """Should apply the correct ANSI color code for each level."""
        fmt = ColoredFormatter("%(levelname)s | %(message)s", stream=_stream(True))

        output = fmt.format(_make_record(level))

        assert output.startswith(LEVEL_COLORS[level])
        assert RESET in output

    def test_no_color_when_no_color_env_set(self, monkeypatch):
        """Should not apply colors when NO_COLOR env var is set."""
        monkeypatch.setenv("NO_COLOR", "1")
        fmt = ColoredFormatter("%(levelname)s | %(message)s", stream=_stream(True))

        assert fmt.format(_make_record(logging.INFO)) == "INFO | test"

    def test_no_color_when_not_a_tty(self):
        """Should leave output plain when writing to a pipe or file."""
        fmt = ColoredFormatter("%(levelname)s | %(message)s", stream=_stream(False))

        assert fmt.format(_make_record(logging.ERROR)) == "ERROR | test"

    def test_original_record_is_untouched(self):
        """Should not leak escape codes into the record other handlers see."""
        fmt = ColoredFormatter("%(levelname)s", stream=_stream(True))
        record = _make_record(logging.WARNING)

        fmt.format(record)

        assert record.levelname == "WARNING"
