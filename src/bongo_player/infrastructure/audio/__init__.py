"""Audio infrastructure - yt-dlp resolver and temp track storage."""

from bongo_player.infrastructure.audio.models import YtDlpTrackInfo
from bongo_player.infrastructure.audio.temp_storage import TempTrackStorage
from bongo_player.infrastructure.audio.ytdlp_resolver import YtDlpResolver

__all__ = [
    "TempTrackStorage",
    "YtDlpResolver",
    "YtDlpTrackInfo",
]
