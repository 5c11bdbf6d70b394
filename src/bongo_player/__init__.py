"""Multi-guild Discord music playback: yt-dlp downloads, per-guild queues, panel controls."""

__version__ = "0.1.0"
