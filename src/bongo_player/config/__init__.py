"""Configuration and dependency wiring."""

from bongo_player.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
