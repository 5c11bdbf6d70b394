"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters. These are the "ports" in
hexagonal architecture.
"""

from bongo_player.application.interfaces.audio_resolver import AudioResolver
from bongo_player.application.interfaces.followup import FollowupChannel
from bongo_player.application.interfaces.output_channel import OutputChannel
from bongo_player.application.interfaces.track_storage import TrackStorage
from bongo_player.application.interfaces.voice_transport import (
    AudioPlayer,
    PlayerEvent,
    PlayerListener,
    PlayerStatus,
    VoiceConnection,
    VoiceTransport,
)

__all__ = [
    "AudioResolver",
    "TrackStorage",
    "VoiceTransport",
    "VoiceConnection",
    "AudioPlayer",
    "PlayerEvent",
    "PlayerStatus",
    "PlayerListener",
    "OutputChannel",
    "FollowupChannel",
]
