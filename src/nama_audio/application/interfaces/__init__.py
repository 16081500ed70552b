"""Port interfaces implemented by infrastructure adapters."""

from nama_audio.application.interfaces.playback_engine import CompletionCallback, PlaybackEngine
from nama_audio.application.interfaces.track_catalog import TrackCatalog

__all__ = [
    "PlaybackEngine",
    "CompletionCallback",
    "TrackCatalog",
]
