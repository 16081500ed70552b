"""
Chanting Bounded Context

Domain logic for chant playback sessions, loop limits and Nama counting.
"""

from nama_audio.domain.chanting.entities import PlaybackSession, SessionSnapshot, Track
from nama_audio.domain.chanting.services import ChantingDomainService, TrackPartition
from nama_audio.domain.chanting.value_objects import (
    CompletionOutcome,
    PlaybackState,
    SessionInstanceId,
)

__all__ = [
    # Entities
    "Track",
    "PlaybackSession",
    "SessionSnapshot",
    # Value Objects
    "SessionInstanceId",
    "PlaybackState",
    "CompletionOutcome",
    # Services
    "ChantingDomainService",
    "TrackPartition",
]
