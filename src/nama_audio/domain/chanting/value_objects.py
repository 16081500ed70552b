"""Immutable value objects for the chanting bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from uuid import uuid4

from nama_audio.domain.shared.messages import ErrorMessages


@dataclass(frozen=True)
class SessionInstanceId:
    """Opaque token identifying one play-through of a selected track.

    A new token is minted every time a track is (re)selected, and every
    engine command and completion notification carries it.
    """

    value: str

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            raise ValueError(ErrorMessages.EMPTY_INSTANCE_ID)

    def __str__(self) -> str:
        return self.value

    @classmethod
    def mint(cls) -> SessionInstanceId:
        return cls(uuid4().hex)


class PlaybackState(Enum):
    """Playback state with enforced transitions.

    State transitions:
    - IDLE -> PLAYING (select and play)
    - PLAYING -> PAUSED (pause)
    - PAUSED -> PLAYING (resume)
    - PLAYING/PAUSED -> STOPPED (stop command or loop limit)
    - STOPPED -> PLAYING (select and play again)
    - Any -> IDLE (successful submission)
    """

    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    STOPPED = "stopped"

    def can_transition_to(self, target: PlaybackState) -> bool:
        """Check if transition to target state is valid."""
        valid_transitions = {
            PlaybackState.IDLE: {PlaybackState.PLAYING, PlaybackState.IDLE},
            PlaybackState.PLAYING: {
                PlaybackState.PLAYING,
                PlaybackState.PAUSED,
                PlaybackState.STOPPED,
                PlaybackState.IDLE,
            },
            PlaybackState.PAUSED: {
                PlaybackState.PLAYING,
                PlaybackState.STOPPED,
                PlaybackState.IDLE,
            },
            PlaybackState.STOPPED: {PlaybackState.PLAYING, PlaybackState.IDLE},
        }
        return target in valid_transitions.get(self, set())

    @property
    def is_active(self) -> bool:
        return self in {PlaybackState.PLAYING, PlaybackState.PAUSED}

    @property
    def accepts_completions(self) -> bool:
        return self != PlaybackState.IDLE


class CompletionOutcome(Enum):
    """What the session decided after a loop finished."""

    REPLAY = "replay"
    HELD = "held"
    LIMIT_REACHED = "limit_reached"
    IGNORED = "ignored"
