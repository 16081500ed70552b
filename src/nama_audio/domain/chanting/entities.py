"""Core domain entities for the chanting bounded context."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from nama_audio.domain.chanting.value_objects import (
    CompletionOutcome,
    PlaybackState,
    SessionInstanceId,
)
from nama_audio.domain.shared.constants import ChantConstants
from nama_audio.domain.shared.datetime_utils import utcnow
from nama_audio.domain.shared.exceptions import (
    BusinessRuleViolationError,
    InvalidOperationError,
)
from nama_audio.domain.shared.messages import ErrorMessages
from nama_audio.domain.shared.types import (
    NonEmptyStr,
    NonNegativeInt,
    PositiveInt,
    TrackTitleStr,
    UtcDatetimeField,
)


class Track(BaseModel):
    """Immutable value object representing a chant recording from the catalog."""

    model_config = ConfigDict(frozen=True, strict=True)

    id: NonEmptyStr
    title: TrackTitleStr
    source_locator: NonEmptyStr
    is_repeating: bool = False
    max_loops: PositiveInt = ChantConstants.DEFAULT_MAX_LOOPS

    @field_validator("max_loops", mode="before")
    @classmethod
    def default_max_loops(cls, v: Any) -> Any:
        """Fall back to a single loop when the limit is missing or non-positive."""
        if v is None or (isinstance(v, int) and v <= 0):
            return ChantConstants.DEFAULT_MAX_LOOPS
        return v

    @property
    def loop_label(self) -> str:
        if self.max_loops > 1:
            return f"{self.max_loops}x Loop"
        return "Plays Once"

    @property
    def full_count(self) -> int:
        """Namas credited when every loop of this track completes."""
        return self.max_loops * ChantConstants.PER_LOOP_INCREMENT


class SessionSnapshot(BaseModel):
    """Read-only view of a playback session for display."""

    model_config = ConfigDict(frozen=True)

    active_track: Track | None = None
    state: PlaybackState = PlaybackState.IDLE
    loops_completed: NonNegativeInt = 0
    accumulated_count: NonNegativeInt = 0
    max_loops: NonNegativeInt = 0
    instance_id: str | None = None
    submitting: bool = False


class PlaybackSession(BaseModel):
    """Aggregate root tracking one user's listening progress.

    ``accumulated_count`` is derived from ``loops_completed`` so the two can
    never drift apart.
    """

    active_track: Track | None = None
    instance_id: SessionInstanceId | None = None
    state: PlaybackState = PlaybackState.IDLE
    loops_completed: NonNegativeInt = 0
    created_at: UtcDatetimeField = Field(default_factory=utcnow)
    last_activity: UtcDatetimeField = Field(default_factory=utcnow)

    @property
    def accumulated_count(self) -> int:
        return self.loops_completed * ChantConstants.PER_LOOP_INCREMENT

    @property
    def max_loops(self) -> int:
        return self.active_track.max_loops if self.active_track else 0

    @property
    def is_playing(self) -> bool:
        return self.state == PlaybackState.PLAYING

    @property
    def is_paused(self) -> bool:
        return self.state == PlaybackState.PAUSED

    @property
    def is_idle(self) -> bool:
        return self.state == PlaybackState.IDLE

    @property
    def loops_exhausted(self) -> bool:
        return self.active_track is not None and self.loops_completed >= self.max_loops

    def touch(self) -> None:
        """Update last activity timestamp."""
        self.last_activity = utcnow()

    def is_current(self, instance_id: SessionInstanceId | None) -> bool:
        """Check whether a token belongs to the live play-through."""
        return instance_id is not None and instance_id == self.instance_id

    def is_same_track(self, track: Track) -> bool:
        return self.active_track is not None and self.active_track.id == track.id

    def ensure_can_begin(self, track: Track) -> None:
        """Reject re-selecting a track whose loops are already used up."""
        if self.is_same_track(track) and self.loops_exhausted:
            raise BusinessRuleViolationError(
                rule="LOOP_LIMIT_REACHED",
                message=ErrorMessages.LOOP_LIMIT_REACHED.format(
                    title=track.title, max_loops=self.max_loops
                ),
            )

    def begin(self, track: Track, instance_id: SessionInstanceId) -> int:
        """Make *track* the active play-through under *instance_id*.

        Returns the number of unsubmitted Namas discarded by switching tracks.
        """
        self.ensure_can_begin(track)

        discarded = 0
        if not self.is_same_track(track):
            discarded = self.accumulated_count
            self.loops_completed = 0

        self.active_track = track
        self.instance_id = instance_id
        self.state = PlaybackState.PLAYING
        self.touch()
        return discarded

    def transition_to(self, new_state: PlaybackState) -> None:
        """Transition to a new playback state."""
        if not self.state.can_transition_to(new_state):
            raise InvalidOperationError(
                operation=f"transition to {new_state.value}",
                current_state=self.state.value,
                message=f"Cannot transition from {self.state.value} to {new_state.value}",
            )

        self.state = new_state
        self.touch()

    def ensure_playing(self) -> None:
        if not self.is_playing:
            raise InvalidOperationError("pause", self.state.value, ErrorMessages.CANNOT_PAUSE)

    def ensure_paused(self) -> None:
        if not self.is_paused:
            raise InvalidOperationError("resume", self.state.value, ErrorMessages.CANNOT_RESUME)

    def ensure_active(self) -> None:
        if not self.state.is_active:
            raise InvalidOperationError("stop", self.state.value, ErrorMessages.CANNOT_STOP)

    def pause(self) -> None:
        self.ensure_playing()
        self.transition_to(PlaybackState.PAUSED)

    def resume(self) -> None:
        self.ensure_paused()
        self.transition_to(PlaybackState.PLAYING)

    def stop(self) -> None:
        """Stop playback; counters are left untouched."""
        self.ensure_active()
        self.transition_to(PlaybackState.STOPPED)

    def record_completion(self) -> CompletionOutcome:
        """Credit one finished loop and decide, from the live state, what happens next."""
        if self.active_track is None or not self.state.accepts_completions:
            return CompletionOutcome.IGNORED
        if self.loops_exhausted:
            return CompletionOutcome.IGNORED

        self.loops_completed += 1
        self.touch()

        if self.loops_completed >= self.max_loops:
            self.state = PlaybackState.STOPPED
            return CompletionOutcome.LIMIT_REACHED
        if self.is_playing:
            return CompletionOutcome.REPLAY
        return CompletionOutcome.HELD

    def clear(self) -> None:
        """Reset the session to idle after its count has been submitted."""
        self.active_track = None
        self.instance_id = None
        self.loops_completed = 0
        self.state = PlaybackState.IDLE
        self.touch()

    def snapshot(self, *, submitting: bool = False) -> SessionSnapshot:
        return SessionSnapshot(
            active_track=self.active_track,
            state=self.state,
            loops_completed=self.loops_completed,
            accumulated_count=self.accumulated_count,
            max_loops=self.max_loops,
            instance_id=str(self.instance_id) if self.instance_id else None,
            submitting=submitting,
        )
