"""Result objects returned by the playback service to its callers."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from nama_audio.domain.chanting.entities import SessionSnapshot
from nama_audio.domain.ledger.entities import LedgerEntry


class PlaybackStatus(Enum):
    """Status codes for session operations."""

    SUCCESS = "success"
    INVALID_STATE = "invalid_state"
    LOOP_LIMIT_REACHED = "loop_limit_reached"
    ENGINE_ERROR = "engine_error"
    VALIDATION_ERROR = "validation_error"
    IN_FLIGHT = "in_flight"
    SUBMISSION_FAILED = "submission_failed"


class PlaybackResult(BaseModel):

    status: PlaybackStatus
    message: str
    snapshot: SessionSnapshot

    @property
    def is_success(self) -> bool:
        return self.status == PlaybackStatus.SUCCESS

    @classmethod
    def success(cls, message: str, snapshot: SessionSnapshot) -> PlaybackResult:
        return cls(status=PlaybackStatus.SUCCESS, message=message, snapshot=snapshot)

    @classmethod
    def error(
        cls, status: PlaybackStatus, message: str, snapshot: SessionSnapshot
    ) -> PlaybackResult:
        return cls(status=status, message=message, snapshot=snapshot)


class SubmitResult(BaseModel):

    status: PlaybackStatus
    message: str
    snapshot: SessionSnapshot
    entry: LedgerEntry | None = None

    @property
    def is_success(self) -> bool:
        return self.status == PlaybackStatus.SUCCESS

    @classmethod
    def success(cls, message: str, entry: LedgerEntry, snapshot: SessionSnapshot) -> SubmitResult:
        return cls(status=PlaybackStatus.SUCCESS, message=message, entry=entry, snapshot=snapshot)

    @classmethod
    def error(cls, status: PlaybackStatus, message: str, snapshot: SessionSnapshot) -> SubmitResult:
        return cls(status=status, message=message, snapshot=snapshot)
