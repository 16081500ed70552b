"""Entities exchanged with the Nama ledger."""

from __future__ import annotations

from datetime import date
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from nama_audio.domain.shared.datetime_utils import utcnow
from nama_audio.domain.shared.types import NonEmptyStr, PositiveInt, UtcDatetimeField


class SourceTag(StrEnum):
    """How a ledger entry was produced."""

    AUDIO = "audio"
    MANUAL = "manual"


class SubmissionRequest(BaseModel):
    """A count the user asks the ledger to record."""

    model_config = ConfigDict(frozen=True, strict=True)

    user_id: NonEmptyStr
    account_id: NonEmptyStr
    count: PositiveInt
    source_tag: SourceTag = SourceTag.AUDIO
    requested_at: UtcDatetimeField = Field(default_factory=utcnow)


class LedgerEntry(BaseModel):
    """A count durably recorded by the ledger; doubles as the submission ack."""

    model_config = ConfigDict(frozen=True)

    entry_id: NonEmptyStr
    user_id: NonEmptyStr
    account_id: NonEmptyStr
    count: PositiveInt
    source_tag: SourceTag
    entry_date: date
    created_at: UtcDatetimeField
