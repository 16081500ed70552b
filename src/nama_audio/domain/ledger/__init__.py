"""
Ledger Bounded Context

Submission requests and the repository contract for recorded counts.
"""

from nama_audio.domain.ledger.entities import LedgerEntry, SourceTag, SubmissionRequest
from nama_audio.domain.ledger.repository import NamaLedger

__all__ = [
    "SubmissionRequest",
    "LedgerEntry",
    "SourceTag",
    "NamaLedger",
]
