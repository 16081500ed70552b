"""
Ledger Repository Interface

Abstract contract for the system of record that stores submitted counts.
Implementations live in the infrastructure layer.
"""

from abc import ABC, abstractmethod

from nama_audio.domain.ledger.entities import LedgerEntry, SubmissionRequest


class NamaLedger(ABC):
    """Abstract repository for submitted Nama counts."""

    @abstractmethod
    async def submit(self, request: SubmissionRequest) -> LedgerEntry:
        """Record a submission.

        Args:
            request: The count to record.

        Returns:
            The stored entry.

        Raises:
            LedgerError: If the entry could not be stored.
        """
        ...

    @abstractmethod
    async def get_recent_entries(self, user_id: str, limit: int = 10) -> list[LedgerEntry]:
        """Get a user's most recent entries, newest first.

        Args:
            user_id: The submitting user.
            limit: Maximum number of entries.

        Returns:
            Entries ordered by creation time, descending.
        """
        ...
