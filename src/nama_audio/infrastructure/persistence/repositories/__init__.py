"""SQLite repository implementations."""

from nama_audio.infrastructure.persistence.repositories.ledger_repository import SQLiteNamaLedger

__all__ = ["SQLiteNamaLedger"]
