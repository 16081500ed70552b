"""SQLite implementation of the Nama ledger."""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Any

import aiosqlite

from nama_audio.domain.ledger.entities import LedgerEntry, SourceTag, SubmissionRequest
from nama_audio.domain.ledger.repository import NamaLedger
from nama_audio.domain.shared.constants import DatabaseTables
from nama_audio.domain.shared.datetime_utils import UtcDateTime
from nama_audio.domain.shared.exceptions import LedgerError
from nama_audio.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ..database import Database

logger = logging.getLogger(__name__)


class SQLiteNamaLedger(NamaLedger):
    def __init__(self, database: Database) -> None:
        self._db = database

    async def submit(self, request: SubmissionRequest) -> LedgerEntry:
        created_at = UtcDateTime.now()

        try:
            async with self._db.transaction() as conn:
                cursor = await conn.execute(
                    f"""
                    INSERT INTO {DatabaseTables.NAMA_ENTRIES} (
                        user_id, account_id, count, source_type, entry_date, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        request.user_id,
                        request.account_id,
                        request.count,
                        request.source_tag.value,
                        created_at.dt.date().isoformat(),
                        created_at.iso,
                    ),
                )
                entry_id = cursor.lastrowid
        except aiosqlite.Error as e:
            raise LedgerError(f"Could not record {request.count} Namas: {e}") from e

        logger.debug(LogTemplates.LEDGER_ENTRY_RECORDED, entry_id, request.account_id)
        return LedgerEntry(
            entry_id=str(entry_id),
            user_id=request.user_id,
            account_id=request.account_id,
            count=request.count,
            source_tag=request.source_tag,
            entry_date=created_at.dt.date(),
            created_at=created_at.dt,
        )

    async def get_recent_entries(self, user_id: str, limit: int = 10) -> list[LedgerEntry]:
        rows = await self._db.fetch_all(
            f"""
            SELECT * FROM {DatabaseTables.NAMA_ENTRIES}
            WHERE user_id = ?
            ORDER BY created_at DESC, id DESC
            LIMIT ?
            """,
            (user_id, limit),
        )
        return [self._row_to_entry(row) for row in rows]

    def _row_to_entry(self, row: dict[str, Any]) -> LedgerEntry:
        return LedgerEntry(
            entry_id=str(row["id"]),
            user_id=row["user_id"],
            account_id=row["account_id"],
            count=row["count"],
            source_tag=SourceTag(row["source_type"]),
            entry_date=date.fromisoformat(row["entry_date"]),
            created_at=UtcDateTime.from_iso(row["created_at"]).dt,
        )
