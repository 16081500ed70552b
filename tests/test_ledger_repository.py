"""
Integration Tests for the SQLite Ledger

Tests for:
- Database schema initialization
- Recording submissions
- Reading recent entries
- Error wrapping
"""

import pytest

from nama_audio.domain.ledger.entities import SourceTag, SubmissionRequest
from nama_audio.domain.shared.exceptions import LedgerError


class TestDatabase:
    @pytest.mark.asyncio
    async def test_initialize_creates_table(self, in_memory_database):
        row = await in_memory_database.fetch_one(
            "SELECT name FROM sqlite_master WHERE type = 'table' AND name = ?",
            ("nama_entries",),
        )

        assert row == {"name": "nama_entries"}
        assert in_memory_database.is_initialized

    @pytest.mark.asyncio
    async def test_initialize_is_idempotent(self, in_memory_database):
        await in_memory_database.initialize()

        assert in_memory_database.is_initialized

    @pytest.mark.asyncio
    async def test_file_database_creates_parent_directory(self, tmp_path):
        from nama_audio.infrastructure.persistence.database import Database

        db = Database(f"sqlite:///{tmp_path}/nested/namas.db")
        await db.initialize()
        try:
            assert (tmp_path / "nested" / "namas.db").exists()
        finally:
            await db.close()


class TestSQLiteNamaLedger:
    @pytest.mark.asyncio
    async def test_submit_returns_stored_entry(self, ledger_repository):
        request = SubmissionRequest(user_id="user-1", account_id="acc-1", count=12)

        entry = await ledger_repository.submit(request)

        assert entry.entry_id == "1"
        assert entry.count == 12
        assert entry.source_tag == SourceTag.AUDIO
        assert entry.created_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_recent_entries_newest_first(self, ledger_repository):
        for count in (4, 8, 16):
            await ledger_repository.submit(
                SubmissionRequest(user_id="user-1", account_id="acc-1", count=count)
            )
        await ledger_repository.submit(
            SubmissionRequest(user_id="user-2", account_id="acc-1", count=4)
        )

        entries = await ledger_repository.get_recent_entries("user-1")

        assert [e.count for e in entries] == [16, 8, 4]
        assert all(e.user_id == "user-1" for e in entries)

    @pytest.mark.asyncio
    async def test_recent_entries_respects_limit(self, ledger_repository):
        for _ in range(3):
            await ledger_repository.submit(
                SubmissionRequest(user_id="user-1", account_id="acc-1", count=4)
            )

        entries = await ledger_repository.get_recent_entries("user-1", limit=2)

        assert len(entries) == 2

    @pytest.mark.asyncio
    async def test_round_trips_source_tag(self, ledger_repository):
        await ledger_repository.submit(
            SubmissionRequest(
                user_id="user-1", account_id="acc-1", count=5, source_tag=SourceTag.MANUAL
            )
        )

        [entry] = await ledger_repository.get_recent_entries("user-1")

        assert entry.source_tag == SourceTag.MANUAL

    @pytest.mark.asyncio
    async def test_entry_date_is_utc_date_of_submission(self, ledger_repository):
        stored = await ledger_repository.submit(
            SubmissionRequest(user_id="user-1", account_id="acc-1", count=4)
        )

        [entry] = await ledger_repository.get_recent_entries("user-1")

        assert stored.entry_date == stored.created_at.date()
        assert entry.entry_date == stored.entry_date

    @pytest.mark.asyncio
    async def test_entry_date_column_is_stored(self, ledger_repository, in_memory_database):
        stored = await ledger_repository.submit(
            SubmissionRequest(user_id="user-1", account_id="acc-1", count=4)
        )

        row = await in_memory_database.fetch_one(
            "SELECT entry_date FROM nama_entries WHERE id = ?", (int(stored.entry_id),)
        )

        assert row == {"entry_date": stored.entry_date.isoformat()}

    @pytest.mark.asyncio
    async def test_database_error_wrapped_as_ledger_error(self, in_memory_database):
        from nama_audio.infrastructure.persistence.repositories.ledger_repository import (
            SQLiteNamaLedger,
        )

        async with in_memory_database.transaction() as conn:
            await conn.execute("DROP TABLE nama_entries")
        ledger = SQLiteNamaLedger(in_memory_database)

        with pytest.raises(LedgerError, match="Could not record 4 Namas"):
            await ledger.submit(SubmissionRequest(user_id="user-1", account_id="acc-1", count=4))
