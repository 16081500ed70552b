"""Centralized constants for counting rules, database schema and SQL pragmas."""

from __future__ import annotations


class ChantConstants:
    """Counting rules shared by the session and the catalog."""

    # Namas credited for every naturally completed loop of a track
    PER_LOOP_INCREMENT = 4

    DEFAULT_MAX_LOOPS = 1
    REPEATING_MAX_LOOPS = 4


class DatabaseTables:
    NAMA_ENTRIES = "nama_entries"


class SQLPragmas:
    """SQLite PRAGMA statements used when opening connections."""

    JOURNAL_MODE_WAL = "PRAGMA journal_mode=WAL"
    FOREIGN_KEYS_ON = "PRAGMA foreign_keys=ON"
    BUSY_TIMEOUT = "PRAGMA busy_timeout={timeout}"
