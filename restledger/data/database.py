"""
SQLite database initialization and connection management.

Single responsibility: own the connection, create tables.
All actual queries live in SessionRepository.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# Default DB lives next to the repo root
DEFAULT_DB_PATH = Path(__file__).resolve().parent.parent.parent / "restledger.db"

SCHEMA_SQL = """
-- Sessions (append-only log written by the timer) -----------------------------
CREATE TABLE IF NOT EXISTS sessions (
    id                  TEXT    PRIMARY KEY,
    type                TEXT    NOT NULL CHECK (type IN ('work', 'break')),
    start_time          TEXT    NOT NULL,
    end_time            TEXT    NOT NULL,
    duration            REAL,
    planned_duration    INTEGER NOT NULL DEFAULT 0,
    is_skipped          INTEGER NOT NULL DEFAULT 0,
    extended_seconds    INTEGER NOT NULL DEFAULT 0,
    notes               TEXT
);

-- Indexes for range queries ----------------------------------------------------
CREATE INDEX IF NOT EXISTS idx_sessions_start ON sessions(start_time);
CREATE INDEX IF NOT EXISTS idx_sessions_end   ON sessions(end_time);
"""


def connect_memory() -> sqlite3.Connection:
    """In-memory connection with the schema applied (tests, scratch runs)."""
    conn = sqlite3.connect(":memory:", check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.executescript(SCHEMA_SQL)
    conn.commit()
    return conn


class Database:
    """Thin wrapper around a SQLite connection."""

    def __init__(self, db_path: Optional[Path] = None) -> None:
        self.db_path = db_path or DEFAULT_DB_PATH
        self.conn: Optional[sqlite3.Connection] = None

    # -- lifecycle -----------------------------------------------------------

    def connect(self) -> sqlite3.Connection:
        """Open (or return existing) connection and ensure schema exists."""
        if self.conn is not None:
            return self.conn
        logger.info("Connecting to SQLite at %s", self.db_path)
        # Range queries run on a worker thread (see AsyncSessionStore)
        self.conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA journal_mode=WAL")
        self._create_tables()
        return self.conn

    def close(self) -> None:
        if self.conn:
            self.conn.close()
            self.conn = None
            logger.info("Database connection closed.")

    # -- internal ------------------------------------------------------------

    def _create_tables(self) -> None:
        assert self.conn is not None
        self.conn.executescript(SCHEMA_SQL)
        self.conn.commit()
        logger.info("Database schema ensured.")


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Manages the SQLite connection and makes sure the sessions table exists.
#
# Key pieces:
#   - SCHEMA_SQL: one table, two indexes. Range queries filter on both ends
#     of the interval, so both columns are indexed.
#   - Database class: holds one connection with WAL enabled.
#   - connect_memory(): the same schema on ":memory:" for tests.
#
# Interviewer-friendly talking points:
#   1. Timestamps are stored as fixed-precision ISO strings, so SQL string
#      comparison orders them correctly without a date type.
#   2. check_same_thread=False is required because the async adapter runs
#      queries through asyncio.to_thread.
