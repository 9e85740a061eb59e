"""
Repository — the single place where SQL lives.

Every other module talks to SessionRepository, never to raw SQL. The analytics
engine reads through query_range, next_session, get_bounds and subscribe;
the rest are write helpers for the local store.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from typing import Callable, List, Optional

from .models import RangeResult, Session, SessionBounds

logger = logging.getLogger(__name__)


def _fmt_dt(value: datetime) -> str:
    # fixed precision keeps lexical order == chronological order
    return value.isoformat(timespec="microseconds")


_parse_dt = lambda s: datetime.fromisoformat(s) if s else None


class SessionRepository:
    """Data-access layer wrapping a sqlite3 connection."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn
        self._subscribers: List[Callable[[], None]] = []

    # ── Writes ──────────────────────────────────────────────────────────────

    def save_session(self, session: Session) -> Session:
        """Insert a session, replacing any existing row with the same id."""
        self.conn.execute(
            """INSERT OR REPLACE INTO sessions
                (id, type, start_time, end_time, duration, planned_duration,
                 is_skipped, extended_seconds, notes)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                session.id, session.type,
                _fmt_dt(session.start_time), _fmt_dt(session.end_time),
                session.duration, session.planned_duration,
                int(session.is_skipped), session.extended_seconds,
                session.notes,
            ),
        )
        self.conn.commit()
        self._notify()
        return session

    def save_sessions(self, sessions: List[Session]) -> int:
        """Bulk insert; subscribers are notified once."""
        rows = [
            (
                s.id, s.type, _fmt_dt(s.start_time), _fmt_dt(s.end_time),
                s.duration, s.planned_duration, int(s.is_skipped),
                s.extended_seconds, s.notes,
            )
            for s in sessions
        ]
        self.conn.executemany(
            """INSERT OR REPLACE INTO sessions
                (id, type, start_time, end_time, duration, planned_duration,
                 is_skipped, extended_seconds, notes)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            rows,
        )
        self.conn.commit()
        if rows:
            self._notify()
        return len(rows)

    def delete_session(self, session_id: str) -> None:
        """Delete a single session."""
        self.conn.execute("DELETE FROM sessions WHERE id = ?", (session_id,))
        self.conn.commit()
        logger.info("Deleted session %s", session_id)
        self._notify()

    # ── Reads ───────────────────────────────────────────────────────────────

    def get_session(self, session_id: str) -> Optional[Session]:
        row = self.conn.execute(
            "SELECT * FROM sessions WHERE id = ?", (session_id,)
        ).fetchone()
        return self._row_to_session(row) if row else None

    def count_sessions(self) -> int:
        row = self.conn.execute("SELECT COUNT(*) FROM sessions").fetchone()
        return row[0]

    def query_range(self, start: datetime, end: datetime) -> RangeResult:
        """All sessions whose interval intersects [start, end), by start time."""
        rows = self.conn.execute(
            "SELECT * FROM sessions WHERE end_time >= ? AND start_time < ? "
            "ORDER BY start_time, id",
            (_fmt_dt(start), _fmt_dt(end)),
        ).fetchall()
        return RangeResult(
            sessions=[self._row_to_session(r) for r in rows],
            start=start, end=end,
        )

    def next_session(self, after: datetime) -> Optional[Session]:
        """First session starting at or after `after`, or None."""
        row = self.conn.execute(
            "SELECT * FROM sessions WHERE start_time >= ? "
            "ORDER BY start_time, id LIMIT 1",
            (_fmt_dt(after),),
        ).fetchone()
        return self._row_to_session(row) if row else None

    def get_bounds(self) -> SessionBounds:
        """Earliest start / latest end across the whole store."""
        row = self.conn.execute(
            "SELECT MIN(start_time), MAX(end_time) FROM sessions"
        ).fetchone()
        return SessionBounds(
            earliest_start=_parse_dt(row[0]),
            latest_end=_parse_dt(row[1]),
        )

    # ── Change notification ─────────────────────────────────────────────────

    def subscribe(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Register a no-arg change callback. Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        for cb in list(self._subscribers):
            try:
                cb()
            except Exception:
                logger.exception("Session change subscriber failed")

    # ── Row mappers ─────────────────────────────────────────────────────────

    @staticmethod
    def _row_to_session(row: sqlite3.Row) -> Session:
        return Session(
            id=row["id"], type=row["type"],
            start_time=_parse_dt(row["start_time"]),
            end_time=_parse_dt(row["end_time"]),
            duration=row["duration"],
            planned_duration=row["planned_duration"] or 0,
            is_skipped=bool(row["is_skipped"]),
            extended_seconds=row["extended_seconds"] or 0,
            notes=row["notes"],
        )


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   The Repository is the ONLY place raw SQL queries live. The report feed
#   and CLI call query_range() / get_bounds() instead of writing SQL strings.
#
# Key methods:
#   - query_range(): intersection query (end >= start AND start < end), so a
#     session that straddles midnight shows up in both days' windows.
#   - get_bounds(): one MIN/MAX scan; tells pagination when to stop.
#   - next_session(): one-row neighbour lookup, so gap fill at the edge of a
#     query window sees the session that really comes next.
#   - subscribe(): observer hook. Consumers rebuild from scratch on change,
#     they never patch derived data in place.
#
# Data flow:
#   Timer / seed script → save_session() → SQLite → query_range() → Session
#
# Interviewer-friendly talking points:
#   1. Repository pattern isolates SQL: the analytics never import sqlite3.
#   2. INSERT OR REPLACE makes writes idempotent by id, so re-importing the
#      same log doesn't duplicate sessions.
#   3. A throwing subscriber is logged, not propagated: a UI bug must not
#      roll back a successful write.
