"""
Data models for RestLedger.

These are plain dataclasses that represent session records. They decouple the
analytics from raw SQL rows and JSON payloads so every layer speaks the same
"language." Sessions are immutable: the engine only ever reads snapshots.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

# Reserved values of Session.notes
POWER_INTERRUPT_BREAK_NOTE = "power-interrupt-break"
POWER_INTERRUPT_WORK_NOTE = "power-interrupt-work"
MORE_REST_NOTE = "more-rest"

TimestampLike = Union[str, datetime]


class SessionType:
    """The two kinds of recorded interval."""
    WORK = "work"
    BREAK = "break"


def to_local_naive(value: TimestampLike) -> datetime:
    """
    Normalize an ISO-8601 string or datetime to a naive local datetime.

    Aware values are converted to the machine's local zone first, so date
    bucketing always follows the user's calendar rather than UTC.
    """
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        value = datetime.fromisoformat(text)
    if value.tzinfo is not None:
        value = value.astimezone().replace(tzinfo=None)
    return value


@dataclass(frozen=True)
class Session:
    """One recorded interval of work or break time."""
    id: str
    type: str
    start_time: datetime
    end_time: datetime
    duration: Optional[float] = None     # actual elapsed seconds
    planned_duration: int = 0            # scheduled seconds
    is_skipped: bool = False
    extended_seconds: int = 0
    notes: Optional[str] = None

    # -- derived durations ---------------------------------------------------

    @property
    def span_seconds(self) -> float:
        """Wall-clock length, clamped to zero for inverted intervals."""
        return max(0.0, (self.end_time - self.start_time).total_seconds())

    @property
    def seconds(self) -> float:
        """Actual duration, falling back to the wall-clock span when missing."""
        d = self.duration
        if d is not None and math.isfinite(d) and d > 0:
            return float(d)
        return self.span_seconds

    def overlap_seconds(self, window_start: datetime, window_end: datetime) -> int:
        """Whole seconds of this session inside [window_start, window_end)."""
        lo = max(self.start_time, window_start)
        hi = min(self.end_time, window_end)
        if hi <= lo:
            return 0
        return int((hi - lo).total_seconds())

    @property
    def local_date(self) -> date:
        """Calendar day of start_time; assumes naive local time (see to_local_naive)."""
        return self.start_time.date()

    @property
    def is_work(self) -> bool:
        return self.type == SessionType.WORK

    @property
    def is_break(self) -> bool:
        return self.type == SessionType.BREAK

    @property
    def is_synthetic(self) -> bool:
        return self.notes == MORE_REST_NOTE

    # -- (de)serialization ---------------------------------------------------

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Session":
        """Build a Session from a camelCase (store payload) or snake_case dict."""
        def pick(camel: str, snake: str, default: Any = None) -> Any:
            if camel in data:
                return data[camel]
            return data.get(snake, default)

        duration = pick("duration", "duration")
        return cls(
            id=str(data["id"]),
            type=data["type"],
            start_time=to_local_naive(pick("startTime", "start_time")),
            end_time=to_local_naive(pick("endTime", "end_time")),
            duration=float(duration) if duration is not None else None,
            planned_duration=int(pick("plannedDuration", "planned_duration", 0) or 0),
            is_skipped=bool(pick("isSkipped", "is_skipped", False)),
            extended_seconds=int(pick("extendedSeconds", "extended_seconds", 0) or 0),
            notes=pick("notes", "notes"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "startTime": self.start_time.isoformat(),
            "endTime": self.end_time.isoformat(),
            "duration": self.duration,
            "plannedDuration": self.planned_duration,
            "isSkipped": self.is_skipped,
            "extendedSeconds": self.extended_seconds,
            "notes": self.notes,
        }


def sort_sessions(sessions: List[Session]) -> List[Session]:
    """Stable ascending sort by start time."""
    return sorted(sessions, key=lambda s: s.start_time)


@dataclass(frozen=True)
class SessionBounds:
    """Dataset extent. earliest_start is None for an empty store."""
    earliest_start: Optional[datetime] = None
    latest_end: Optional[datetime] = None

    @property
    def is_empty(self) -> bool:
        return self.earliest_start is None


@dataclass(frozen=True)
class RangeResult:
    """All sessions intersecting a queried [start, end) window."""
    sessions: List[Session]
    start: Optional[datetime] = None
    end: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Defines the "shape" of a session and the two result objects the store
#   hands back (bounds and range results). Gap fill, aggregates, scoring and
#   the report feed all consume these.
#
# Key classes and why they exist:
#   - Session: frozen dataclass. The engine is a read-side projection, so
#     making records immutable turns "sessions are never mutated" into
#     something the interpreter enforces.
#   - SessionType: string constants ("work"/"break") matching the store's
#     payloads, so no translation layer is needed.
#   - SessionBounds / RangeResult: the two answers the store gives.
#
# Data flow:
#   SQLite row or JSON dict → Session.from_dict / row mapper → Session →
#   analytics functions
#
# Interviewer-friendly talking points:
#   1. Clamped durations: `seconds` never returns NaN or a negative number,
#      even if the producer wrote garbage. Every aggregate builds on it.
#   2. Local-time normalization at the boundary: timestamps are converted to
#      naive local datetimes once, so "which day is this?" is a plain .date().
#   3. Overlap clipping lives on the model, so every window-based view uses
#      the same max(0, min(end) - max(start)) arithmetic.
