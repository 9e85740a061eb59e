"""
Range views for the analytics page: display windows, timeline segments and
the weekly work/rest fragment strip.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Sequence, Tuple

from restledger.data.models import Session, SessionType, sort_sessions

from .heatmap import subtract_months

RANGES = ("today", "week", "month")


@dataclass(frozen=True)
class TimelineSegment:
    type: str
    start_pct: float
    end_pct: float


@dataclass(frozen=True)
class FragmentCell:
    type: str
    start_time: datetime
    duration: float     # seconds


def display_bounds(range_name: str, now: datetime) -> Tuple[datetime, datetime]:
    """Half-open local window for a named range, ending at the next midnight."""
    if range_name not in RANGES:
        raise ValueError(f"Unknown range '{range_name}', expected one of {RANGES}")
    today = now.date()
    end = datetime.combine(today + timedelta(days=1), datetime.min.time())
    if range_name == "today":
        first = today
    elif range_name == "week":
        first = today - timedelta(days=6)
    else:
        first = subtract_months(today, 1)
    return datetime.combine(first, datetime.min.time()), end


def _visible(s: Session) -> bool:
    return not (s.type == SessionType.BREAK and s.is_skipped)


def timeline_segments(
    sessions: Sequence[Session], start: datetime, end: datetime
) -> List[TimelineSegment]:
    """Clip sessions to [start, end) and express them as percentages."""
    total = (end - start).total_seconds()
    if total <= 0:
        return []
    segments: List[TimelineSegment] = []
    for s in sort_sessions([s for s in sessions if _visible(s)]):
        lo = max(s.start_time, start)
        hi = min(s.end_time, end)
        if hi <= lo:
            continue
        start_pct = (lo - start).total_seconds() / total * 100
        end_pct = min(100.0, start_pct + (hi - lo).total_seconds() / total * 100)
        segments.append(TimelineSegment(s.type, start_pct, end_pct))
    return segments


def count_work_fragments(sessions: Sequence[Session]) -> int:
    return sum(1 for s in sessions if s.type == SessionType.WORK and s.seconds > 0)


def count_rest_fragments(sessions: Sequence[Session]) -> int:
    return sum(
        1 for s in sessions
        if s.type == SessionType.BREAK and not s.is_skipped and s.seconds > 0
    )


def build_fragment_cells(sessions: Sequence[Session]) -> List[FragmentCell]:
    """Chronological work/rest cells; skipped breaks and empty sessions drop out."""
    return [
        FragmentCell(s.type, s.start_time, s.seconds)
        for s in sort_sessions(list(sessions))
        if _visible(s) and s.seconds > 0
    ]
