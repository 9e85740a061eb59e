"""
Interval Aggregator — totals and completion rate for an arbitrary window.

Every number here is computed from the overlap of a session with the window,
never from its full duration, so a session straddling midnight contributes
to each day only the part that falls inside it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from restledger.data.models import Session, SessionType


@dataclass(frozen=True)
class AggregateView:
    """Totals for one [start, end) window. Durations are whole seconds."""
    total_work_seconds: int = 0
    total_break_seconds: int = 0
    break_count: int = 0
    completed_breaks: int = 0
    skipped_breaks: int = 0
    completion_rate: int = 0    # 0-100


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def completion_rate(completed: int, total: int) -> int:
    """Percentage of breaks completed; 0 when there were no breaks."""
    if total <= 0:
        return 0
    return round_half_up(completed / max(1, total) * 100)


def aggregate(
    sessions: Sequence[Session], window_start: datetime, window_end: datetime
) -> AggregateView:
    """Clip every session to the window and sum the overlaps."""
    if window_end <= window_start:
        return AggregateView()

    work = 0
    rest = 0
    completed = 0
    skipped = 0

    for s in sessions:
        overlap = s.overlap_seconds(window_start, window_end)
        if overlap <= 0:
            continue
        if s.type == SessionType.WORK:
            work += overlap
        elif s.type == SessionType.BREAK:
            if s.is_skipped:
                skipped += 1
            else:
                completed += 1
                rest += overlap

    count = completed + skipped
    return AggregateView(
        total_work_seconds=work,
        total_break_seconds=rest,
        break_count=count,
        completed_breaks=completed,
        skipped_breaks=skipped,
        completion_rate=completion_rate(completed, count),
    )


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Answers "how much did I work / rest between A and B, and how many of my
#   breaks did I actually take?" for any window.
#
# Key design decisions:
#   - Overlap clipping: overlap = max(0, min(end, R1) - max(start, R0)). A
#     totals-per-type result can never exceed the window length.
#   - Skipped breaks count toward break_count (they were offered) but not
#     toward rest seconds (the user didn't rest).
#   - Integer seconds everywhere; minutes are a display concern. Converting
#     early causes rounding drift when views are chained.
#   - Half-up rounding for the rate, so 12.5% shows as 13% on every platform.
#
# Interviewer-friendly talking points:
#   1. The function is total: empty list, zero-length window, inverted
#      window and malformed sessions all return a well-defined view.
#   2. completion_rate is 0 exactly when there were no breaks, never NaN.
