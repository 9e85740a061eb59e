"""
Continuous-Work Analyzer — the longest focus stretch without a real break.

A stretch ends on either an effective break session or an idle gap long
enough to count as one. Short breaks (skipped after a few seconds, say) do not
interrupt the streak.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from restledger.data.models import Session, SessionType, sort_sessions

MIN_EFFECTIVE_BREAK_SECONDS = 180
EFFECTIVE_BREAK_PLANNED_RATIO = 0.5


def break_reset_threshold(session: Session) -> float:
    """Seconds a break must last to reset the streak."""
    return max(
        float(MIN_EFFECTIVE_BREAK_SECONDS),
        session.planned_duration * EFFECTIVE_BREAK_PLANNED_RATIO,
    )


def max_continuous_work(sessions: Sequence[Session]) -> float:
    """Longest run of work seconds uninterrupted by an effective break."""
    current = 0.0
    longest = 0.0
    previous_end: Optional[datetime] = None

    for s in sort_sessions(list(sessions)):
        if previous_end is not None:
            gap = (s.start_time - previous_end).total_seconds()
            if gap >= MIN_EFFECTIVE_BREAK_SECONDS:
                current = 0.0

        if s.type == SessionType.BREAK:
            if s.seconds >= break_reset_threshold(s):
                current = 0.0
        else:
            current += s.seconds
            longest = max(longest, current)

        previous_end = s.end_time

    return longest


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   One forward pass over time-ordered sessions, tracking the running work
#   streak and the best streak seen.
#
# Key rules:
#   - Idle gap >= 3 min between sessions resets the streak even without a
#     break session.
#   - A break resets the streak only if it lasted max(3 min, half its
#     planned length).
#   - previous_end advances after every session, work or break.
#
# Interviewer-friendly talking points:
#   1. Sorting first makes the result independent of store ordering.
#   2. Zero-length sessions are harmless: they add 0 work and their gap
#      check uses the same timestamps as their neighbours.
#   3. With gap filling enabled, idle time between work sessions becomes a
#      synthetic break, which resets the streak through the break rule.
