"""
Gap Synthesizer — infers "more rest" the user took outside the break flow.

When two work sessions are separated by idle time, the user was resting even
though no break was recorded. With the feature enabled, those gaps become
synthetic break sessions so totals, scores and streaks reflect them.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from restledger.data.models import (
    MORE_REST_NOTE,
    POWER_INTERRUPT_BREAK_NOTE,
    POWER_INTERRUPT_WORK_NOTE,
    Session,
    SessionType,
    sort_sessions,
)

logger = logging.getLogger(__name__)


def _should_fill(prev: Session, nxt: Session) -> bool:
    # A power interruption during work makes the idle time ambiguous; one
    # during a break ended the break early, so the rest of the gap is rest.
    if prev.notes == POWER_INTERRUPT_BREAK_NOTE:
        return True
    return (
        prev.type == SessionType.WORK
        and nxt.type == SessionType.WORK
        and prev.notes != POWER_INTERRUPT_WORK_NOTE
    )


def _epoch_ms(session_time) -> int:
    return int(session_time.timestamp() * 1000)


def synthesize_gaps(sessions: Sequence[Session]) -> List[Session]:
    """Return only the synthetic rest sessions for qualifying gaps."""
    ordered = sort_sessions(list(sessions))
    gaps: List[Session] = []

    for prev, nxt in zip(ordered, ordered[1:]):
        gap_start = prev.end_time
        gap_end = nxt.start_time
        if gap_end <= gap_start:
            continue
        if not _should_fill(prev, nxt):
            continue
        seconds = int((gap_end - gap_start).total_seconds())
        if seconds <= 0:
            continue
        gaps.append(Session(
            id=f"more-rest-{_epoch_ms(gap_start)}-{_epoch_ms(gap_end)}",
            type=SessionType.BREAK,
            start_time=gap_start,
            end_time=gap_end,
            duration=float(seconds),
            planned_duration=seconds,
            is_skipped=False,
            extended_seconds=0,
            notes=MORE_REST_NOTE,
        ))

    return gaps


def augment_with_gaps(sessions: Sequence[Session], enabled: bool) -> List[Session]:
    """
    Merge synthetic rest sessions into `sessions`, sorted by start time.

    Disabled or empty input is returned unchanged. Running this on its own
    output adds nothing: every synthetic session abuts both neighbours.
    """
    if not enabled or not sessions:
        return list(sessions)
    gaps = synthesize_gaps(sessions)
    if gaps:
        logger.debug("Synthesized %d rest gap(s)", len(gaps))
    return sort_sessions(list(sessions) + gaps)


def more_rest_seconds(sessions: Sequence[Session]) -> int:
    """Total seconds of rest the gap filler would add."""
    return sum(int(g.seconds) for g in synthesize_gaps(sessions))
