"""
Milestones — which duration achievements a session history has reached.

Pure evaluation only: unlocking, persistence and notifications belong to the
caller.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from restledger.data.models import Session, SessionType

from .gap_fill import more_rest_seconds

SECONDS_PER_HOUR = 3600

WORK_MILESTONES: List[Tuple[int, str]] = [
    (10, "work_10_hours"),
    (100, "work_100_hours"),
    (500, "work_500_hours"),
    (1000, "work_1000_hours"),
]

BREAK_MILESTONES: List[Tuple[int, str]] = [
    (10, "break_10_hours"),
    (100, "break_100_hours"),
    (200, "break_200_hours"),
    (300, "break_300_hours"),
    (400, "break_400_hours"),
    (500, "break_500_hours"),
    (750, "break_750_hours"),
    (1000, "break_1000_hours"),
]


def _is_completed(session: Session, kind: str) -> bool:
    return session.type == kind and not session.is_skipped and session.seconds > 0


def total_work_seconds(sessions: Sequence[Session]) -> int:
    return int(sum(s.seconds for s in sessions if s.type == SessionType.WORK))


def total_break_seconds(sessions: Sequence[Session], include_more_rest: bool = False) -> int:
    """All recorded break time, plus inferred gap rest when enabled."""
    total = int(sum(s.seconds for s in sessions if s.type == SessionType.BREAK))
    if include_more_rest:
        total += more_rest_seconds(sessions)
    return total


def reached_milestones(
    sessions: Sequence[Session], more_rest_enabled: bool = False
) -> List[str]:
    """Ids of every milestone the history satisfies, in definition order."""
    reached: List[str] = []
    if any(_is_completed(s, SessionType.WORK) for s in sessions):
        reached.append("first_work")
    if any(_is_completed(s, SessionType.BREAK) for s in sessions):
        reached.append("first_break")

    work = total_work_seconds(sessions)
    for hours, milestone_id in WORK_MILESTONES:
        if work >= hours * SECONDS_PER_HOUR:
            reached.append(milestone_id)

    rest = total_break_seconds(sessions, include_more_rest=more_rest_enabled)
    for hours, milestone_id in BREAK_MILESTONES:
        if rest >= hours * SECONDS_PER_HOUR:
            reached.append(milestone_id)
    return reached
