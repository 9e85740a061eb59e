"""
Daily Scorer — turns one day's activity into a 20-100 score.

The score starts at 100 and loses points in fixed steps:
  - 5 points per full 40 minutes of the longest continuous work stretch;
  - 5 points once total work passes 4 hours, plus 10 per extra full 2 hours.
The penalty is capped so the score never drops below 20. Every intermediate
value is kept on ScoreDetails so the breakdown can be shown as-is.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Sequence

from restledger.data.models import Session, SessionType

from .aggregator import completion_rate
from .continuity import max_continuous_work

SCORE_MAX = 100
SCORE_MIN = 20
CONTINUOUS_WORK_STEP_SECONDS = 40 * 60
CONTINUOUS_WORK_PENALTY = 5
SCREEN_BASE_SECONDS = 4 * 60 * 60
SCREEN_BASE_PENALTY = 5
SCREEN_STEP_SECONDS = 2 * 60 * 60
SCREEN_STEP_PENALTY = 10

MIN_ACTIVE_WORK_SECONDS = 60


class ReportLevel:
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


def level_for_score(score: int) -> str:
    if score >= 80:
        return ReportLevel.EXCELLENT
    if score >= 60:
        return ReportLevel.GOOD
    if score >= 40:
        return ReportLevel.FAIR
    return ReportLevel.POOR


@dataclass(frozen=True)
class DailyStats:
    """Aggregates for one local calendar day. Durations in seconds."""
    date: date
    work_duration: float = 0.0
    rest_duration: float = 0.0
    total_breaks: int = 0
    completed_breaks: int = 0
    completion_rate: int = 0
    max_continuous_work: float = 0.0


@dataclass(frozen=True)
class PenaltyItem:
    key: str            # 'continuous' | 'screen-base' | 'screen-extra'
    steps: int
    points: int


@dataclass(frozen=True)
class ScoreDetails:
    score: int
    continuous_steps: int
    continuous_penalty: int
    screen_base_penalty: int
    screen_extra_steps: int
    screen_extra_penalty: int
    raw_penalty: int
    applied_penalty: int
    capped: bool
    level: str

    def penalty_items(self) -> List[PenaltyItem]:
        """Non-zero penalty lines in display order."""
        items = [
            PenaltyItem("continuous", self.continuous_steps, self.continuous_penalty),
            PenaltyItem("screen-base", 1 if self.screen_base_penalty else 0,
                        self.screen_base_penalty),
            PenaltyItem("screen-extra", self.screen_extra_steps, self.screen_extra_penalty),
        ]
        return [item for item in items if item.points > 0]


def _stat(stats: Any, name: str) -> float:
    if isinstance(stats, Mapping):
        return float(stats.get(name, 0) or 0)
    return float(getattr(stats, name, 0) or 0)


def score_day(stats: Any) -> ScoreDetails:
    """
    Score a day from its work_duration and max_continuous_work (seconds).

    Accepts a DailyStats or any mapping/object exposing those two names.
    """
    work = max(0.0, _stat(stats, "work_duration"))
    continuous = max(0.0, _stat(stats, "max_continuous_work"))

    continuous_steps = int(continuous // CONTINUOUS_WORK_STEP_SECONDS)
    continuous_penalty = continuous_steps * CONTINUOUS_WORK_PENALTY

    screen_base_penalty = 0
    screen_extra_steps = 0
    screen_extra_penalty = 0
    if work > SCREEN_BASE_SECONDS:
        screen_base_penalty = SCREEN_BASE_PENALTY
        screen_extra_steps = int((work - SCREEN_BASE_SECONDS) // SCREEN_STEP_SECONDS)
        screen_extra_penalty = screen_extra_steps * SCREEN_STEP_PENALTY

    raw_penalty = continuous_penalty + screen_base_penalty + screen_extra_penalty
    max_penalty = SCORE_MAX - SCORE_MIN
    applied_penalty = min(raw_penalty, max_penalty)
    score = SCORE_MAX - applied_penalty

    return ScoreDetails(
        score=score,
        continuous_steps=continuous_steps,
        continuous_penalty=continuous_penalty,
        screen_base_penalty=screen_base_penalty,
        screen_extra_steps=screen_extra_steps,
        screen_extra_penalty=screen_extra_penalty,
        raw_penalty=raw_penalty,
        applied_penalty=applied_penalty,
        capped=raw_penalty > max_penalty,
        level=level_for_score(score),
    )


# ── Daily stats / report cards ──────────────────────────────────────────────

def build_daily_stats(day: date, sessions: Sequence[Session]) -> DailyStats:
    """
    Sum one day's sessions (already grouped by local start date).

    Rest counts every break, skipped ones included; skipping only lowers the
    completion rate.
    """
    work = 0.0
    rest = 0.0
    total_breaks = 0
    completed = 0

    for s in sessions:
        if s.type == SessionType.WORK:
            work += s.seconds
        elif s.type == SessionType.BREAK:
            total_breaks += 1
            rest += s.seconds
            if not s.is_skipped:
                completed += 1

    return DailyStats(
        date=day,
        work_duration=work,
        rest_duration=rest,
        total_breaks=total_breaks,
        completed_breaks=completed,
        completion_rate=completion_rate(completed, total_breaks),
        max_continuous_work=max_continuous_work(sessions),
    )


def is_meaningful_day(stats: DailyStats) -> bool:
    """Days with under a minute of work and no breaks are not reported."""
    return not (stats.work_duration < MIN_ACTIVE_WORK_SECONDS and stats.total_breaks == 0)


@dataclass(frozen=True)
class ReportCard:
    """One day's stats plus its score."""
    stats: DailyStats
    score_details: ScoreDetails

    @property
    def date(self) -> date:
        return self.stats.date

    @property
    def level(self) -> str:
        return self.score_details.level

    @property
    def score(self) -> int:
        return self.score_details.score


def build_report_card(day: date, sessions: Sequence[Session]) -> Optional[ReportCard]:
    """Report card for `day`, or None if the day had no meaningful activity."""
    if not sessions:
        return None
    stats = build_daily_stats(day, sessions)
    if not is_meaningful_day(stats):
        return None
    return ReportCard(stats=stats, score_details=score_day(stats))


def group_by_local_date(sessions: Sequence[Session]) -> Dict[date, List[Session]]:
    """Bucket sessions by the local calendar date they started on."""
    by_day: Dict[date, List[Session]] = defaultdict(list)
    for s in sessions:
        by_day[s.local_date].append(s)
    return dict(by_day)


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Converts a day of sessions into a DailyStats row, scores it, and wraps
#   both in a ReportCard for the daily report feed.
#
# Key design decisions:
#   - Stepped penalties instead of a smooth curve: "you lost 10 points for
#     two 40-minute stretches" is explainable; a sigmoid is not.
#   - Floor at 20: a rough day still gets a score worth improving from.
#   - ScoreDetails keeps every intermediate (steps, each penalty, raw vs
#     applied, capped) so the UI renders the breakdown without recomputing.
#   - Structured levels ("excellent"...), never display strings; wording and
#     translation belong to the presentation layer.
#
# Interviewer-friendly talking points:
#   1. Score is monotonic: more work or longer stretches never raise it.
#   2. The "meaningful day" filter hides days where the app was merely
#      opened, so the feed isn't full of 100-point empty days.
