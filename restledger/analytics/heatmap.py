"""
Heatmap Builder — daily break-completion intensity over the last N months.

One bucket per calendar day, empty days included, so the grid always has the
same shape for a given `today`.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Sequence, Tuple

from restledger.data.models import Session, SessionType

DEFAULT_WINDOW_MONTHS = 6


@dataclass(frozen=True)
class HeatmapDay:
    date: date
    count: int = 0          # completed + skipped breaks
    completed: int = 0
    level: int = 0          # 0-4


def subtract_months(day: date, months: int) -> date:
    """Calendar-month subtraction, clamping the day to the target month."""
    month_index = day.year * 12 + (day.month - 1) - months
    year, month0 = divmod(month_index, 12)
    last_day = calendar.monthrange(year, month0 + 1)[1]
    return date(year, month0 + 1, min(day.day, last_day))


def heatmap_window(today: date, months: int = DEFAULT_WINDOW_MONTHS) -> Tuple[date, date]:
    """First and last (inclusive) dates covered by the heatmap."""
    return subtract_months(today, months), today


def intensity_level(count: int, completed: int) -> int:
    if count <= 0:
        return 0
    ratio = completed / count
    if ratio == 0:
        return 1
    if ratio < 0.5:
        return 2
    if ratio < 0.8:
        return 3
    return 4


def build_heatmap(
    sessions: Sequence[Session],
    window_months: int = DEFAULT_WINDOW_MONTHS,
    today: Optional[date] = None,
) -> List[HeatmapDay]:
    """Ascending list of HeatmapDay covering the trailing window."""
    today = today or datetime.now().date()
    first, last = heatmap_window(today, window_months)

    counts: Dict[date, List[int]] = {}
    for s in sessions:
        if s.type != SessionType.BREAK:
            continue
        day = s.local_date
        if day < first or day > last:
            continue
        bucket = counts.setdefault(day, [0, 0])   # [completed, skipped]
        if s.is_skipped:
            bucket[1] += 1
        else:
            bucket[0] += 1

    days: List[HeatmapDay] = []
    cursor = first
    while cursor <= last:
        completed, skipped = counts.get(cursor, (0, 0))
        count = completed + skipped
        days.append(HeatmapDay(
            date=cursor,
            count=count,
            completed=completed,
            level=intensity_level(count, completed),
        ))
        cursor += timedelta(days=1)
    return days
