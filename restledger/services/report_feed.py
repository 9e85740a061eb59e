"""
Report Feed — serves daily report cards to a consumer scrolling backward
through history.

Handles: lazy day-window fetching, page assembly, clean termination at the
earliest session, and discarding results that belong to a superseded reset.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Callable, List, Optional

from restledger.analytics.gap_fill import augment_with_gaps
from restledger.analytics.scoring import ReportCard, build_report_card, group_by_local_date
from restledger.data.models import to_local_naive

logger = logging.getLogger(__name__)

# Cards per load_more() call (UI batch size)
PAGE_SIZE = 15
# Days per range query (fetch granularity)
WINDOW_DAYS = 15

ONE_DAY = timedelta(days=1)


class FeedState:
    """Tracks where the feed is in its current sequence."""
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    LOADING_MORE = "loading_more"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class FeedConfig:
    more_rest_enabled: bool = False
    page_size: int = PAGE_SIZE
    window_days: int = WINDOW_DAYS


@dataclass(frozen=True)
class PageResult:
    """Outcome of one load_more() call."""
    appended: List[ReportCard] = field(default_factory=list)
    exhausted: bool = False
    discarded: bool = False     # result belonged to a superseded sequence
    busy: bool = False          # another load_more of this sequence is running
    error: Optional[BaseException] = None


def _midnight(day: date) -> datetime:
    return datetime.combine(day, datetime.min.time())


class ReportFeed:
    """
    Backward, day-windowed pagination over a session store.

    State transitions (per sequence):
        idle → loading → (ready | exhausted)
        ready → loading_more → (ready | exhausted)
    reset() may interrupt any of them and starts a new sequence.

    `store` must provide awaitable query_range(start, end), get_bounds() and,
    when gap fill is on, next_session(after);
    `clock` returns the local "now" and exists so tests can pin the date.
    """

    def __init__(
        self,
        store: Any,
        clock: Optional[Callable[[], datetime]] = None,
        config: Optional[FeedConfig] = None,
    ) -> None:
        self.store = store
        self.clock = clock or datetime.now
        self.config = config or FeedConfig()
        self.state: str = FeedState.IDLE

        self._sequence = 0
        self._cards: List[ReportCard] = []
        self._cursor: Optional[date] = None
        self._earliest: Optional[date] = None
        self._bounds_loaded = False
        self._loading_sequence: Optional[int] = None

    # ── Public API ──────────────────────────────────────────────────────────

    @property
    def sequence(self) -> int:
        return self._sequence

    @property
    def cards(self) -> List[ReportCard]:
        """Every card surfaced in this sequence, newest first."""
        return list(self._cards)

    @property
    def has_more(self) -> bool:
        return self.state != FeedState.EXHAUSTED

    def reset(self, config: Optional[FeedConfig] = None) -> int:
        """Start a new sequence. In-flight work of older sequences is orphaned."""
        if config is not None:
            self.config = config
        self._sequence += 1
        self._cards = []
        self._cursor = None
        self._earliest = None
        self._bounds_loaded = False
        self._loading_sequence = None
        self.state = FeedState.IDLE
        logger.info("Report feed reset (sequence %d)", self._sequence)
        return self._sequence

    def watch(self, subscribe: Optional[Callable] = None) -> Callable[[], None]:
        """Reset whenever the store reports a change. Returns unsubscribe."""
        subscribe = subscribe or self.store.subscribe
        return subscribe(lambda: self.reset())

    async def load_more(self) -> PageResult:
        """Fetch the next page of report cards for the current sequence."""
        if self.state == FeedState.EXHAUSTED:
            return PageResult(exhausted=True)

        seq = self._sequence
        if self._loading_sequence == seq:
            logger.debug("load_more already running for sequence %d", seq)
            return PageResult(busy=True)

        previous_state = self.state
        self._loading_sequence = seq
        self.state = (
            FeedState.LOADING if previous_state == FeedState.IDLE
            else FeedState.LOADING_MORE
        )
        try:
            return await self._load_page(seq, previous_state)
        finally:
            if self._loading_sequence == seq:
                self._loading_sequence = None

    # ── Internal ────────────────────────────────────────────────────────────

    async def _load_page(self, seq: int, previous_state: str) -> PageResult:
        cfg = self.config
        try:
            if not self._bounds_loaded:
                bounds = await self.store.get_bounds()
                if seq != self._sequence:
                    return self._discard(seq)
                self._bounds_loaded = True
                if bounds.earliest_start is None:
                    logger.info("No sessions recorded; report feed exhausted.")
                    self.state = FeedState.EXHAUSTED
                    return PageResult(exhausted=True)
                self._earliest = to_local_naive(bounds.earliest_start).date()
                self._cursor = to_local_naive(self.clock()).date()

            cursor = self._cursor
            page: List[ReportCard] = []

            while len(page) < cfg.page_size and cursor >= self._earliest:
                window_first = cursor - timedelta(days=cfg.window_days - 1)
                query_end = _midnight(cursor + 2 * ONE_DAY)
                # one day of padding each side so gap fill sees the neighbours
                result = await self.store.query_range(
                    _midnight(window_first - ONE_DAY), query_end
                )
                if seq != self._sequence:
                    return self._discard(seq)

                sessions = list(result.sessions)
                if cfg.more_rest_enabled:
                    # a gap may run past the padding; close it with the real successor
                    following = await self.store.next_session(query_end)
                    if seq != self._sequence:
                        return self._discard(seq)
                    if following is not None:
                        sessions.append(following)

                sessions = augment_with_gaps(sessions, cfg.more_rest_enabled)
                by_day = group_by_local_date(sessions)

                day = cursor
                while day >= window_first:
                    card = build_report_card(day, by_day.get(day, []))
                    day -= ONE_DAY
                    if card is not None:
                        page.append(card)
                        if len(page) >= cfg.page_size:
                            break
                cursor = day

        except Exception as exc:
            if seq != self._sequence:
                return self._discard(seq)
            logger.warning("Failed to load report page (sequence %d): %s", seq, exc)
            self.state = previous_state
            return PageResult(error=exc)

        # No awaits past this point: the sequence check above still holds.
        exhausted = cursor < self._earliest
        self._cursor = cursor
        self._cards.extend(page)
        self.state = FeedState.EXHAUSTED if exhausted else FeedState.READY
        logger.info(
            "Loaded %d report card(s), cursor now %s%s",
            len(page), cursor, " (exhausted)" if exhausted else "",
        )
        return PageResult(appended=page, exhausted=exhausted)

    def _discard(self, seq: int) -> PageResult:
        logger.debug("Discarding stale page of sequence %d (current %d)", seq, self._sequence)
        return PageResult(discarded=True)


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Powers an infinite-scroll daily report. Each load_more() walks backward
#   from a date cursor in 15-day query windows until it has 15 cards or runs
#   past the first recorded session.
#
# Key design decisions:
#   - Page size and window size are separate constants: one controls UI
#     batches, the other how much each query costs.
#   - Sequence numbers: reset() bumps the counter; every await is followed
#     by "is this still my sequence?" and stale results are dropped. No task
#     cancellation is needed, orphaned fetches just finish quietly.
#   - Commit at the end: cursor and cards change only after the last await,
#     so a failed query leaves nothing half-applied and the next scroll
#     retries the same window.
#   - Stopping mid-window: when a page fills up, the cursor points at the day
#     before the last card, so no day is skipped or shown twice.
#
# Data flow:
#   load_more() → store.get_bounds() (once) → store.query_range(window) →
#   store.next_session() (gap fill only) → gap fill → group by local date →
#   build_report_card() per day → page
#
# Interviewer-friendly talking points:
#   1. Single event loop = no locks. The check-then-update has no await in
#      between, so a reset() can't interleave with it.
#   2. In-flight guard: a scroll sentinel firing twice gets busy=True back
#      instead of issuing a duplicate query.
