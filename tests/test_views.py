"""Tests for range views, milestones, trend summaries and settings."""

import json
import pytest
from datetime import date, datetime, timedelta

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from restledger.analytics.fragments import (
    build_fragment_cells,
    count_rest_fragments,
    count_work_fragments,
    display_bounds,
    timeline_segments,
)
from restledger.analytics.milestones import (
    reached_milestones,
    total_break_seconds,
    total_work_seconds,
)
from restledger.analytics.scoring import ReportLevel, build_report_card
from restledger.analytics.trends import exponential_moving_average, summarize_reports
from restledger.config import DEFAULT_CONFIG, feed_config, load_config, save_config
from restledger.data.models import Session, SessionType

NOW = datetime(2024, 3, 31, 15, 30)


def work(start, end, **kw):
    return Session(id=f"w{start.isoformat()}", type=SessionType.WORK,
                   start_time=start, end_time=end, **kw)


def rest(start, end, **kw):
    return Session(id=f"b{start.isoformat()}", type=SessionType.BREAK,
                   start_time=start, end_time=end, **kw)


# ── Fragments ────────────────────────────────────────────────────────────────

class TestDisplayBounds:
    def test_today(self):
        start, end = display_bounds("today", NOW)
        assert start == datetime(2024, 3, 31)
        assert end == datetime(2024, 4, 1)

    def test_week_is_seven_days(self):
        start, end = display_bounds("week", NOW)
        assert start == datetime(2024, 3, 25)
        assert (end - start).days == 7

    def test_month_clamps_to_short_month(self):
        start, _ = display_bounds("month", NOW)
        assert start == datetime(2024, 2, 29)

    def test_unknown_range(self):
        with pytest.raises(ValueError):
            display_bounds("year", NOW)


class TestTimeline:
    def test_segments_are_clipped_percentages(self):
        start, end = datetime(2024, 3, 31), datetime(2024, 4, 1)
        sessions = [
            work(datetime(2024, 3, 30, 22), datetime(2024, 3, 31, 6)),
            rest(datetime(2024, 3, 31, 12), datetime(2024, 3, 31, 18)),
        ]
        segs = timeline_segments(sessions, start, end)
        assert [s.type for s in segs] == ["work", "break"]
        assert segs[0].start_pct == 0
        assert segs[0].end_pct == pytest.approx(25.0)
        assert segs[1].start_pct == pytest.approx(50.0)
        assert segs[1].end_pct == pytest.approx(75.0)

    def test_skipped_breaks_hidden(self):
        start, end = datetime(2024, 3, 31), datetime(2024, 4, 1)
        sessions = [rest(datetime(2024, 3, 31, 9), datetime(2024, 3, 31, 10), is_skipped=True)]
        assert timeline_segments(sessions, start, end) == []

    def test_empty_window(self):
        t = datetime(2024, 3, 31)
        assert timeline_segments([work(t, t + timedelta(hours=1))], t, t) == []


class TestFragmentCells:
    def setup_method(self):
        t = datetime(2024, 3, 31, 9)
        self.sessions = [
            rest(t + timedelta(hours=1), t + timedelta(hours=1, minutes=5)),
            work(t, t + timedelta(hours=1)),
            rest(t + timedelta(hours=2), t + timedelta(hours=2, minutes=5), is_skipped=True),
            work(t + timedelta(hours=3), t + timedelta(hours=3)),
        ]

    def test_counts(self):
        assert count_work_fragments(self.sessions) == 1
        assert count_rest_fragments(self.sessions) == 1

    def test_cells_are_chronological(self):
        cells = build_fragment_cells(self.sessions)
        assert [c.type for c in cells] == ["work", "break"]
        assert cells[0].duration == 3600
        assert cells[1].duration == 300


# ── Milestones ───────────────────────────────────────────────────────────────

class TestMilestones:
    def test_no_history(self):
        assert reached_milestones([]) == []

    def test_first_sessions(self):
        t = datetime(2024, 3, 31, 9)
        sessions = [work(t, t + timedelta(minutes=25)),
                    rest(t + timedelta(minutes=25), t + timedelta(minutes=30))]
        assert reached_milestones(sessions) == ["first_work", "first_break"]

    def test_skipped_break_is_not_first_break(self):
        t = datetime(2024, 3, 31, 9)
        sessions = [rest(t, t + timedelta(minutes=5), is_skipped=True)]
        assert "first_break" not in reached_milestones(sessions)

    def test_hour_thresholds(self):
        t = datetime(2024, 1, 1, 9)
        sessions = [work(t, t + timedelta(hours=10)),
                    rest(t + timedelta(hours=10), t + timedelta(hours=20))]
        reached = reached_milestones(sessions)
        assert "work_10_hours" in reached
        assert "break_10_hours" in reached
        assert "work_100_hours" not in reached

    def test_more_rest_counts_toward_break_milestones(self):
        t = datetime(2024, 1, 1, 9)
        sessions = [work(t, t + timedelta(hours=1)),
                    work(t + timedelta(hours=11), t + timedelta(hours=12))]
        assert total_work_seconds(sessions) == 7200
        assert total_break_seconds(sessions) == 0
        assert total_break_seconds(sessions, include_more_rest=True) == 10 * 3600
        assert "break_10_hours" not in reached_milestones(sessions)
        assert "break_10_hours" in reached_milestones(sessions, more_rest_enabled=True)


# ── Trends ───────────────────────────────────────────────────────────────────

def card_for(day, work_hours):
    start = datetime.combine(day, datetime.min.time()) + timedelta(hours=8)
    sessions = []
    for i in range(work_hours):
        block = start + timedelta(hours=i)
        sessions.append(work(block, block + timedelta(minutes=50)))
        sessions.append(rest(block + timedelta(minutes=50), block + timedelta(hours=1),
                             planned_duration=600))
    return build_report_card(day, sessions)


class TestTrends:
    def test_ema_single_value(self):
        assert exponential_moving_average([80]) == 80.0

    def test_ema_weights_recent(self):
        # 0.3 * 100 + 0.7 * 50
        assert exponential_moving_average([50, 100]) == pytest.approx(65.0)

    def test_empty_summary(self):
        summary = summarize_reports([])
        assert summary.days == 0
        assert summary.mean_score is None
        assert summary.best_day is None
        assert summary.level_counts[ReportLevel.EXCELLENT] == 0

    def test_summary_over_cards(self):
        d1, d2 = date(2024, 3, 30), date(2024, 3, 31)
        light = card_for(d1, 1)     # 50 min work, one 40-min step → 95
        heavy = card_for(d2, 6)     # 5h work → 95 - 5 base = 90
        summary = summarize_reports([heavy, light])
        assert summary.days == 2
        assert summary.best_day == d1
        assert summary.worst_day == d2
        assert summary.mean_score == pytest.approx((light.score + heavy.score) / 2)
        assert summary.ema_score == pytest.approx(0.3 * heavy.score + 0.7 * light.score)
        assert summary.level_counts[ReportLevel.EXCELLENT] == 2


# ── Settings ─────────────────────────────────────────────────────────────────

class TestConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config(tmp_path / "missing.json") == DEFAULT_CONFIG

    def test_partial_file_is_merged(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"more_rest_enabled": True, "unknown": 1}))
        cfg = load_config(path)
        assert cfg["more_rest_enabled"] is True
        assert cfg["page_size"] == DEFAULT_CONFIG["page_size"]
        assert "unknown" not in cfg

    def test_bad_json_falls_back(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{not json")
        assert load_config(path) == DEFAULT_CONFIG

    def test_non_object_root_falls_back(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("[1, 2]")
        assert load_config(path) == DEFAULT_CONFIG

    def test_save_then_load(self, tmp_path):
        path = tmp_path / "nested" / "settings.json"
        cfg = dict(DEFAULT_CONFIG, window_days=7)
        save_config(cfg, path)
        assert load_config(path)["window_days"] == 7

    def test_feed_config(self):
        fc = feed_config({"more_rest_enabled": 1, "page_size": 0, "window_days": 30})
        assert fc.more_rest_enabled is True
        assert fc.page_size == 1
        assert fc.window_days == 30
