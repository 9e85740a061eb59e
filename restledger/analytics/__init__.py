from .aggregator import AggregateView, aggregate, completion_rate
from .continuity import MIN_EFFECTIVE_BREAK_SECONDS, max_continuous_work
from .gap_fill import augment_with_gaps, synthesize_gaps
from .heatmap import HeatmapDay, build_heatmap
from .scoring import (
    DailyStats, ReportCard, ReportLevel, ScoreDetails,
    build_daily_stats, build_report_card, score_day,
)

__all__ = [
    "AggregateView", "aggregate", "completion_rate",
    "MIN_EFFECTIVE_BREAK_SECONDS", "max_continuous_work",
    "augment_with_gaps", "synthesize_gaps",
    "HeatmapDay", "build_heatmap",
    "DailyStats", "ReportCard", "ReportLevel", "ScoreDetails",
    "build_daily_stats", "build_report_card", "score_day",
]
