"""
RestLedger — productivity reports from a work/break session log.
Entry point for the command-line reports.
"""

import argparse
import asyncio
import logging
import sys
from datetime import datetime, timedelta
from pathlib import Path

# Ensure the package is importable when run from a checkout
sys.path.insert(0, str(Path(__file__).resolve().parent))

from restledger.analytics.aggregator import aggregate
from restledger.analytics.fragments import RANGES, display_bounds
from restledger.analytics.gap_fill import augment_with_gaps
from restledger.analytics.heatmap import build_heatmap, heatmap_window
from restledger.analytics.trends import summarize_reports
from restledger.config import feed_config, load_config
from restledger.data.database import Database
from restledger.data.repository import SessionRepository
from restledger.data.store import AsyncSessionStore
from restledger.services.report_feed import ReportFeed

HEATMAP_GLYPHS = " .:*#"


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler("restledger.log", encoding="utf-8"),
        ],
    )


def format_duration(seconds: float) -> str:
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


# ── Commands ────────────────────────────────────────────────────────────────

async def run_report(repo: SessionRepository, cfg: dict, pages: int) -> list:
    feed = ReportFeed(AsyncSessionStore(repo), config=feed_config(cfg))
    feed.reset()
    for _ in range(pages):
        result = await feed.load_more()
        if result.error is not None:
            print("Could not load more reports, see restledger.log.")
            break
        for card in result.appended:
            s = card.stats
            print(
                f"{card.date.isoformat()}  score {card.score:3d} ({card.level:9s})  "
                f"work {format_duration(s.work_duration):>7s}  "
                f"rest {format_duration(s.rest_duration):>7s}  "
                f"breaks {s.completed_breaks}/{s.total_breaks}  "
                f"longest {format_duration(s.max_continuous_work)}"
            )
            for item in card.score_details.penalty_items():
                print(f"    -{item.points:2d}  {item.key} x{item.steps}")
        if result.exhausted:
            break
    return feed.cards


def run_summary(repo: SessionRepository, cfg: dict, range_name: str) -> None:
    start, end = display_bounds(range_name, datetime.now())
    sessions = augment_with_gaps(repo.query_range(start, end).sessions, cfg["more_rest_enabled"])
    view = aggregate(sessions, start, end)
    print(f"{range_name}: {start:%Y-%m-%d} – {end:%Y-%m-%d}")
    print(f"  work        {format_duration(view.total_work_seconds)}")
    print(f"  rest        {format_duration(view.total_break_seconds)}")
    print(f"  breaks      {view.completed_breaks} completed, {view.skipped_breaks} skipped")
    print(f"  completion  {view.completion_rate}%")


def run_heatmap(repo: SessionRepository, cfg: dict) -> None:
    today = datetime.now().date()
    first, last = heatmap_window(today, cfg["heatmap_months"])
    result = repo.query_range(
        datetime.combine(first, datetime.min.time()),
        datetime.combine(last + timedelta(days=1), datetime.min.time()),
    )
    days = build_heatmap(result.sessions, cfg["heatmap_months"], today=today)
    # one row per weekday, Monday first
    rows = [[] for _ in range(7)]
    for i in range(days[0].date.weekday()):
        rows[i].append(" ")
    for day in days:
        rows[day.date.weekday()].append(HEATMAP_GLYPHS[day.level])
    for label, row in zip("MTWTFSS", rows):
        print(f"{label} {''.join(row)}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="restledger", description=__doc__)
    parser.add_argument("--db", type=Path, help="SQLite database path")
    parser.add_argument("--config", type=Path, help="settings JSON path")
    parser.add_argument("--more-rest", action="store_true",
                        help="count idle gaps between work sessions as rest")
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    report = sub.add_parser("report", help="daily report cards, newest first")
    report.add_argument("--pages", type=int, default=1)
    summary = sub.add_parser("summary", help="totals for a date range")
    summary.add_argument("range", choices=RANGES, nargs="?", default="today")
    sub.add_parser("heatmap", help="break completion heatmap")
    trends = sub.add_parser("trends", help="score trends over recent reports")
    trends.add_argument("--pages", type=int, default=2)
    return parser


def main(argv=None) -> None:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    cfg = load_config(args.config)
    if args.more_rest:
        cfg["more_rest_enabled"] = True
    db_path = args.db or (Path(cfg["db_path"]) if cfg["db_path"] else None)

    db = Database(db_path)
    repo = SessionRepository(db.connect())
    logger.info("Loaded %d sessions.", repo.count_sessions())
    try:
        if args.command == "report":
            asyncio.run(run_report(repo, cfg, args.pages))
        elif args.command == "summary":
            run_summary(repo, cfg, args.range)
        elif args.command == "heatmap":
            run_heatmap(repo, cfg)
        elif args.command == "trends":
            cards = asyncio.run(run_report(repo, cfg, args.pages))
            t = summarize_reports(cards)
            if t.days == 0:
                print("No report days yet.")
            else:
                print(f"days {t.days}  mean score {t.mean_score:.1f}  recent {t.ema_score:.1f}")
                print(f"best {t.best_day}  worst {t.worst_day}  levels {t.level_counts}")
    finally:
        db.close()


if __name__ == "__main__":
    main()


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   The entry point. Sets up logging, opens the SQLite store, and runs one of
#   four views: paginated daily reports, range summary, heatmap, trends.
#
# Key points:
#   - sys.path manipulation: ensures imports work when run from the repo
#     root without installing the package.
#   - asyncio.run(): the report feed is async because its queries run on a
#     worker thread; the CLI just drives it page by page.
#   - Logging to both console and file.
