"""
Settings — JSON-backed configuration for the reporting engine.

Values missing from the file fall back to DEFAULT_CONFIG, so an old settings
file keeps working after new keys are added.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from restledger.services.report_feed import PAGE_SIZE, WINDOW_DAYS, FeedConfig

logger = logging.getLogger(__name__)

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "settings.json"

# Default settings (used if JSON doesn't exist yet)
DEFAULT_CONFIG: Dict[str, Any] = {
    "more_rest_enabled": False,
    "page_size": PAGE_SIZE,
    "window_days": WINDOW_DAYS,
    "heatmap_months": 6,
    "db_path": None,
}


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Read settings from disk, merged over the defaults."""
    path = path or CONFIG_PATH
    if path.exists():
        try:
            with open(path, encoding="utf-8") as f:
                cfg = json.load(f)
            if not isinstance(cfg, dict):
                raise ValueError("settings root must be an object")
            merged = DEFAULT_CONFIG.copy()
            merged.update({k: v for k, v in cfg.items() if k in DEFAULT_CONFIG})
            return merged
        except (json.JSONDecodeError, ValueError, OSError):
            logger.warning("Bad settings file %s, using defaults.", path)
    return DEFAULT_CONFIG.copy()


def save_config(config: Dict[str, Any], path: Optional[Path] = None) -> None:
    path = path or CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=2)


def feed_config(config: Dict[str, Any]) -> FeedConfig:
    """Build the report feed's config from a settings dict."""
    return FeedConfig(
        more_rest_enabled=bool(config.get("more_rest_enabled", False)),
        page_size=max(1, int(config.get("page_size", PAGE_SIZE))),
        window_days=max(1, int(config.get("window_days", WINDOW_DAYS))),
    )
