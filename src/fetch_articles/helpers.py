"""Helper functions for fetch_articles CLI."""

from __future__ import annotations

import argparse
from datetime import timedelta
from pathlib import Path
from typing import Optional

from common.cli_helpers import parse_date, utc_today
from fetch_articles.sources import NEWS_SOURCES


def add_source_args(parser: argparse.ArgumentParser) -> None:
    """Source options shared by fetch and backfill."""
    parser.add_argument(
        "--source",
        choices=sorted(NEWS_SOURCES),
        default=None,
        help="News API to query (default: $NEWS_SOURCE or newsapi)",
    )
    parser.add_argument("--topic", default=None, help="Search topic (default: $NEWS_TOPIC)")
    parser.add_argument("--raw-dir", type=Path, default=None, help="Raw news directory (default: $RAW_NEWS_DIR)")


def parse_fetch_articles_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments for fetch_articles."""

    parser = argparse.ArgumentParser(description="Fetch one day of raw news.")
    parser.add_argument(
        "--date",
        type=lambda v: parse_date(v, "date"),
        default=utc_today() - timedelta(days=1),
        help="UTC date to fetch (YYYY-MM-DD, default: yesterday)",
    )
    add_source_args(parser)
    return parser.parse_args(argv)
