"""Helper functions for maintain_corpus CLI."""

from __future__ import annotations

import argparse
from datetime import date, timedelta
from pathlib import Path
from typing import Optional

from common.cli_helpers import parse_date, parse_positive_int, utc_today
from fetch_articles.helpers import add_source_args
from tag_articles.helpers import add_tagger_args

JOBS = (
    "backfill",
    "move-dates",
    "normalize-tags",
    "retag",
    "prune",
    "backfill-timestamps",
)


def parse_maintain_corpus_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments for maintain_corpus."""

    parser = argparse.ArgumentParser(description="Repair and normalize the dated news corpus.")
    subparsers = parser.add_subparsers(dest="job", required=True)

    backfill = subparsers.add_parser("backfill", help="Fetch raw news for missing days")
    add_source_args(backfill)
    window = backfill.add_mutually_exclusive_group()
    window.add_argument(
        "--start-date",
        type=lambda v: parse_date(v, "start-date"),
        default=None,
        help="First expected date (default: $BACKFILL_START_DATE or 1 January this year)",
    )
    window.add_argument("--days", type=parse_positive_int, default=None, help="Only check the last N days")
    backfill.add_argument(
        "--newest-first",
        action="store_true",
        help="Fetch the most recent missing day first (default: oldest first)",
    )

    for name, description in (
        ("move-dates", "Move articles into the file for their publication date"),
        ("prune", "Remove duplicate articles from tagged files"),
        ("backfill-timestamps", "Add publishedAtTs where missing"),
    ):
        sub = subparsers.add_parser(name, help=description)
        _add_tagged_dir(sub)

    normalize = subparsers.add_parser("normalize-tags", help="Map tag values onto canonical taxonomy ids")
    _add_tagged_dir(normalize)
    normalize.add_argument("--tags-file", type=Path, default=None, help="Tag definitions JSON (default: $TAGS_FILE)")
    normalize.add_argument("--aliases", type=Path, default=None, help="Extra {alias: tag_id} JSON merged over the built-in table")

    retag = subparsers.add_parser("retag", help="Retag articles with empty or fallback-only tags")
    _add_tagged_dir(retag)
    add_tagger_args(retag)

    return parser.parse_args(argv)


def _add_tagged_dir(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--tagged-dir", type=Path, default=None, help="Tagged news directory (default: $TAGGED_NEWS_DIR)")


def resolve_start_date(
    start_date: Optional[date],
    days: Optional[int],
    configured: Optional[date],
    today: Optional[date] = None,
) -> date:
    """First backfill date: --start-date, else --days, else config, else 1 January."""
    today = today or utc_today()
    if start_date is not None:
        return start_date
    if days is not None:
        return today - timedelta(days=days)
    if configured is not None:
        return configured
    return date(today.year, 1, 1)
