"""Fetch raw news for days that have no raw file yet."""

import logging
import time
from datetime import date, timedelta
from pathlib import Path
from typing import Callable, Optional

from common.cli_helpers import date_range, utc_today
from common.errors import ExternalFetchError
from common.local_io import list_corpus_dates
from common.models import UPDATED, JobReport

logger = logging.getLogger(__name__)

FETCH_DELAY_SECONDS = 1.0


def expected_dates(start: date, today: date) -> list[str]:
    """Every date from start through yesterday, inclusive, oldest first."""
    yesterday = today - timedelta(days=1)
    if start > yesterday:
        return []
    return [d.isoformat() for d in date_range(start, yesterday)]


def find_missing_dates(raw_dir: Path, start: date, today: Optional[date] = None) -> list[str]:
    """Expected dates with no raw file, oldest first."""
    today = today or utc_today()
    existing = list_corpus_dates(raw_dir)
    return [d for d in expected_dates(start, today) if d not in existing]


def backfill_raw_files(
    raw_dir: Path,
    fetch: Callable[[str], object],
    start: date,
    today: Optional[date] = None,
    newest_first: bool = False,
    delay: float = FETCH_DELAY_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> JobReport:
    """
    Fetch every missing day from start through yesterday.

    Args:
        raw_dir: Raw news directory
        fetch: Callable that fetches and saves one YYYY-MM-DD date
        start: First expected date
        today: Reference date (default: today in UTC)
        newest_first: Fetch the most recent gap first instead of the oldest
        delay: Pause between fetches
        sleep: Sleep function

    Raises:
        ExternalFetchError: On the first failed fetch; later dates are not attempted.
    """
    report = JobReport("backfill")
    missing = find_missing_dates(raw_dir, start, today)

    if not missing:
        logger.info("All news since %s is up to date. Nothing to do.", start.isoformat())
        return report

    if newest_first:
        missing.reverse()

    logger.info("Found %d missing day(s): %s", len(missing), ", ".join(missing))

    for index, news_date in enumerate(missing):
        if index and delay > 0:
            sleep(delay)
        try:
            fetch(news_date)
        except ExternalFetchError:
            logger.error("Aborting backfill due to error on date: %s.", news_date)
            raise
        report.record(news_date, UPDATED, changes=1)

    logger.info("Backfill process completed successfully.")
    return report
