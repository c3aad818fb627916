"""Common CLI helper utilities."""

from __future__ import annotations

import argparse
import logging
import re
from datetime import date, datetime, timedelta, timezone

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def setup_logging() -> None:
    """Configure standard logging format for CLI tools."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def parse_date(value: str, field_name: str = "date") -> date:
    """Parse a date string for argparse arguments.

    Args:
        value: Date string in YYYY-MM-DD format.
        field_name: Name of the field for error messages.

    Returns:
        Parsed date object.

    Raises:
        argparse.ArgumentTypeError: If the value is not a valid date.
    """
    if not DATE_PATTERN.match(value or ""):
        raise argparse.ArgumentTypeError(f"{field_name} must be YYYY-MM-DD")
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"{field_name} must be YYYY-MM-DD") from exc


def parse_positive_int(value: str) -> int:
    """argparse type for strictly positive integers."""
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}") from exc
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}")
    return number


def is_date_string(value: str) -> bool:
    """Return True if value is a real calendar date in YYYY-MM-DD form."""
    if not DATE_PATTERN.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def date_range(start: date, end: date) -> list[date]:
    """Return every date from start to end, both inclusive."""
    days = (end - start).days
    return [start + timedelta(days=offset) for offset in range(days + 1)]
