"""Datetime utilities for article timestamps."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Optional

from common.cli_helpers import is_date_string


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO datetime string into an aware UTC datetime.

    Naive values are treated as UTC. Returns None for missing or unparseable
    values instead of raising.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def to_unix_seconds(value: Any) -> Optional[int]:
    """Unix timestamp in whole seconds (floored) for an ISO datetime, or None."""
    parsed = parse_datetime(value)
    if parsed is None:
        return None
    return math.floor(parsed.timestamp())


def published_date(value: Any) -> Optional[str]:
    """UTC calendar date (YYYY-MM-DD) implied by a publishedAt value.

    Falls back to a leading YYYY-MM-DD prefix when the full value does not
    parse, and returns None when neither is available.
    """
    parsed = parse_datetime(value)
    if parsed is not None:
        return parsed.strftime("%Y-%m-%d")
    if isinstance(value, str) and is_date_string(value.strip()[:10]):
        return value.strip()[:10]
    return None
