"""CLI for fetching one day of raw news."""

from __future__ import annotations

import logging
from typing import Optional

from common.cli_helpers import setup_logging
from common.config import load_config
from common.errors import ExternalFetchError
from fetch_articles.fetch_articles import fetch_and_save
from fetch_articles.helpers import parse_fetch_articles_args

logger = logging.getLogger(__name__)


def main(argv: Optional[list[str]] = None) -> None:
    setup_logging()
    args = parse_fetch_articles_args(argv)
    config = load_config()

    source = args.source or config.news_source
    news_date = args.date.isoformat()

    try:
        fetch_and_save(
            args.raw_dir or config.raw_dir,
            news_date,
            source=source,
            topic=args.topic or config.topic,
            api_key=config.api_key_for(source),
        )
    except (ExternalFetchError, ValueError) as exc:
        logger.error("Error fetching news for %s: %s", news_date, exc)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
