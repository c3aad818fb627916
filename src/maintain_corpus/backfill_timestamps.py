"""Backfill publishedAtTs on tagged articles."""

import logging
from pathlib import Path

from common.datetime import to_unix_seconds
from common.local_io import iter_corpus_files, write_corpus_file
from common.models import UNCHANGED, UPDATED, JobReport

logger = logging.getLogger(__name__)


def backfill_missing_timestamps(tagged_dir: Path) -> JobReport:
    """Set publishedAtTs once for articles that lack it and have a parseable publishedAt."""
    report = JobReport("backfill-timestamps")

    for path, corpus in iter_corpus_files(tagged_dir, report):
        updated = 0
        articles = []
        for article in corpus.articles:
            if article.get("publishedAtTs") is None:
                timestamp = to_unix_seconds(article.get("publishedAt"))
                if timestamp is not None:
                    article = {**article, "publishedAtTs": timestamp}
                    updated += 1
            articles.append(article)

        if updated == 0 and corpus.is_consistent:
            report.record(path.name, UNCHANGED)
            continue

        write_corpus_file(path, corpus.with_articles(articles))
        report.record(path.name, UPDATED, changes=updated)
        report.count("articles_updated", updated)
        logger.info("-> Updated %s: added timestamps to %d article(s).", path.name, updated)

    return report
