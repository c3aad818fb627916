"""Resubmit untagged or fallback-only articles to the tagger."""

import logging
from pathlib import Path
from typing import Any, Optional

from common.local_io import iter_corpus_files, write_corpus_file
from common.models import FAILED, UNCHANGED, UPDATED, JobReport
from common.utils import article_label
from tag_articles.tag_articles import ARTICLE_ERRORS, ArticleTagger

logger = logging.getLogger(__name__)


def needs_retagging(article: dict[str, Any], fallback_tag: Optional[str]) -> bool:
    """True for missing or empty tags, or tags that are only the fallback tag."""
    tags = article.get("tags")
    if not tags or not isinstance(tags, list):
        return True
    return bool(fallback_tag) and tags == [fallback_tag]


def retag_missing_articles(tagged_dir: Path, tagger: ArticleTagger) -> JobReport:
    """
    Retag articles with empty or fallback-only tags.

    A new tag set is written only when it is non-empty and differs from the
    stored one. Per-article failures are reported and the sweep continues.
    """
    report = JobReport("retag")
    calls = 0

    for path, corpus in iter_corpus_files(tagged_dir, report):
        retagged = 0
        articles = []

        for article in corpus.articles:
            if not needs_retagging(article, tagger.fallback_tag):
                articles.append(article)
                continue

            if calls:
                tagger.pause()
            calls += 1

            title = article_label(article)
            logger.info("- Retagging article in %s: \"%s\"", path.name, title)
            try:
                new_tags = tagger.tag_article(article)
            except ARTICLE_ERRORS as exc:
                logger.error("  - Failed to call model for \"%s\": %s", title, exc)
                report.record(f"{path.name}: {title}", FAILED, reason=str(exc))
                articles.append(article)
                continue

            if new_tags and new_tags != article.get("tags"):
                articles.append({**article, "tags": new_tags})
                retagged += 1
                logger.info("  - Success! Tags: [%s]", ", ".join(new_tags))
            else:
                articles.append(article)
                logger.info("  - No new tags for \"%s\"", title)

        if retagged == 0 and corpus.is_consistent:
            report.record(path.name, UNCHANGED)
            continue

        write_corpus_file(path, corpus.with_articles(articles))
        report.record(path.name, UPDATED, changes=retagged)
        report.count("articles_retagged", retagged)
        logger.info("-> Updated %s with %d new tag sets.", path.name, retagged)

    logger.info("Retagging complete. Total articles updated: %d.", report.counters["articles_retagged"])
    return report
