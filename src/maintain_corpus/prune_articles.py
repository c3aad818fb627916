"""Remove duplicate articles from tagged news files."""

import logging
from pathlib import Path

from common.local_io import iter_corpus_files, write_corpus_file
from common.models import UNCHANGED, UPDATED, JobReport
from deduplicate_articles.deduplicate_articles import deduplicate_articles

logger = logging.getLogger(__name__)


def prune_tagged_files(tagged_dir: Path) -> JobReport:
    """Rerun deduplication over each file; rewrite only files that change."""
    report = JobReport("prune")

    for path, corpus in iter_corpus_files(tagged_dir, report):
        pruned = deduplicate_articles(corpus.articles)
        pruned_count = len(corpus.articles) - len(pruned)

        if pruned_count == 0 and corpus.is_consistent:
            report.record(path.name, UNCHANGED)
            continue

        write_corpus_file(path, corpus.with_articles(pruned))
        report.record(path.name, UPDATED, changes=pruned_count)
        report.count("articles_pruned", pruned_count)
        logger.info("Pruned %d articles from %s.", pruned_count, path.name)

    logger.info("Pruning complete. Total articles pruned: %d.", report.counters["articles_pruned"])
    return report
