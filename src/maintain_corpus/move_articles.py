"""Move tagged articles into the file for their publication date."""

import logging
from pathlib import Path

from common.cli_helpers import is_date_string
from common.datetime import published_date
from common.errors import CorpusFileError
from common.local_io import corpus_path, iter_corpus_files, read_corpus_file, write_corpus_file
from common.models import SKIPPED, UNCHANGED, UPDATED, CorpusFile, JobReport
from deduplicate_articles.deduplicate_articles import deduplicate_articles

logger = logging.getLogger(__name__)


def move_articles_to_correct_date(tagged_dir: Path) -> JobReport:
    """
    Relocate articles whose publishedAt date (UTC) differs from their file's date.

    Source files are rewritten with the deduplicated articles that stay.
    Moved articles are appended to their target file (created if missing),
    deduplicated against the target's existing articles, which win.
    Articles without a usable publishedAt stay where they are, as do articles
    whose target file exists but cannot be read. Files whose names are not
    dates are left alone.
    """
    report = JobReport("move-dates")
    tagged_dir = Path(tagged_dir)

    loaded: list[tuple[Path, CorpusFile]] = []
    for path, corpus in iter_corpus_files(tagged_dir, report):
        if not is_date_string(path.stem):
            report.record(path.name, UNCHANGED, reason="file name is not a YYYY-MM-DD date")
            continue
        loaded.append((path, corpus))

    unreadable = {result.item for result in report.skipped}

    to_append: dict[str, list[dict]] = {}
    sources_to_write: list[tuple[Path, CorpusFile, int]] = []

    for path, corpus in loaded:
        file_date = path.stem
        stay = []
        moving = 0
        for article in corpus.articles:
            target_date = published_date(article.get("publishedAt"))
            if (
                target_date is None
                or target_date == file_date
                or f"{target_date}.json" in unreadable
            ):
                stay.append(article)
            else:
                to_append.setdefault(target_date, []).append(article)
                moving += 1

        if moving == 0 and corpus.is_consistent:
            report.record(path.name, UNCHANGED)
            continue

        if moving:
            stay = deduplicate_articles(stay)
        sources_to_write.append((path, corpus.with_articles(stay), moving))
        report.count("articles_moved", moving)

    # Sources first, so a source that is also a target is re-read with its stay set.
    for path, corpus, moving in sources_to_write:
        write_corpus_file(path, corpus)
        report.record(path.name, UPDATED, changes=moving)

    for target_date, arrivals in sorted(to_append.items()):
        target_path = corpus_path(tagged_dir, target_date)
        target = CorpusFile()
        if target_path.exists():
            try:
                target = read_corpus_file(target_path)
            except CorpusFileError as exc:
                # Only reachable if the file changed during the run.
                logger.error("Cannot merge into %s: %s", target_path.name, exc.reason)
                report.record(target_path.name, SKIPPED, reason=exc.reason)
                continue

        merged = deduplicate_articles(target.articles + arrivals)
        write_corpus_file(target_path, target.with_articles(merged))
        added = len(merged) - len(target.articles)
        report.record(target_path.name, UPDATED, changes=added)
        logger.info("Appended %d/%d moved article(s) to %s", added, len(arrivals), target_path.name)

    logger.info(
        "Moved %d article(s) to correct date files across %d day(s).",
        report.counters["articles_moved"],
        len(to_append),
    )
    return report
