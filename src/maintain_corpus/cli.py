"""CLI for corpus maintenance jobs."""

from __future__ import annotations

import argparse
import logging
from functools import partial
from typing import Optional

from common.cli_helpers import setup_logging
from common.config import PipelineConfig, load_config
from common.errors import ExternalFetchError
from common.models import JobReport
from fetch_articles.fetch_articles import fetch_and_save
from maintain_corpus.backfill import backfill_raw_files
from maintain_corpus.backfill_timestamps import backfill_missing_timestamps
from maintain_corpus.helpers import parse_maintain_corpus_args, resolve_start_date
from maintain_corpus.move_articles import move_articles_to_correct_date
from maintain_corpus.normalize_tags import DEFAULT_TAG_ALIASES, load_aliases, normalize_tagged_files
from maintain_corpus.prune_articles import prune_tagged_files
from maintain_corpus.retag_articles import retag_missing_articles
from tag_articles.helpers import apply_overrides, build_tagger
from taxonomy.taxonomy import Taxonomy

logger = logging.getLogger(__name__)


def _run_backfill(args: argparse.Namespace, config: PipelineConfig) -> JobReport:
    source = args.source or config.news_source
    raw_dir = args.raw_dir or config.raw_dir
    start = resolve_start_date(args.start_date, args.days, config.backfill_start_date)

    fetch = partial(
        fetch_and_save,
        raw_dir,
        source=source,
        topic=args.topic or config.topic,
        api_key=config.api_key_for(source),
    )
    logger.info("Checking for missing %s files since %s...", source, start.isoformat())
    return backfill_raw_files(raw_dir, fetch, start, newest_first=args.newest_first)


def _run_normalize(args: argparse.Namespace, config: PipelineConfig) -> JobReport:
    taxonomy = Taxonomy.load(args.tags_file or config.tags_file)
    aliases = dict(DEFAULT_TAG_ALIASES)
    if args.aliases:
        aliases.update(load_aliases(args.aliases))
    return normalize_tagged_files(config.tagged_dir, taxonomy, aliases)


def _run_retag(args: argparse.Namespace, config: PipelineConfig) -> JobReport:
    tagger = build_tagger(apply_overrides(config, args))
    return retag_missing_articles(config.tagged_dir, tagger)


def run_job(args: argparse.Namespace, config: PipelineConfig) -> JobReport:
    if getattr(args, "tagged_dir", None) is not None:
        config.tagged_dir = args.tagged_dir

    if args.job == "backfill":
        return _run_backfill(args, config)
    if args.job == "move-dates":
        return move_articles_to_correct_date(config.tagged_dir)
    if args.job == "normalize-tags":
        return _run_normalize(args, config)
    if args.job == "retag":
        return _run_retag(args, config)
    if args.job == "prune":
        return prune_tagged_files(config.tagged_dir)
    if args.job == "backfill-timestamps":
        return backfill_missing_timestamps(config.tagged_dir)
    raise ValueError(f"Unknown job: {args.job}")


def main(argv: Optional[list[str]] = None) -> None:
    setup_logging()
    args = parse_maintain_corpus_args(argv)
    config = load_config()

    try:
        report = run_job(args, config)
    except ExternalFetchError as exc:
        logger.error("%s", exc)
        raise SystemExit(1) from exc

    report.log(logger)
    if report.failed or report.skipped:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
