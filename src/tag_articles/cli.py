"""CLI for tagging raw news files."""

from __future__ import annotations

import logging
from typing import Optional

from common.cli_helpers import setup_logging
from common.config import load_config
from tag_articles.helpers import apply_overrides, build_tagger, parse_tag_articles_args
from tag_articles.tag_articles import tag_untagged_files

logger = logging.getLogger(__name__)


def main(argv: Optional[list[str]] = None) -> None:
    setup_logging()
    args = parse_tag_articles_args(argv)
    config = apply_overrides(load_config(), args)

    tagger = build_tagger(config)
    logger.info("Tagging with model %s (max %d tags)", config.model_id, config.max_tags)

    report = tag_untagged_files(config.raw_dir, config.tagged_dir, tagger)
    report.log(logger)

    if report.skipped:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
