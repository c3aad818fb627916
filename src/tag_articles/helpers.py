"""Helper functions for tag_articles CLI."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional

from common.cli_helpers import parse_positive_int
from common.config import PipelineConfig
from common.aws import get_bedrock_client
from tag_articles.tag_articles import ArticleTagger
from taxonomy.taxonomy import Taxonomy


def add_tagger_args(parser: argparse.ArgumentParser) -> None:
    """Model options shared by every command that calls the tagger."""
    parser.add_argument("--tags-file", type=Path, default=None, help="Tag definitions JSON (default: $TAGS_FILE)")
    parser.add_argument("--model-id", default=None, help="Bedrock model id (default: $BEDROCK_MODEL_ID)")
    parser.add_argument(
        "--max-tags",
        type=parse_positive_int,
        default=None,
        help="Maximum tags per article (default: $MAX_TAGS or 5)",
    )
    parser.add_argument("--fallback-tag", default=None, help="Tag used when nothing applies (default: off_topic)")


def parse_tag_articles_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments for tag_articles."""

    parser = argparse.ArgumentParser(description="Deduplicate and tag raw news files that are not tagged yet.")

    # Input options
    parser.add_argument("--raw-dir", type=Path, default=None, help="Raw news directory (default: $RAW_NEWS_DIR)")

    # Output options
    parser.add_argument("--tagged-dir", type=Path, default=None, help="Tagged news directory (default: $TAGGED_NEWS_DIR)")

    # Model options
    add_tagger_args(parser)

    return parser.parse_args(argv)


def apply_overrides(config: PipelineConfig, args: argparse.Namespace) -> PipelineConfig:
    """Apply CLI flags on top of the environment configuration."""
    for attr in ("raw_dir", "tagged_dir", "tags_file", "model_id", "max_tags", "fallback_tag"):
        value = getattr(args, attr, None)
        if value is not None:
            setattr(config, attr, value)
    return config


def build_tagger(config: PipelineConfig) -> ArticleTagger:
    """Load the taxonomy and build a tagger backed by Bedrock."""
    taxonomy = Taxonomy.load(config.tags_file)
    return ArticleTagger(
        taxonomy=taxonomy,
        client=get_bedrock_client(config.aws_region),
        model_id=config.model_id,
        max_tags=config.max_tags,
        fallback_tag=config.fallback_tag,
    )
