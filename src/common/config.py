"""Environment-driven configuration for the tagging pipeline."""

import logging
import os
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_RAW_DIR = "data/news/raw"
DEFAULT_TAGGED_DIR = "data/news/tagged"
DEFAULT_TAGS_FILE = "data/tags/tags.json"
DEFAULT_MODEL_ID = "amazon.nova-lite-v1:0"
DEFAULT_MAX_TAGS = 5
DEFAULT_FALLBACK_TAG = "off_topic"
DEFAULT_TOPIC = "trump"
DEFAULT_NEWS_SOURCE = "newsapi"
DEFAULT_OPENSEARCH_INDEX = "news-articles"

NEWS_SOURCES = ("newsapi", "gnews")


@dataclass
class PipelineConfig:
    """Configuration for the fetch / tag / maintain / upload stages."""

    raw_dir: Path = Path(DEFAULT_RAW_DIR)
    tagged_dir: Path = Path(DEFAULT_TAGGED_DIR)
    tags_file: Path = Path(DEFAULT_TAGS_FILE)

    model_id: str = DEFAULT_MODEL_ID
    max_tags: int = DEFAULT_MAX_TAGS
    fallback_tag: str = DEFAULT_FALLBACK_TAG

    topic: str = DEFAULT_TOPIC
    news_source: str = DEFAULT_NEWS_SOURCE
    backfill_start_date: Optional[date] = None
    news_api_key: Optional[str] = None
    gnews_api_key: Optional[str] = None

    opensearch_endpoint: Optional[str] = None
    opensearch_index: str = DEFAULT_OPENSEARCH_INDEX
    aws_region: Optional[str] = None

    def __post_init__(self) -> None:
        self.raw_dir = Path(self.raw_dir)
        self.tagged_dir = Path(self.tagged_dir)
        self.tags_file = Path(self.tags_file)

        if self.max_tags <= 0:
            raise ValueError(f"max_tags must be positive, got {self.max_tags}")
        if self.news_source not in NEWS_SOURCES:
            raise ValueError(
                f"Invalid news source: {self.news_source}. Must be one of {', '.join(NEWS_SOURCES)}"
            )
        if not self.model_id:
            raise ValueError("model_id must not be empty")

    def api_key_for(self, source: str) -> Optional[str]:
        return self.gnews_api_key if source == "gnews" else self.news_api_key


def _parse_max_tags(value: Optional[str]) -> int:
    # Non-numeric or non-positive values fall back to the default.
    try:
        number = int(value) if value is not None else DEFAULT_MAX_TAGS
    except ValueError:
        logger.warning("Ignoring invalid MAX_TAGS=%r, using %d", value, DEFAULT_MAX_TAGS)
        return DEFAULT_MAX_TAGS
    if number <= 0:
        logger.warning("Ignoring non-positive MAX_TAGS=%r, using %d", value, DEFAULT_MAX_TAGS)
        return DEFAULT_MAX_TAGS
    return number


def _parse_start_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise ValueError(f"BACKFILL_START_DATE must be YYYY-MM-DD, got {value!r}") from exc


def load_config(environ: Optional[Mapping[str, str]] = None) -> PipelineConfig:
    """Load configuration from environment variables (and a .env file if present).

    Args:
        environ: Mapping to read instead of os.environ (used in tests; skips .env)

    Returns:
        Loaded PipelineConfig
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    return PipelineConfig(
        raw_dir=Path(environ.get("RAW_NEWS_DIR", DEFAULT_RAW_DIR)),
        tagged_dir=Path(environ.get("TAGGED_NEWS_DIR", DEFAULT_TAGGED_DIR)),
        tags_file=Path(environ.get("TAGS_FILE", DEFAULT_TAGS_FILE)),
        model_id=environ.get("BEDROCK_MODEL_ID", DEFAULT_MODEL_ID),
        max_tags=_parse_max_tags(environ.get("MAX_TAGS")),
        fallback_tag=environ.get("FALLBACK_TAG", DEFAULT_FALLBACK_TAG),
        topic=environ.get("NEWS_TOPIC", DEFAULT_TOPIC),
        news_source=environ.get("NEWS_SOURCE", DEFAULT_NEWS_SOURCE),
        backfill_start_date=_parse_start_date(environ.get("BACKFILL_START_DATE")),
        news_api_key=environ.get("NEWS_API_KEY"),
        gnews_api_key=environ.get("GNEWS_API_KEY"),
        opensearch_endpoint=environ.get("OPENSEARCH_ENDPOINT"),
        opensearch_index=environ.get("OPENSEARCH_INDEX", DEFAULT_OPENSEARCH_INDEX),
        aws_region=environ.get("AWS_REGION"),
    )
