"""Taxonomy-constrained article tagging with a Bedrock model."""

from __future__ import annotations

import logging
import re
import time
from pathlib import Path
from typing import Any, Callable, Optional

from botocore.exceptions import BotoCoreError, ClientError

from common.aws import invoke_model, is_throttling_error
from common.config import DEFAULT_FALLBACK_TAG, DEFAULT_MAX_TAGS, DEFAULT_MODEL_ID
from common.datetime import to_unix_seconds
from common.errors import CorpusFileError, MaxRetriesExceededError, TaggingError, ThrottlingError
from common.local_io import corpus_path, list_corpus_files, read_corpus_file, write_corpus_file
from common.models import FAILED, SKIPPED, UPDATED, JobReport
from common.utils import article_label, get_value
from deduplicate_articles.deduplicate_articles import deduplicate_articles
from tag_articles.instructions import NO_CONTENT_PLACEHOLDER, SYSTEM_PROMPT, USER_PROMPT_TEMPLATE
from tag_articles.providers import select_provider
from tag_articles.response_parser import parse_tag_array
from taxonomy.taxonomy import Taxonomy

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 5
INITIAL_BACKOFF_SECONDS = 1.0
REQUEST_DELAY_SECONDS = 0.1

_PLACEHOLDER = re.compile(r"\{(tag_definitions|title|description|content)\}")

# Errors that fail a single article without stopping a batch.
ARTICLE_ERRORS = (TaggingError, ClientError, BotoCoreError)


def with_published_at_ts(article: dict[str, Any]) -> dict[str, Any]:
    """Copy of the article with publishedAtTs set once from publishedAt."""
    if article.get("publishedAtTs") is not None:
        return dict(article)
    timestamp = to_unix_seconds(article.get("publishedAt"))
    if timestamp is None:
        return dict(article)
    return {**article, "publishedAtTs": timestamp}


class ArticleTagger:
    """
    Assigns taxonomy tags to articles one model call at a time.

    The model provider is chosen when the tagger is built, so an unsupported
    model id fails before any article is processed.
    """

    def __init__(
        self,
        taxonomy: Taxonomy,
        client: Any,
        model_id: str = DEFAULT_MODEL_ID,
        max_tags: int = DEFAULT_MAX_TAGS,
        fallback_tag: Optional[str] = DEFAULT_FALLBACK_TAG,
        system_prompt: str = SYSTEM_PROMPT,
        user_prompt_template: str = USER_PROMPT_TEMPLATE,
        max_attempts: int = MAX_ATTEMPTS,
        initial_backoff: float = INITIAL_BACKOFF_SECONDS,
        request_delay: float = REQUEST_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_tags <= 0:
            raise ValueError(f"max_tags must be positive, got {max_tags}")
        if max_attempts <= 0:
            raise ValueError(f"max_attempts must be positive, got {max_attempts}")

        self.taxonomy = taxonomy
        self.client = client
        self.model_id = model_id
        self.provider = select_provider(model_id)
        self.max_tags = max_tags
        self.fallback_tag = fallback_tag
        self.system_prompt = (
            system_prompt
            .replace("{max_tags}", str(max_tags))
            .replace("{fallback_tag}", fallback_tag or DEFAULT_FALLBACK_TAG)
        )
        self.user_prompt_template = user_prompt_template
        self.max_attempts = max_attempts
        self.initial_backoff = initial_backoff
        self.request_delay = request_delay
        self.sleep = sleep

        # Formatting is deterministic, so build it once.
        self._tag_definitions = taxonomy.format()
        self._valid_ids = taxonomy.all_tag_ids()

        if fallback_tag and fallback_tag not in taxonomy:
            logger.warning("Fallback tag '%s' is not in the taxonomy; empty results stay empty", fallback_tag)

    def build_user_prompt(self, article: Any) -> str:
        values = {
            "tag_definitions": self._tag_definitions,
            "title": get_value(article, "title") or "",
            "description": get_value(article, "description") or "",
            "content": get_value(article, "content") or NO_CONTENT_PLACEHOLDER,
        }
        return _PLACEHOLDER.sub(lambda match: str(values[match.group(1)]), self.user_prompt_template)

    def invoke(self, user_prompt: str) -> str:
        """Single model call; returns the generated text."""
        body = self.provider.build_request_body(self.system_prompt, user_prompt)
        response = invoke_model(self.client, self.model_id, body)
        return self.provider.parse_response_text(response)

    def invoke_with_retry(self, user_prompt: str, title: str) -> str:
        """
        Invoke the model, backing off exponentially on throttling.

        Non-throttling errors propagate on the first occurrence.

        Raises:
            MaxRetriesExceededError: If every attempt was throttled.
        """
        delay = self.initial_backoff
        for attempt in range(1, self.max_attempts + 1):
            try:
                return self.invoke(user_prompt)
            except (ClientError, ThrottlingError) as exc:
                if not is_throttling_error(exc):
                    raise
                if attempt == self.max_attempts:
                    raise MaxRetriesExceededError(title, attempt) from exc
                logger.warning(
                    "Throttling detected. Retrying in %.1fs... (Attempt %d/%d)",
                    delay,
                    attempt,
                    self.max_attempts,
                )
                self.sleep(delay)
                delay *= 2

        raise MaxRetriesExceededError(title, self.max_attempts)

    def select_tags(self, response_text: str) -> list[str]:
        """Filter parsed model output down to known tag ids, capped at max_tags."""
        raw = parse_tag_array(response_text)
        if not raw:
            if self.fallback_tag and self.fallback_tag in self.taxonomy:
                return [self.fallback_tag]
            return []

        tags: list[str] = []
        for value in raw:
            if isinstance(value, str) and value in self._valid_ids and value not in tags:
                tags.append(value)

        dropped = len(raw) - len(tags)
        if dropped:
            logger.debug("Dropped %d unknown or repeated tag(s) from model output", dropped)
        return tags[: self.max_tags]

    def tag_article(self, article: Any) -> list[str]:
        """Tag a single article."""
        title = article_label(article)
        prompt = self.build_user_prompt(article)
        response_text = self.invoke_with_retry(prompt, title)
        return self.select_tags(response_text)

    def pause(self) -> None:
        """Fixed delay between successive model calls."""
        if self.request_delay > 0:
            self.sleep(self.request_delay)

    def tag_batch(
        self,
        articles: list[dict[str, Any]],
        report: Optional[JobReport] = None,
    ) -> list[dict[str, Any]]:
        """
        Tag articles sequentially.

        An article whose tagging fails is kept with an empty tag list and
        recorded as failed in the report; the batch continues.

        Args:
            articles: Raw articles
            report: Optional report receiving one result per article

        Returns:
            Tagged copies of the articles, in input order
        """
        tagged: list[dict[str, Any]] = []
        total = len(articles)

        for index, article in enumerate(articles, 1):
            title = article_label(article)
            logger.info("Processing article %d/%d: %s", index, total, title)

            try:
                tags = self.tag_article(article)
            except ARTICLE_ERRORS as exc:
                logger.error("Error processing article '%s': %s", title, exc)
                tags = []
                if report is not None:
                    report.record(title, FAILED, reason=str(exc))
            else:
                logger.info(">>>> %s", ", ".join(tags))
                if report is not None:
                    report.record(title, UPDATED, changes=len(tags))

            tagged_article = with_published_at_ts(article)
            tagged_article["tags"] = tags
            tagged.append(tagged_article)

            if index < total:
                self.pause()

        return tagged


def tag_untagged_files(
    raw_dir: Path,
    tagged_dir: Path,
    tagger: ArticleTagger,
) -> JobReport:
    """
    Deduplicate and tag every raw news file that has no tagged counterpart.

    Args:
        raw_dir: Directory of raw YYYY-MM-DD.json files
        tagged_dir: Directory receiving tagged files of the same name
        tagger: Configured ArticleTagger

    Returns:
        JobReport with one result per raw file
    """
    report = JobReport("tag-news")
    tagged_dir = Path(tagged_dir)
    tagged_dir.mkdir(parents=True, exist_ok=True)

    existing = {path.name for path in list_corpus_files(tagged_dir)}
    untagged = [path for path in list_corpus_files(raw_dir) if path.name not in existing]

    if not untagged:
        logger.info("All news files are already tagged. Nothing to do.")
        return report

    logger.info("Found %d untagged news file(s)", len(untagged))

    for raw_path in untagged:
        logger.info("--- Processing: %s ---", raw_path.name)
        try:
            raw = read_corpus_file(raw_path)
        except CorpusFileError as exc:
            logger.error("Failed to read %s: %s", raw_path.name, exc.reason)
            report.record(raw_path.name, SKIPPED, reason=exc.reason)
            continue

        unique = deduplicate_articles(raw.articles)
        duplicates = len(raw.articles) - len(unique)
        if duplicates:
            logger.info("Removed %d/%d duplicate/similar articles.", duplicates, len(raw.articles))
        report.count("duplicates_removed", duplicates)

        article_report = JobReport(f"tag {raw_path.name}")
        tagged_articles = tagger.tag_batch(unique, article_report) if unique else []
        report.count("articles_tagged", len(article_report.updated))
        report.count("articles_failed", len(article_report.failed))

        tagged_path = corpus_path(tagged_dir, raw_path.stem)
        write_corpus_file(tagged_path, raw.with_articles(tagged_articles))
        logger.info("Saved %d tagged articles to %s", len(tagged_articles), tagged_path)
        report.record(raw_path.name, UPDATED, changes=len(tagged_articles))

    return report
