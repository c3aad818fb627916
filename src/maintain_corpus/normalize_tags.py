"""Map historical and drifted tag values onto canonical taxonomy ids."""

import json
import logging
import re
from pathlib import Path
from typing import Any, Mapping, Optional

from common.errors import TaxonomyError
from common.local_io import iter_corpus_files, write_corpus_file
from common.models import UNCHANGED, UPDATED, JobReport
from taxonomy.taxonomy import Taxonomy

logger = logging.getLogger(__name__)

# Hand-maintained aliases for values models have produced instead of real ids.
# Aliases whose target is not in the loaded taxonomy are ignored.
DEFAULT_TAG_ALIASES: dict[str, str] = {
    "offtopic": "off_topic",
    "not_relevant": "off_topic",
    "irrelevant": "off_topic",
    "none": "off_topic",
    "tax": "taxes",
    "taxation": "taxes",
    "tax_policy": "taxes",
    "tariff": "trade",
    "tariffs": "trade",
    "trade_policy": "trade",
    "trade_war": "trade",
    "immigration_policy": "immigration",
    "border": "immigration",
    "deportation": "immigration",
    "deportations": "immigration",
    "foreign_affairs": "foreign_policy",
    "international_relations": "foreign_policy",
    "courts": "legal",
    "lawsuit": "legal",
    "lawsuits": "legal",
    "elections": "election",
    "campaign": "election",
    "economic_policy": "economy",
    "economics": "economy",
}

_SEPARATORS = re.compile(r"[\s\-]+")
_CATEGORY_PREFIX = re.compile(r"^[^:/]+[:/]\s*")


def tag_key(value: str) -> str:
    """Case- and separator-insensitive lookup key ("Foreign Policy" -> "foreign_policy")."""
    key = value.strip().lower().lstrip("#").strip()
    return _SEPARATORS.sub("_", key)


def load_aliases(path: Path) -> dict[str, str]:
    """Read extra aliases from a JSON object of {alias: tag_id}."""
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise TaxonomyError(f"Cannot read tag aliases {path}: {exc}") from exc
    if not isinstance(data, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in data.items()
    ):
        raise TaxonomyError(f"Tag aliases {path} must be a JSON object of strings")
    return data


def build_normalization_map(
    taxonomy: Taxonomy,
    aliases: Optional[Mapping[str, str]] = None,
) -> dict[str, str]:
    """
    Build a map from lookup keys to canonical tag ids.

    Covers every tag id and tag name, plus aliases whose target id exists in
    the taxonomy. Taxonomy entries take precedence over aliases.
    """
    aliases = DEFAULT_TAG_ALIASES if aliases is None else aliases
    mapping: dict[str, str] = {}

    for alias, tag_id in aliases.items():
        if tag_id in taxonomy:
            mapping[tag_key(alias)] = tag_id
        else:
            logger.debug("Ignoring alias %r -> %r: not in taxonomy", alias, tag_id)

    for tag in taxonomy:
        mapping[tag_key(tag.name)] = tag.id
        mapping[tag_key(tag.id)] = tag.id

    return mapping


def normalize_tag(value: Any, mapping: Mapping[str, str]) -> Optional[str]:
    """Canonical id for a stored tag value, or None if it cannot be mapped."""
    if not isinstance(value, str) or not value.strip():
        return None

    canonical = mapping.get(tag_key(value))
    if canonical:
        return canonical

    # "Economy: Taxes" / "economy/taxes"
    stripped = _CATEGORY_PREFIX.sub("", value.strip())
    if stripped and stripped != value.strip():
        return mapping.get(tag_key(stripped))
    return None


def normalize_article_tags(
    tags: Any,
    mapping: Mapping[str, str],
) -> tuple[list[str], list[str]]:
    """
    Rewrite a tag list through the map.

    Returns:
        (canonical tags in first-seen order without repeats, unmapped values)
    """
    if tags is None:
        return [], []
    if isinstance(tags, str):
        tags = [tags]
    elif not isinstance(tags, list):
        return [], [str(tags)]

    normalized: list[str] = []
    unmapped: list[str] = []
    for value in tags:
        canonical = normalize_tag(value, mapping)
        if canonical is None:
            unmapped.append(str(value))
        elif canonical not in normalized:
            normalized.append(canonical)
    return normalized, unmapped


def normalize_tagged_files(
    tagged_dir: Path,
    taxonomy: Taxonomy,
    aliases: Optional[Mapping[str, str]] = None,
) -> JobReport:
    """
    Normalize tags in every tagged file.

    Unmapped values are dropped and counted in the report as
    "unmapped:<value>"; files are written only when a tag list changes.
    """
    report = JobReport("normalize-tags")
    mapping = build_normalization_map(taxonomy, aliases)
    logger.info("Created a normalization map with %d entries.", len(mapping))

    for path, corpus in iter_corpus_files(tagged_dir, report):
        changed = 0
        articles = []
        for article in corpus.articles:
            tags = article.get("tags")
            normalized, unmapped = normalize_article_tags(tags, mapping)
            for value in unmapped:
                report.count(f"unmapped:{value}")
                logger.warning("Dropping unmapped tag %r in %s", value, path.name)

            if tags is None or normalized == tags:
                articles.append(article)
            else:
                articles.append({**article, "tags": normalized})
                changed += 1

        if changed == 0 and corpus.is_consistent:
            report.record(path.name, UNCHANGED)
            continue

        write_corpus_file(path, corpus.with_articles(articles))
        report.record(path.name, UPDATED, changes=changed)
        logger.info("Normalized and saved: %s", path.name)

    unmapped_total = sum(v for k, v in report.counters.items() if k.startswith("unmapped:"))
    if unmapped_total:
        logger.warning("Dropped %d unmapped tag value(s) in total", unmapped_total)
    return report
