"""Duplicate and near-duplicate article detection."""

import logging
import re
from typing import Optional, TypeVar
from urllib.parse import urlsplit, urlunsplit

from rapidfuzz.distance import Levenshtein

from common.utils import get_value

logger = logging.getLogger(__name__)

# Titles closer than this edit distance are duplicates.
TITLE_DISTANCE_THRESHOLD = 10
# Titles whose token sets overlap at least this much are duplicates.
TOKEN_SET_THRESHOLD = 0.9

DEFAULT_PORTS = {"http": 80, "https": 443}

_EDITORIAL_PREFIX = re.compile(r"^(opinion|analysis|breaking|live)\s*:\s*", re.IGNORECASE)
_WIRE_PREFIX = re.compile(r"^[A-Z]{2,}\s*-\s*", re.IGNORECASE)
_PUBLICATION_SUFFIX = re.compile(r"\s*-\s+[a-z0-9 .,'’&-]+$", re.IGNORECASE)
_PUNCTUATION = re.compile(r"[\"'’`“”(),.:;!?]")
_WHITESPACE = re.compile(r"\s+")

T = TypeVar("T")


def canonicalize_url(raw_url: Optional[str]) -> Optional[str]:
    """
    Canonicalize a URL for duplicate comparison.

    Lowercases scheme and host, drops default ports, the fragment and every
    query parameter, and trims trailing slashes from the path (root stays
    "/"). Returns None for empty input and the raw value if it cannot be
    parsed as an absolute URL.
    """
    if not raw_url:
        return None

    try:
        parts = urlsplit(raw_url.strip())
        port = parts.port
    except ValueError:
        return raw_url

    if not parts.scheme or not parts.hostname:
        return raw_url

    scheme = parts.scheme.lower()
    host = parts.hostname.lower()
    if port is not None and DEFAULT_PORTS.get(scheme) != port:
        host = f"{host}:{port}"

    path = parts.path or "/"
    if len(path) > 1 and path.endswith("/"):
        path = path.rstrip("/") or "/"

    return urlunsplit((scheme, host, path, "", ""))


def normalize_title(title: str) -> str:
    """Lowercase, strip wire/opinion prefixes and publication suffixes, drop punctuation."""
    text = (title or "").lower().strip()
    text = _EDITORIAL_PREFIX.sub("", text)
    text = _WIRE_PREFIX.sub("", text)

    # e.g. " - the new york times"
    text = _PUBLICATION_SUFFIX.sub("", text)

    text = _PUNCTUATION.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()


def token_set_similarity(a: str, b: str) -> float:
    """Jaccard similarity of the whitespace-split token sets of two titles (0..1)."""
    tokens_a = set(a.split())
    tokens_b = set(b.split())
    if not tokens_a or not tokens_b:
        return 0.0
    return len(tokens_a & tokens_b) / len(tokens_a | tokens_b)


def titles_match(a: str, b: str) -> bool:
    """True if two normalized titles describe the same story."""
    if Levenshtein.distance(a, b) < TITLE_DISTANCE_THRESHOLD:
        return True
    # Edit distance misses reordered titles; token sets catch them.
    return token_set_similarity(a, b) >= TOKEN_SET_THRESHOLD


def deduplicate_articles(articles: list[T]) -> list[T]:
    """
    Remove duplicate articles, keeping the first occurrence.

    An article is a duplicate when its canonical URL was already seen, or when
    its normalized title is within the edit-distance or token-set thresholds
    of an article already kept. Articles without a title are only checked by
    URL. Descriptions are not compared.

    Args:
        articles: Articles as dicts (or objects) with url and title fields

    Returns:
        New list with duplicates removed, in input order
    """
    unique: list[T] = []
    unique_titles: list[str] = []
    seen_urls: set[str] = set()

    for article in articles:
        url_key = canonicalize_url(get_value(article, "url"))
        if url_key and url_key in seen_urls:
            continue

        title = get_value(article, "title") or ""
        if not title:
            if url_key:
                seen_urls.add(url_key)
            unique.append(article)
            unique_titles.append("")
            continue

        normalized = normalize_title(title)
        is_duplicate = any(
            titles_match(normalized, other)
            for other in unique_titles
            if other
        )
        if is_duplicate:
            continue

        if url_key:
            seen_urls.add(url_key)
        unique.append(article)
        unique_titles.append(normalized)

    removed = len(articles) - len(unique)
    if removed:
        logger.debug("Removed %d/%d duplicate articles", removed, len(articles))
    return unique
