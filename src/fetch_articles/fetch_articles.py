"""Fetch one day of raw news from newsapi.org or gnews.io."""

import logging
from pathlib import Path
from typing import Any, Optional

import requests

from common.cli_helpers import is_date_string
from common.errors import ExternalFetchError
from common.local_io import corpus_path, write_json_atomic
from fetch_articles.sources import NEWS_SOURCES, REQUEST_TIMEOUT_SECONDS, USER_AGENT

logger = logging.getLogger(__name__)


def _build_params(source: str, news_date: str, topic: str, api_key: str) -> dict[str, Any]:
    if source == "gnews":
        return {
            "q": topic,
            "from": f"{news_date}T00:00:00Z",
            "to": f"{news_date}T23:59:59Z",
            "lang": "en",
            "max": 100,
            "apikey": api_key,
        }
    return {
        "q": topic,
        "language": "en",
        "from": news_date,
        "to": news_date,
        "sortBy": "popularity",
        "apiKey": api_key,
    }


def transform_gnews_response(data: dict[str, Any]) -> dict[str, Any]:
    """Convert a gnews.io response into the newsapi.org response shape."""
    articles = []
    for article in data.get("articles") or []:
        source = article.get("source") or {}
        articles.append({
            "source": {"id": None, "name": source.get("name")},
            # gnews.io has no author; the source name stands in
            "author": source.get("name"),
            "title": article.get("title"),
            "description": article.get("description"),
            "url": article.get("url"),
            "urlToImage": article.get("image"),
            "publishedAt": article.get("publishedAt"),
            "content": article.get("content"),
        })

    return {
        "status": "ok",
        "totalResults": data.get("totalArticles", len(articles)),
        "articles": articles,
    }


def fetch_news_for_date(
    news_date: str,
    source: str = "newsapi",
    topic: str = "trump",
    api_key: Optional[str] = None,
) -> dict[str, Any]:
    """
    Fetch raw news for a single date.

    Args:
        news_date: Date in YYYY-MM-DD format
        source: "newsapi" or "gnews"
        topic: Search query
        api_key: API key for the source

    Returns:
        Response in newsapi.org shape: {status, totalResults, articles}

    Raises:
        ValueError: If the source, date or API key is invalid
        ExternalFetchError: If the request fails or returns a non-JSON body
    """
    if source not in NEWS_SOURCES:
        raise ValueError(f"Unknown news source: {source}")
    if not api_key:
        raise ValueError(f"No API key configured for {source}")
    if not is_date_string(news_date):
        raise ValueError(f"Invalid date format: {news_date}. Please use YYYY-MM-DD.")

    url = NEWS_SOURCES[source]
    logger.info("Fetching %s news for %s (topic=%s)", source, news_date, topic)

    try:
        response = requests.get(
            url,
            params=_build_params(source, news_date, topic, api_key),
            timeout=REQUEST_TIMEOUT_SECONDS,
            headers={"User-Agent": USER_AGENT},
        )
        response.raise_for_status()
        data = response.json()
    except requests.RequestException as exc:
        raise ExternalFetchError(news_date, str(exc)) from exc
    except ValueError as exc:
        raise ExternalFetchError(news_date, f"invalid JSON response: {exc}") from exc

    if not isinstance(data, dict):
        raise ExternalFetchError(news_date, "response is not a JSON object")

    if source == "gnews":
        data = transform_gnews_response(data)
    elif data.get("status") == "error":
        raise ExternalFetchError(news_date, data.get("message") or "newsapi.org returned an error")

    logger.info("Fetched %d articles for %s", len(data.get("articles") or []), news_date)
    return data


def save_raw_news(raw_dir: Path, news_date: str, data: dict[str, Any]) -> Path:
    """Write a raw news response to raw_dir/YYYY-MM-DD.json."""
    path = corpus_path(raw_dir, news_date)
    write_json_atomic(path, data)
    logger.info("Successfully fetched and saved news for %s to %s", news_date, path)
    return path


def fetch_and_save(
    raw_dir: Path,
    news_date: str,
    source: str = "newsapi",
    topic: str = "trump",
    api_key: Optional[str] = None,
) -> Path:
    data = fetch_news_for_date(news_date, source=source, topic=topic, api_key=api_key)
    return save_raw_news(raw_dir, news_date, data)
