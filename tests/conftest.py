"""Shared fixtures for unit tests."""

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from taxonomy.taxonomy import Taxonomy

TAXONOMY_DATA = [
    {
        "title": "Economy",
        "description": "Fiscal and economic policy",
        "color": "#2b8a3e",
        "tags": [
            {"id": "taxes", "name": "Taxes", "description": "Tax policy"},
            {"id": "trade", "name": "Trade & Tariffs", "description": "Tariffs and trade deals"},
            {"id": "economy", "name": "Economy", "description": "Jobs, inflation and markets"},
            {"id": "jobs", "name": "Jobs", "description": "Employment and labor"},
        ],
    },
    {
        "title": "Government",
        "description": "Domestic governance",
        "color": "#1864ab",
        "tags": [
            {"id": "immigration", "name": "Immigration", "description": "Border policy"},
            {"id": "legal", "name": "Legal", "description": "Court cases"},
            {"id": "election", "name": "Elections", "description": "Campaigns and results"},
            {"id": "foreign_policy", "name": "Foreign Policy", "description": "Diplomacy"},
        ],
    },
    {
        "title": "Other",
        "description": "Outside the topic",
        "color": "#868e96",
        "tags": [
            {"id": "off_topic", "name": "Off Topic", "description": "Not about the topic"},
        ],
    },
]


@pytest.fixture
def taxonomy_data() -> list[dict[str, Any]]:
    return json.loads(json.dumps(TAXONOMY_DATA))


@pytest.fixture
def taxonomy(taxonomy_data) -> Taxonomy:
    return Taxonomy.from_data(taxonomy_data)


@pytest.fixture
def nova_response() -> Callable[[str], dict[str, Any]]:
    """Build an Amazon Nova response body carrying the given text."""

    def _build(text: str) -> dict[str, Any]:
        return {"output": {"message": {"role": "assistant", "content": [{"text": text}]}}}

    return _build


@pytest.fixture
def write_corpus() -> Callable[..., Path]:
    """Write a {status, totalResults, articles} file and return its path."""

    def _write(directory: Path, news_date: str, articles: list[dict[str, Any]], total: Any = None) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"{news_date}.json"
        data = {
            "status": "ok",
            "totalResults": len(articles) if total is None else total,
            "articles": articles,
        }
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def read_corpus() -> Callable[[Path], dict[str, Any]]:
    def _read(path: Path) -> dict[str, Any]:
        return json.loads(path.read_text(encoding="utf-8"))

    return _read
