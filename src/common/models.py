"""Shared data models: corpus files and per-item job reports."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Optional

UPDATED = "updated"
UNCHANGED = "unchanged"
SKIPPED = "skipped"
FAILED = "failed"


@dataclass
class CorpusFile:
    """One dated news file: {status, totalResults, articles}."""
    status: str = "ok"
    total_results: int = 0
    articles: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "CorpusFile":
        """Build from parsed JSON. Raises ValueError on the wrong shape."""
        if not isinstance(data, dict):
            raise ValueError("top-level value is not an object")
        articles = data.get("articles")
        if not isinstance(articles, list):
            raise ValueError("'articles' is missing or not a list")
        if not all(isinstance(article, dict) for article in articles):
            raise ValueError("'articles' contains non-object entries")

        total_results = data.get("totalResults", len(articles))
        if not isinstance(total_results, int) or isinstance(total_results, bool):
            total_results = len(articles)

        return cls(
            status=str(data.get("status", "ok")),
            total_results=total_results,
            articles=articles,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "totalResults": self.total_results,
            "articles": self.articles,
        }

    def with_articles(self, articles: Iterable[dict[str, Any]]) -> "CorpusFile":
        """Copy with new articles and a matching totalResults."""
        articles = list(articles)
        return replace(self, articles=articles, total_results=len(articles))

    @property
    def is_consistent(self) -> bool:
        return self.total_results == len(self.articles)


@dataclass
class ItemResult:
    """Outcome for one file or article processed by a batch job."""
    item: str
    status: str
    reason: Optional[str] = None
    changes: int = 0


@dataclass
class JobReport:
    """Collected per-item outcomes and counters for a single job run."""
    job: str
    results: list[ItemResult] = field(default_factory=list)
    counters: Counter = field(default_factory=Counter)

    def record(
        self,
        item: str,
        status: str,
        reason: Optional[str] = None,
        changes: int = 0,
    ) -> ItemResult:
        result = ItemResult(item=item, status=status, reason=reason, changes=changes)
        self.results.append(result)
        return result

    def count(self, key: str, amount: int = 1) -> None:
        self.counters[key] += amount

    def with_status(self, status: str) -> list[ItemResult]:
        return [result for result in self.results if result.status == status]

    @property
    def updated(self) -> list[ItemResult]:
        return self.with_status(UPDATED)

    @property
    def skipped(self) -> list[ItemResult]:
        return self.with_status(SKIPPED)

    @property
    def failed(self) -> list[ItemResult]:
        return self.with_status(FAILED)

    @property
    def total_changes(self) -> int:
        return sum(result.changes for result in self.results)

    def summary(self) -> str:
        parts = [
            f"{len(self.results)} item(s)",
            f"{len(self.updated)} updated",
            f"{len(self.skipped)} skipped",
            f"{len(self.failed)} failed",
            f"{self.total_changes} change(s)",
        ]
        return f"{self.job}: " + ", ".join(parts)

    def log(self, logger: logging.Logger) -> None:
        """Log every skipped/failed item and the summary line."""
        for result in self.skipped:
            logger.warning("Skipped %s: %s", result.item, result.reason)
        for result in self.failed:
            logger.error("Failed %s: %s", result.item, result.reason)
        for key, value in sorted(self.counters.items()):
            logger.info("  %s = %d", key, value)
        logger.info(self.summary())
