"""Upload tagged articles to an OpenSearch index."""

import logging
from pathlib import Path
from typing import Any

from opensearchpy.exceptions import OpenSearchException

from common.hashing import encode_document_id
from common.local_io import iter_corpus_files
from common.models import FAILED, UNCHANGED, UPDATED, JobReport

logger = logging.getLogger(__name__)


def build_bulk_actions(articles: list[dict[str, Any]], news_date: str) -> list[dict[str, Any]]:
    """Alternating action/document lines for a bulk index request."""
    dataset: list[dict[str, Any]] = []
    for article in articles:
        url = article.get("url")
        if not url:
            logger.warning("Skipping article without url: %s", article.get("title"))
            continue
        dataset.append({"index": {"_id": encode_document_id(url)}})
        dataset.append({**article, "news_date": news_date})
    return dataset


def _bulk_errors(response: dict[str, Any]) -> list[Any]:
    errors = []
    for item in response.get("items", []):
        for result in item.values():
            if isinstance(result, dict) and result.get("error"):
                errors.append(result["error"])
    return errors


def upload_tagged_files(tagged_dir: Path, client: Any, index_name: str) -> JobReport:
    """
    Bulk-index every tagged file, one request per file.

    Files with no articles are left alone. A bulk request that fails or
    rejects documents marks the file as failed and the upload continues with
    the next file.
    """
    report = JobReport("upload")

    for path, corpus in iter_corpus_files(tagged_dir, report):
        dataset = build_bulk_actions(corpus.articles, path.stem)
        if not dataset:
            logger.info("No articles in %s, skipping.", path.name)
            report.record(path.name, UNCHANGED)
            continue

        documents = len(dataset) // 2
        logger.info("Uploading %d articles from %s to index '%s'...", documents, path.name, index_name)
        try:
            response = client.bulk(body=dataset, index=index_name)
        except OpenSearchException as exc:
            logger.error("Bulk upload of %s failed: %s", path.name, exc)
            report.record(path.name, FAILED, reason=str(exc))
            continue

        if response.get("errors"):
            errors = _bulk_errors(response)
            logger.error("Bulk upload of %s had %d error(s): %s", path.name, len(errors), errors[:3])
            report.record(path.name, FAILED, reason=f"{len(errors)} document(s) rejected")
            continue

        report.record(path.name, UPDATED, changes=documents)
        report.count("documents_indexed", documents)

    return report
