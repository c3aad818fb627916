"""Local file I/O for the dated news corpus."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Iterator

from common.cli_helpers import is_date_string
from common.errors import CorpusFileError
from common.models import SKIPPED, CorpusFile, JobReport

logger = logging.getLogger(__name__)


def corpus_path(directory: Path, news_date: str) -> Path:
    """Path of the file holding news for a YYYY-MM-DD date."""
    return Path(directory) / f"{news_date}.json"


def list_corpus_files(directory: Path) -> list[Path]:
    """List *.json files in a corpus directory, sorted by name."""
    directory = Path(directory)
    if not directory.is_dir():
        logger.warning("Corpus directory does not exist: %s", directory)
        return []
    return sorted(p for p in directory.iterdir() if p.is_file() and p.suffix == ".json")


def list_corpus_dates(directory: Path) -> set[str]:
    """Dates (file stems) that already have a file in the directory."""
    return {path.stem for path in list_corpus_files(directory) if is_date_string(path.stem)}


def read_corpus_file(path: Path) -> CorpusFile:
    """
    Read and validate a corpus file.

    Raises:
        CorpusFileError: If the file cannot be read, is not JSON, or does not
            hold an object with an 'articles' list.
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as exc:
        raise CorpusFileError(path, f"unreadable: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise CorpusFileError(path, f"invalid JSON: {exc}") from exc

    try:
        return CorpusFile.from_dict(data)
    except ValueError as exc:
        raise CorpusFileError(path, str(exc)) from exc


def iter_corpus_files(directory: Path, report: JobReport) -> Iterator[tuple[Path, CorpusFile]]:
    """
    Yield (path, corpus) for each readable file in a corpus directory.

    Unreadable or malformed files are logged, recorded as skipped in the
    report, and passed over.
    """
    for path in list_corpus_files(directory):
        try:
            corpus = read_corpus_file(path)
        except CorpusFileError as exc:
            logger.error("Failed to process %s: %s", path.name, exc.reason)
            report.record(path.name, SKIPPED, reason=exc.reason)
            continue
        yield path, corpus


def write_json_atomic(path: Path, data: Any) -> None:
    """Write JSON to a temporary sibling file, then rename it over the target."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f"{path.name}.tmp")
    try:
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, path)
    except Exception:
        tmp_path.unlink(missing_ok=True)
        raise


def write_corpus_file(path: Path, corpus: CorpusFile) -> None:
    write_json_atomic(path, corpus.to_dict())
    logger.debug("Wrote %d articles to %s", len(corpus.articles), path)
