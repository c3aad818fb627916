"""Tests for maintain_corpus.helpers module."""

from datetime import date
from pathlib import Path

import pytest

from maintain_corpus.helpers import parse_maintain_corpus_args, resolve_start_date

TODAY = date(2024, 5, 5)


class TestParseMaintainCorpusArgs:
    def test_backfill_days(self) -> None:
        args = parse_maintain_corpus_args(["backfill", "--days", "7", "--source", "gnews"])
        assert args.job == "backfill"
        assert args.days == 7
        assert args.source == "gnews"
        assert args.newest_first is False

    def test_backfill_window_options_exclusive(self) -> None:
        with pytest.raises(SystemExit):
            parse_maintain_corpus_args(["backfill", "--days", "7", "--start-date", "2024-01-01"])

    def test_move_dates(self) -> None:
        args = parse_maintain_corpus_args(["move-dates", "--tagged-dir", "tagged"])
        assert args.job == "move-dates"
        assert args.tagged_dir == Path("tagged")

    def test_retag_accepts_model_options(self) -> None:
        args = parse_maintain_corpus_args(["retag", "--model-id", "meta.llama3-8b-instruct-v1:0"])
        assert args.model_id == "meta.llama3-8b-instruct-v1:0"

    def test_job_required(self) -> None:
        with pytest.raises(SystemExit):
            parse_maintain_corpus_args([])


class TestResolveStartDate:
    def test_explicit_start(self) -> None:
        assert resolve_start_date(date(2024, 3, 1), None, date(2024, 1, 15), TODAY) == date(2024, 3, 1)

    def test_days(self) -> None:
        assert resolve_start_date(None, 3, date(2024, 1, 15), TODAY) == date(2024, 5, 2)

    def test_configured(self) -> None:
        assert resolve_start_date(None, None, date(2024, 1, 15), TODAY) == date(2024, 1, 15)

    def test_default_first_of_year(self) -> None:
        assert resolve_start_date(None, None, None, TODAY) == date(2024, 1, 1)
