"""Tests for fetch_articles.helpers module."""

from datetime import date

import pytest

from fetch_articles.helpers import parse_fetch_articles_args


class TestParseFetchArticlesArgs:
    def test_explicit_date(self) -> None:
        args = parse_fetch_articles_args(["--date", "2024-05-01", "--source", "gnews", "--topic", "tariffs"])
        assert args.date == date(2024, 5, 1)
        assert args.source == "gnews"
        assert args.topic == "tariffs"

    def test_default_date_is_a_date(self) -> None:
        args = parse_fetch_articles_args([])
        assert isinstance(args.date, date)
        assert args.source is None

    def test_invalid_date(self) -> None:
        with pytest.raises(SystemExit):
            parse_fetch_articles_args(["--date", "yesterday"])

    def test_unknown_source(self) -> None:
        with pytest.raises(SystemExit):
            parse_fetch_articles_args(["--source", "bing"])
