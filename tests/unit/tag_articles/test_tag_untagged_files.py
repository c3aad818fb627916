"""Tests for tag_articles.tag_articles.tag_untagged_files."""

import io
import json
from unittest.mock import MagicMock, patch

import pytest

from tag_articles.tag_articles import ArticleTagger, tag_untagged_files

TRADE = {
    "title": "Trump announces sweeping new tariffs on imported steel and aluminum",
    "url": "https://example.com/tariffs",
    "publishedAt": "2024-05-01T08:00:00Z",
}
TRADE_COPY = {
    "title": "AP - Trump announces sweeping new tariffs on imported steel and aluminum",
    "url": "https://other.example.org/wire/tariffs",
    "publishedAt": "2024-05-01T09:00:00Z",
}
COURT = {
    "title": "Appeals court weighs challenge to the administration's border policy",
    "url": "https://example.com/court",
    "publishedAt": "2024-05-01T10:00:00Z",
}


@pytest.fixture
def tagger(taxonomy) -> ArticleTagger:
    return ArticleTagger(taxonomy=taxonomy, client=MagicMock(), request_delay=0)


@patch("tag_articles.tag_articles.invoke_model")
class TestTagUntaggedFiles:
    def test_dedupes_and_tags_new_files(
        self, mock_invoke, tmp_path, tagger, write_corpus, read_corpus, nova_response
    ) -> None:
        raw_dir, tagged_dir = tmp_path / "raw", tmp_path / "tagged"
        write_corpus(raw_dir, "2024-05-01", [TRADE, TRADE_COPY, COURT], total=120)
        mock_invoke.side_effect = [nova_response('["trade"]'), nova_response('["legal", "immigration"]')]

        report = tag_untagged_files(raw_dir, tagged_dir, tagger)

        data = read_corpus(tagged_dir / "2024-05-01.json")
        assert data["status"] == "ok"
        assert data["totalResults"] == 2
        assert [a["url"] for a in data["articles"]] == [TRADE["url"], COURT["url"]]
        assert [a["tags"] for a in data["articles"]] == [["trade"], ["legal", "immigration"]]
        assert all("publishedAtTs" in a for a in data["articles"])
        assert report.counters["duplicates_removed"] == 1
        assert report.counters["articles_tagged"] == 2
        assert [r.item for r in report.updated] == ["2024-05-01.json"]

    def test_skips_already_tagged(self, mock_invoke, tmp_path, tagger, write_corpus, read_corpus) -> None:
        raw_dir, tagged_dir = tmp_path / "raw", tmp_path / "tagged"
        write_corpus(raw_dir, "2024-05-01", [TRADE])
        existing = write_corpus(tagged_dir, "2024-05-01", [{**TRADE, "tags": ["trade"]}])
        before = existing.read_text()

        report = tag_untagged_files(raw_dir, tagged_dir, tagger)

        mock_invoke.assert_not_called()
        assert report.results == []
        assert existing.read_text() == before

    def test_empty_raw_file(self, mock_invoke, tmp_path, tagger, write_corpus, read_corpus) -> None:
        raw_dir, tagged_dir = tmp_path / "raw", tmp_path / "tagged"
        write_corpus(raw_dir, "2024-05-01", [])

        tag_untagged_files(raw_dir, tagged_dir, tagger)

        mock_invoke.assert_not_called()
        assert read_corpus(tagged_dir / "2024-05-01.json") == {
            "status": "ok",
            "totalResults": 0,
            "articles": [],
        }

    def test_corrupt_raw_file_is_skipped(
        self, mock_invoke, tmp_path, tagger, write_corpus, nova_response
    ) -> None:
        raw_dir, tagged_dir = tmp_path / "raw", tmp_path / "tagged"
        raw_dir.mkdir()
        (raw_dir / "2024-05-01.json").write_text("{broken")
        write_corpus(raw_dir, "2024-05-02", [COURT])
        mock_invoke.return_value = nova_response('["legal"]')

        report = tag_untagged_files(raw_dir, tagged_dir, tagger)

        assert [r.item for r in report.skipped] == ["2024-05-01.json"]
        assert not (tagged_dir / "2024-05-01.json").exists()
        assert (tagged_dir / "2024-05-02.json").exists()

    def test_failed_article_kept_with_empty_tags(
        self, mock_invoke, tmp_path, tagger, write_corpus, read_corpus
    ) -> None:
        raw_dir, tagged_dir = tmp_path / "raw", tmp_path / "tagged"
        write_corpus(raw_dir, "2024-05-01", [COURT])
        mock_invoke.return_value = {"no": "text"}

        report = tag_untagged_files(raw_dir, tagged_dir, tagger)

        data = read_corpus(tagged_dir / "2024-05-01.json")
        assert data["articles"][0]["tags"] == []
        assert report.counters["articles_failed"] == 1


class TestTagUntaggedFilesWithMalformedBodies:
    def test_daily_run_continues(self, tmp_path, tagger, write_corpus, read_corpus, nova_response) -> None:
        raw_dir, tagged_dir = tmp_path / "raw", tmp_path / "tagged"
        write_corpus(raw_dir, "2024-05-01", [TRADE])
        write_corpus(raw_dir, "2024-05-02", [COURT])
        tagger.client.invoke_model.side_effect = [
            {"body": io.BytesIO(b"not json")},
            {"body": io.BytesIO(json.dumps(nova_response('["legal"]')).encode("utf-8"))},
        ]

        report = tag_untagged_files(raw_dir, tagged_dir, tagger)

        assert read_corpus(tagged_dir / "2024-05-01.json")["articles"][0]["tags"] == []
        assert read_corpus(tagged_dir / "2024-05-02.json")["articles"][0]["tags"] == ["legal"]
        assert report.counters["articles_failed"] == 1
        assert len(report.updated) == 2
