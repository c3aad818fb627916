"""Tests for deduplicate_articles.deduplicate_articles module."""

from dataclasses import dataclass

import pytest

from deduplicate_articles.deduplicate_articles import (
    canonicalize_url,
    deduplicate_articles,
    normalize_title,
    titles_match,
    token_set_similarity,
)

IMMIGRATION = "Senate passes sweeping immigration reform bill after a long overnight debate"
FED = "Federal Reserve holds interest rates steady as inflation worries persist"
STORM = "Powerful coastal storm knocks out electricity for thousands across New England"


class TestCanonicalizeUrl:
    def test_strips_query_fragment_port_and_slash(self) -> None:
        assert canonicalize_url("HTTPS://Example.COM:443/news/story/?utm_source=x#top") == (
            "https://example.com/news/story"
        )

    def test_keeps_non_default_port(self) -> None:
        assert canonicalize_url("http://example.com:8080/a") == "http://example.com:8080/a"

    def test_empty_path_becomes_root(self) -> None:
        assert canonicalize_url("https://example.com") == "https://example.com/"
        assert canonicalize_url("https://example.com///") == "https://example.com/"

    def test_path_case_preserved(self) -> None:
        assert canonicalize_url("https://example.com/News/Story") == "https://example.com/News/Story"

    def test_empty(self) -> None:
        assert canonicalize_url(None) is None
        assert canonicalize_url("") is None

    def test_unparseable_returned_as_is(self) -> None:
        assert canonicalize_url("not a url") == "not a url"
        assert canonicalize_url("http://example.com:notaport/x") == "http://example.com:notaport/x"


class TestNormalizeTitle:
    def test_wire_prefix_and_publication_suffix(self) -> None:
        assert normalize_title("AP - Trump signs tax bill - The New York Times") == "trump signs tax bill"

    def test_editorial_prefix(self) -> None:
        assert normalize_title("Opinion: The tariff gamble") == "the tariff gamble"

    def test_punctuation_and_whitespace(self) -> None:
        assert normalize_title('  "Trump,  again!"  ') == "trump again"

    def test_empty(self) -> None:
        assert normalize_title("") == ""


class TestSimilarity:
    def test_token_set_identical_sets(self) -> None:
        assert token_set_similarity("a b c", "c b a") == 1.0

    def test_token_set_empty(self) -> None:
        assert token_set_similarity("", "a") == 0.0

    def test_reordered_titles_match(self) -> None:
        a = normalize_title("Trump signs the new border security bill into law on Tuesday")
        b = normalize_title("On Tuesday Trump signs into law the new border security bill")
        assert titles_match(a, b)

    def test_distinct_titles_do_not_match(self) -> None:
        assert not titles_match(normalize_title(IMMIGRATION), normalize_title(FED))


class TestDeduplicateArticles:
    def test_same_canonical_url(self) -> None:
        articles = [
            {"url": "https://example.com/news/story?utm=1", "title": IMMIGRATION},
            {"url": "https://EXAMPLE.com/news/story/#comments", "title": FED},
        ]
        assert deduplicate_articles(articles) == [articles[0]]

    def test_wire_variant_of_same_title(self) -> None:
        articles = [
            {"url": "https://a.com/1", "title": "AP - Trump signs tax bill - The New York Times"},
            {"url": "https://b.com/2", "title": "Trump signs tax bill"},
        ]
        result = deduplicate_articles(articles)
        assert result == [articles[0]]

    def test_keeps_first_and_preserves_order(self) -> None:
        articles = [
            {"url": "https://a.com/1", "title": IMMIGRATION},
            {"url": "https://a.com/2", "title": FED},
            {"url": "https://b.com/9", "title": IMMIGRATION + " - Reuters"},
            {"url": "https://a.com/3", "title": STORM},
        ]
        result = deduplicate_articles(articles)
        assert [a["url"] for a in result] == ["https://a.com/1", "https://a.com/2", "https://a.com/3"]

    def test_small_edit_is_duplicate(self) -> None:
        articles = [
            {"url": "https://a.com/1", "title": IMMIGRATION},
            {"url": "https://b.com/1", "title": IMMIGRATION.replace("long", "lengthy")},
        ]
        assert len(deduplicate_articles(articles)) == 1

    def test_untitled_articles_checked_by_url_only(self) -> None:
        articles = [
            {"url": "https://a.com/1", "title": ""},
            {"url": "https://a.com/2", "title": None},
            {"url": "https://a.com/1/", "title": ""},
        ]
        result = deduplicate_articles(articles)
        assert [a["url"] for a in result] == ["https://a.com/1", "https://a.com/2"]

    def test_missing_url_compared_by_title(self) -> None:
        articles = [{"title": IMMIGRATION}, {"title": IMMIGRATION}, {"title": FED}]
        assert deduplicate_articles(articles) == [articles[0], articles[2]]

    def test_idempotent(self) -> None:
        articles = [
            {"url": "https://a.com/1", "title": IMMIGRATION},
            {"url": "https://a.com/1", "title": FED},
            {"url": "https://a.com/3", "title": STORM},
        ]
        once = deduplicate_articles(articles)
        assert deduplicate_articles(once) == once

    def test_does_not_mutate_input(self) -> None:
        articles = [{"url": "https://a.com/1", "title": IMMIGRATION}, {"url": "https://a.com/1", "title": FED}]
        deduplicate_articles(articles)
        assert len(articles) == 2

    def test_works_with_objects(self) -> None:
        @dataclass
        class Article:
            url: str
            title: str

        articles = [Article("https://a.com/1", IMMIGRATION), Article("https://a.com/1?x=1", FED)]
        assert deduplicate_articles(articles) == [articles[0]]

    @pytest.mark.parametrize("articles", [[], [{"url": "https://a.com", "title": FED}]])
    def test_trivial_inputs(self, articles) -> None:
        assert deduplicate_articles(articles) == articles


GROUP_A_FIRST = {"url": "https://a.com/1", "title": IMMIGRATION}
GROUP_A_LATER = {"url": "https://a.com/1?ref=home", "title": "Local bakery wins a regional award for its sourdough bread"}
LONE = {"url": "https://b.com/1", "title": STORM}
GROUP_C_FIRST = {"url": "https://c.com/1", "title": FED}
GROUP_C_LATER = {"url": "https://c.com/2", "title": "Reuters - " + FED}


class TestOrderStability:
    @pytest.mark.parametrize("articles", [
        [GROUP_A_FIRST, GROUP_A_LATER, LONE, GROUP_C_FIRST, GROUP_C_LATER],
        [LONE, GROUP_C_FIRST, GROUP_A_FIRST, GROUP_C_LATER, GROUP_A_LATER],
        [GROUP_C_FIRST, GROUP_A_FIRST, LONE, GROUP_A_LATER, GROUP_C_LATER],
        [GROUP_A_FIRST, GROUP_C_FIRST, GROUP_C_LATER, LONE, GROUP_A_LATER],
    ])
    def test_surviving_set_independent_of_interleaving(self, articles) -> None:
        result = deduplicate_articles(articles)
        assert {a["url"] for a in result} == {"https://a.com/1", "https://b.com/1", "https://c.com/1"}
        # Survivors keep their input order.
        assert [a["url"] for a in result] == [a["url"] for a in articles if a in result]
