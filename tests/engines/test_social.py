"""Tests for the Social-Meta Extractor."""

from bs4 import BeautifulSoup

from linkanalyzer.engines.social.engine import META_RULES, OTHER_META_NAMES, extract_social_meta


def soup_of(head: str) -> BeautifulSoup:
    return BeautifulSoup(f"<html><head>{head}</head><body></body></html>", "lxml")


class TestSocialMeta:

    def test_open_graph_and_twitter(self):
        soup = soup_of("""
            <meta property="og:title" content="OG Title">
            <meta property="og:image" content="https://example.com/a.png">
            <meta name="twitter:card" content="summary_large_image">
            <meta name="twitter:site" content="@example">
        """)
        meta = extract_social_meta(soup)
        assert meta.open_graph == {"title": "OG Title", "image": "https://example.com/a.png"}
        assert meta.twitter == {"card": "summary_large_image", "site": "@example"}
        assert meta.other == {}

    def test_other_tags_by_name_or_property(self):
        soup = soup_of("""
            <meta name="author" content="Jo">
            <meta name="robots" content="index,follow">
            <meta property="article:section" content="News">
            <meta name="article:published_time" content="2024-01-01">
            <meta name="unrelated" content="ignored">
            <link rel="canonical" href="https://example.com/canonical">
        """)
        meta = extract_social_meta(soup)
        assert meta.other == {
            "author": "Jo",
            "robots": "index,follow",
            "article:section": "News",
            "article:published_time": "2024-01-01",
            "canonical": "https://example.com/canonical",
        }

    def test_name_wins_over_property(self):
        soup = soup_of("""
            <meta property="author" content="From property">
            <meta name="author" content="From name">
        """)
        assert extract_social_meta(soup).other["author"] == "From name"

    def test_first_occurrence_wins(self):
        soup = soup_of("""
            <meta property="og:image" content="first.png">
            <meta property="og:image" content="second.png">
        """)
        assert extract_social_meta(soup).open_graph["image"] == "first.png"

    def test_missing_tags_are_absent(self):
        meta = extract_social_meta(soup_of('<meta property="og:title"><link rel="canonical">'))
        assert meta.open_graph == {}
        assert "canonical" not in meta.other

    def test_rule_table_covers_vocabulary(self):
        selectors = {rule.selector for rule in META_RULES}
        for name in OTHER_META_NAMES:
            assert f'meta[name="{name}"]' in selectors
            assert f'meta[property="{name}"]' in selectors

    def test_serializes_with_open_graph_alias(self):
        meta = extract_social_meta(soup_of('<meta property="og:type" content="website">'))
        assert meta.model_dump(by_alias=True)["openGraph"] == {"type": "website"}
