"""Tests for the Content Extractor."""

import pytest

from linkanalyzer.core.errors import MalformedContentError
from linkanalyzer.engines.content.extractor import ContentExtractor, count_words

PAGE_URL = "https://example.com/blog/post"


@pytest.fixture
def extractor():
    return ContentExtractor()


class TestContentExtractor:

    def test_title_and_description(self, extractor):
        html = """
        <html><head>
          <title>
             First Title
          </title>
          <title>Second</title>
          <meta name="description" content="First description">
          <meta name="description" content="Second description">
        </head><body></body></html>
        """
        page = extractor.extract(html, PAGE_URL)
        assert page.title == "First Title"
        assert page.description == "First description"

    def test_missing_title_and_description_are_empty(self, extractor):
        page = extractor.extract("<html><body><p>text</p></body></html>", PAGE_URL)
        assert page.title == ""
        assert page.description == ""

    def test_headings_in_document_order_without_cap(self, extractor):
        h2s = "".join(f"<h2> Section {i} </h2>" for i in range(25))
        html = f"<html><body><h1>Main</h1>{h2s}<h3>Deep</h3><h1>Second</h1></body></html>"

        page = extractor.extract(html, PAGE_URL)

        assert page.headings.h1 == ["Main", "Second"]
        assert len(page.headings.h2) == 25
        assert page.headings.h2[0] == "Section 0"
        assert page.headings.h3 == ["Deep"]

    def test_raw_links_keep_duplicates_and_anchors(self, extractor):
        html = """<body>
          <a href="/a">A</a><a href="/a">A</a><a href="#top">T</a>
          <a href="mailto:x@example.com">M</a><a name="no-href">N</a>
        </body>"""
        page = extractor.extract(html, PAGE_URL)
        assert page.raw_links == ["/a", "/a", "#top", "mailto:x@example.com"]

    def test_images_resolved_and_data_uris_dropped(self, extractor):
        html = """<body>
          <img src="/logo.png">
          <img src="data:image/png;base64,iVBORw0KGgo=">
          <img src="https://cdn.example.net/b.png">
          <img src="img/c.png">
          <img alt="no src">
        </body>"""
        page = extractor.extract(html, PAGE_URL)
        assert page.images == [
            "https://example.com/logo.png",
            "https://cdn.example.net/b.png",
            "https://example.com/blog/img/c.png",
        ]
        assert not any(src.startswith("data:") for src in page.images)

    def test_word_count(self, extractor):
        html = "<html><head><title>Not counted</title></head><body><p>Hello   world</p><p>foo\n\tbar</p></body></html>"
        page = extractor.extract(html, PAGE_URL)
        assert page.word_count == 4

    @pytest.mark.parametrize("body", ["", "   \n ", None, b"<html></html>", "abc\x00def"])
    def test_malformed_input_raises_malformed_content(self, extractor, body):
        with pytest.raises(MalformedContentError):
            extractor.extract(body, PAGE_URL)

    def test_unknown_parser_raises_malformed_content(self):
        class BrokenParserExtractor(ContentExtractor):
            PARSER = "no-such-tree-builder"

        with pytest.raises(MalformedContentError) as exc_info:
            BrokenParserExtractor().extract("<html><title>Hi</title></html>", PAGE_URL)
        assert "could not be parsed" in exc_info.value.user_message

    def test_failure_inside_tree_walk_raises_malformed_content(self, monkeypatch, extractor):
        def explode(soup):
            raise RecursionError("maximum recursion depth exceeded")

        monkeypatch.setattr(ContentExtractor, "_title", staticmethod(explode))
        with pytest.raises(MalformedContentError):
            extractor.extract("<html><title>Hi</title></html>", PAGE_URL)


def test_count_words():
    assert count_words("  one two\n\nthree  ") == 3
    assert count_words("") == 0
