"""
Content Extractor - turns raw markup into the page's textual facts.

Extracts:
- title and meta description
- h1/h2/h3 heading text, in document order
- every raw anchor href (duplicates and non-navigational ones included)
- absolute image URLs (data: URIs excluded)
- body word count
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from urllib.parse import urljoin

import structlog
from bs4 import BeautifulSoup

from linkanalyzer.core.errors import MalformedContentError
from linkanalyzer.engines.base import Headings

logger = structlog.get_logger(__name__)

WHITESPACE_RE = re.compile(r"\s+")


@dataclass
class ExtractedPage:
    """Parsed document plus everything read off it."""
    soup: BeautifulSoup
    title: str = ""
    description: str = ""
    headings: Headings = field(default_factory=Headings)
    raw_links: list[str] = field(default_factory=list)
    images: list[str] = field(default_factory=list)
    word_count: int = 0


def count_words(text: str) -> int:
    return len([token for token in WHITESPACE_RE.sub(" ", text).split(" ") if token])


def resolve_image_url(src: str, page_url: str) -> str:
    try:
        return urljoin(page_url, src)
    except ValueError:
        return src


class ContentExtractor:

    PARSER = "lxml"

    def extract(self, html: str, page_url: str) -> ExtractedPage:
        """
        Parse html fetched from page_url.
        Raises MalformedContentError for empty, non-textual or unparsable input.
        """
        if not isinstance(html, str):
            raise MalformedContentError("The page did not return textual content")
        if not html.strip():
            raise MalformedContentError("The page returned an empty body")
        if "\x00" in html:
            raise MalformedContentError("The page returned binary content")

        try:
            soup = BeautifulSoup(html, self.PARSER)
            page = ExtractedPage(
                soup=soup,
                title=self._title(soup),
                description=self._description(soup),
                headings=Headings(
                    h1=self._heading_texts(soup, "h1"),
                    h2=self._heading_texts(soup, "h2"),
                    h3=self._heading_texts(soup, "h3"),
                ),
                raw_links=[a["href"] for a in soup.find_all("a", href=True)],
                images=self._images(soup, page_url),
                word_count=count_words(soup.body.get_text(" ")) if soup.body else 0,
            )
        except Exception as exc:
            logger.warning("HTML parse error", url=page_url, error=str(exc))
            raise MalformedContentError(f"The page markup could not be parsed: {exc}") from exc

        logger.info(
            "Completed parsing HTML",
            url=page_url,
            h1=len(page.headings.h1),
            h2=len(page.headings.h2),
            h3=len(page.headings.h3),
            links=len(page.raw_links),
            images=len(page.images),
            word_count=page.word_count,
        )
        return page

    @staticmethod
    def _title(soup: BeautifulSoup) -> str:
        title_tag = soup.find("title")
        return title_tag.get_text().strip() if title_tag else ""

    @staticmethod
    def _description(soup: BeautifulSoup) -> str:
        meta = soup.find("meta", attrs={"name": "description"})
        if meta is None:
            return ""
        return meta.get("content") or ""

    @staticmethod
    def _heading_texts(soup: BeautifulSoup, tag: str) -> list[str]:
        return [heading.get_text().strip() for heading in soup.find_all(tag)]

    @staticmethod
    def _images(soup: BeautifulSoup, page_url: str) -> list[str]:
        images = []
        for img in soup.find_all("img", src=True):
            src = img["src"]
            if not src or src.startswith("data:"):
                continue
            images.append(resolve_image_url(src, page_url))
        return images
