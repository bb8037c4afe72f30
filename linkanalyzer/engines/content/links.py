"""
Link Classifier - splits a page's raw hrefs into internal and external sets.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from linkanalyzer.engines.crawler.urls import URLNormalizer, parse_absolute_url

NON_NAVIGATIONAL_PREFIXES = ("#", "javascript:", "mailto:", "tel:")
RELATIVE_PREFIXES = ("/", "./", "../")
SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:")
# schemes that are only valid with an authority part
HOST_SCHEMES = {"http", "https", "ftp", "ws", "wss"}


def is_absolute_link(link: str) -> bool:
    """Any RFC 3986 scheme counts; web schemes must also carry a host."""
    match = SCHEME_RE.match(link)
    if match is None:
        return False
    if match.group()[:-1].lower() in HOST_SCHEMES:
        return parse_absolute_url(link) is not None
    return True


@dataclass
class ClassifiedLinks:
    internal: list[str] = field(default_factory=list)
    external: list[str] = field(default_factory=list)
    total: int = 0


class LinkClassifier:
    """
    Internal: relative paths, or any href mentioning the page's hostname.
    External: anything else that parses as an absolute URL.
    Unparsable hrefs fall back to internal.
    """

    def classify(self, links: list[str], page_url: str) -> ClassifiedLinks:
        hostname = URLNormalizer.hostname(page_url)
        # dicts as insertion-ordered sets
        internal: dict[str, None] = {}
        external: dict[str, None] = {}

        for link in links:
            if not link or link.startswith(NON_NAVIGATIONAL_PREFIXES):
                continue
            if link.startswith(RELATIVE_PREFIXES) or (hostname and hostname in link):
                internal[link] = None
            elif is_absolute_link(link):
                external[link] = None
            else:
                internal[link] = None

        return ClassifiedLinks(
            internal=list(internal),
            external=list(external),
            total=len(links),
        )
