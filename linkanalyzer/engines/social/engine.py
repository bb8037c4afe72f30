"""
Social-Meta Extractor

Harvests Open Graph, Twitter Card and a fixed vocabulary of other metadata
tags. Every lookup is one row in META_RULES; extract_social_meta() is the
only routine that reads them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from bs4 import BeautifulSoup, Tag

from linkanalyzer.engines.base import SocialMeta

OPEN_GRAPH = "open_graph"
TWITTER = "twitter"
OTHER = "other"

OTHER_META_NAMES = (
    "author",
    "keywords",
    "robots",
    "viewport",
    "theme-color",
    "application-name",
    "generator",
    "article:author",
    "article:section",
    "article:published_time",
)


@dataclass(frozen=True)
class MetaRule:
    """Where to look (selector), where to put it (bucket) and under which key."""
    selector: str
    bucket: str
    key: Callable[[Tag], str]
    value_attr: str = "content"


def strip_prefix(attr: str, prefix: str) -> Callable[[Tag], str]:
    return lambda tag: tag.get(attr, "")[len(prefix):]


def fixed_key(name: str) -> Callable[[Tag], str]:
    return lambda tag: name


def _build_rules() -> list[MetaRule]:
    rules = [
        MetaRule('meta[property^="og:"]', OPEN_GRAPH, strip_prefix("property", "og:")),
        MetaRule('meta[name^="twitter:"]', TWITTER, strip_prefix("name", "twitter:")),
    ]
    for name in OTHER_META_NAMES:
        # name= takes precedence over property= for the same key
        rules.append(MetaRule(f'meta[name="{name}"]', OTHER, fixed_key(name)))
        rules.append(MetaRule(f'meta[property="{name}"]', OTHER, fixed_key(name)))
    rules.append(MetaRule('link[rel~="canonical"][href]', OTHER, fixed_key("canonical"), value_attr="href"))
    return rules


META_RULES: list[MetaRule] = _build_rules()


def extract_social_meta(soup: BeautifulSoup, rules: list[MetaRule] = META_RULES) -> SocialMeta:
    """Apply rules in order; the first value found for a key wins."""
    buckets: dict[str, dict[str, str]] = {OPEN_GRAPH: {}, TWITTER: {}, OTHER: {}}

    for rule in rules:
        for tag in soup.select(rule.selector):
            value = tag.get(rule.value_attr)
            key = rule.key(tag)
            if value is None or not key:
                continue
            buckets[rule.bucket].setdefault(key, value)

    return SocialMeta(
        open_graph=buckets[OPEN_GRAPH],
        twitter=buckets[TWITTER],
        other=buckets[OTHER],
    )
