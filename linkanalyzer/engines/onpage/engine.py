"""
On-Page SEO Analyzer

Scores a single page against a fixed rubric:
- Title tag presence and length
- Meta description presence and length
- H1 count
- Image alt attributes
- Internal linking
- Document language
- Structured data (recommendation only, never penalised)

collect_document_facts() reads the parsed document once; score_document()
is a pure function of those facts, so every rule can be tested in isolation.
"""

from __future__ import annotations

from dataclasses import dataclass

from bs4 import BeautifulSoup

from linkanalyzer.engines.base import SeoAnalysis
from linkanalyzer.engines.content.links import RELATIVE_PREFIXES

# Thresholds
TITLE_MIN_LENGTH = 30
TITLE_MAX_LENGTH = 60
META_DESC_MIN_LENGTH = 120
META_DESC_MAX_LENGTH = 160

# Penalties
PENALTY_MISSING_TITLE = 20
PENALTY_SHORT_TITLE = 10
PENALTY_LONG_TITLE = 5
PENALTY_MISSING_DESC = 15
PENALTY_SHORT_DESC = 8
PENALTY_LONG_DESC = 5
PENALTY_MISSING_H1 = 15
PENALTY_MULTIPLE_H1 = 5
PENALTY_PER_IMAGE_WITHOUT_ALT = 3
PENALTY_IMAGES_WITHOUT_ALT_CAP = 15
PENALTY_NO_INTERNAL_LINKS = 8
PENALTY_MISSING_LANG = 3


@dataclass(frozen=True)
class DocumentFacts:
    h1_count: int = 0
    h2_count: int = 0
    h3_count: int = 0
    images_without_alt: int = 0
    internal_links: int = 0
    has_lang: bool = False
    has_schema: bool = False


def collect_document_facts(soup: BeautifulSoup) -> DocumentFacts:
    html_tag = soup.find("html")
    return DocumentFacts(
        h1_count=len(soup.find_all("h1")),
        h2_count=len(soup.find_all("h2")),
        h3_count=len(soup.find_all("h3")),
        images_without_alt=len([img for img in soup.find_all("img") if not img.has_attr("alt")]),
        internal_links=len([
            a for a in soup.find_all("a", href=True) if a["href"].startswith(RELATIVE_PREFIXES)
        ]),
        has_lang=html_tag is not None and html_tag.has_attr("lang"),
        has_schema=bool(
            soup.select_one('script[type="application/ld+json"]') or soup.select_one("[itemscope]")
        ),
    )


def score_document(facts: DocumentFacts, title: str, description: str) -> SeoAnalysis:
    score = 100
    issues: list[str] = []
    recommendations: list[str] = []

    def penalise(points: int, issue: str, recommendation: str) -> None:
        nonlocal score
        score -= points
        issues.append(issue)
        recommendations.append(recommendation)

    # ── Title ──────────────────────────────────
    if not title:
        penalise(PENALTY_MISSING_TITLE, "Missing page title",
                 f"Add a descriptive title tag of {TITLE_MIN_LENGTH}-{TITLE_MAX_LENGTH} characters")
    elif len(title) < TITLE_MIN_LENGTH:
        penalise(PENALTY_SHORT_TITLE, "Title too short",
                 f"Expand title to {TITLE_MIN_LENGTH}-{TITLE_MAX_LENGTH} characters")
    if len(title) > TITLE_MAX_LENGTH:
        penalise(PENALTY_LONG_TITLE, "Title too long",
                 f"Shorten title to under {TITLE_MAX_LENGTH} characters so it is not truncated in search results")

    # ── Meta Description ───────────────────────
    if not description:
        penalise(PENALTY_MISSING_DESC, "Missing meta description",
                 f"Add a meta description of {META_DESC_MIN_LENGTH}-{META_DESC_MAX_LENGTH} characters")
    elif len(description) < META_DESC_MIN_LENGTH:
        penalise(PENALTY_SHORT_DESC, "Meta description too short",
                 f"Expand meta description to {META_DESC_MIN_LENGTH}-{META_DESC_MAX_LENGTH} characters")
    if len(description) > META_DESC_MAX_LENGTH:
        penalise(PENALTY_LONG_DESC, "Meta description too long",
                 f"Trim meta description to under {META_DESC_MAX_LENGTH} characters")

    # ── Headings ──────────────────────────────
    if facts.h1_count == 0:
        penalise(PENALTY_MISSING_H1, "Missing H1 heading", "Add a single H1 heading describing the page")
    elif facts.h1_count > 1:
        penalise(PENALTY_MULTIPLE_H1, "Multiple H1 headings found",
                 "Use only one H1 per page. Use H2-H6 for subheadings")

    # ── Images Alt Text ───────────────────────
    if facts.images_without_alt:
        penalise(
            min(facts.images_without_alt * PENALTY_PER_IMAGE_WITHOUT_ALT, PENALTY_IMAGES_WITHOUT_ALT_CAP),
            f"{facts.images_without_alt} images missing alt text",
            "Add descriptive alt text to all images",
        )

    # ── Internal Links ────────────────────────
    if facts.internal_links == 0:
        penalise(PENALTY_NO_INTERNAL_LINKS, "No internal links found",
                 "Link to related pages on the same site to help crawlers and visitors")

    # ── Language ──────────────────────────────
    if not facts.has_lang:
        penalise(PENALTY_MISSING_LANG, "Missing language attribute",
                 'Declare the page language on the root element, e.g. <html lang="en">')

    # ── Structured Data ───────────────────────
    if not facts.has_schema:
        recommendations.append("Add structured data (JSON-LD or microdata) to enable rich results")

    return SeoAnalysis(
        score=max(0, score),
        issues=issues,
        recommendations=recommendations,
        details={
            "title_length": len(title),
            "description_length": len(description),
            "h1_count": facts.h1_count,
            "h2_count": facts.h2_count,
            "h3_count": facts.h3_count,
            "images_without_alt": facts.images_without_alt,
            "internal_links": facts.internal_links,
            "has_lang": facts.has_lang,
            "has_schema": facts.has_schema,
        },
    )


def analyze_seo(soup: BeautifulSoup, title: str, description: str) -> SeoAnalysis:
    return score_document(collect_document_facts(soup), title, description)
