"""
Crawler Engine - single-page analysis pipeline.

Flow:
1. Normalize: validate the raw URL, add https:// when schemeless
2. Fetch: one bounded GET (timeout, size and redirect limits)
3. Extract: title, description, headings, links, images, word count
4. Classify links, harvest social meta, score SEO
5. Assemble an immutable AnalysisResult

Fetch failures propagate as FetchError subclasses. Malformed markup never
does: it yields a degraded result instead.
"""

from __future__ import annotations

import time

import structlog
from structlog.contextvars import bound_contextvars

from linkanalyzer.core.errors import MalformedContentError
from linkanalyzer.engines.base import (
    AnalysisResult,
    LinkCounts,
    PerformanceMetrics,
    SeoAnalysis,
)
from linkanalyzer.engines.content.extractor import ContentExtractor
from linkanalyzer.engines.content.links import LinkClassifier
from linkanalyzer.engines.crawler.fetcher import PageFetcher
from linkanalyzer.engines.crawler.urls import URLNormalizer
from linkanalyzer.engines.onpage.engine import analyze_seo
from linkanalyzer.engines.social.engine import extract_social_meta

logger = structlog.get_logger(__name__)

NO_TITLE_PLACEHOLDER = "No title found"
PARSE_ERROR_TITLE = "Error parsing page"


def degraded_result(url: str, metrics: PerformanceMetrics, reason: str) -> AnalysisResult:
    """A well-formed but empty result for a page whose content could not be parsed."""
    return AnalysisResult(
        url=url,
        title=PARSE_ERROR_TITLE,
        description=f"Unable to analyze page content: {reason}",
        performance_metrics=metrics,
        seo_analysis=SeoAnalysis(
            score=0,
            issues=["Page content could not be parsed"],
            recommendations=["Make sure the URL serves a valid HTML document"],
        ),
    )


class CrawlerEngine:

    ENGINE_NAME = "crawler"

    def __init__(
        self,
        fetcher: PageFetcher | None = None,
        extractor: ContentExtractor | None = None,
        link_classifier: LinkClassifier | None = None,
    ):
        self.fetcher = fetcher or PageFetcher()
        self.extractor = extractor or ContentExtractor()
        self.link_classifier = link_classifier or LinkClassifier()
        self.logger = structlog.get_logger(self.__class__.__name__)

    async def analyze(self, url: str) -> AnalysisResult:
        """
        Analyze a single URL.

        Raises:
            InvalidURLError: url is not a URL even with https:// prepended
            FetchError: the page could not be retrieved (see subclasses)
        """
        normalized = URLNormalizer.normalize(url)
        start = time.perf_counter()

        with bound_contextvars(url=normalized):
            self.logger.info("Starting crawl", engine=self.ENGINE_NAME)

            fetched = await self.fetcher.fetch(normalized)
            result = self.build_result(normalized, fetched.body, fetched.metrics)

            self.logger.info(
                "Crawl complete",
                engine=self.ENGINE_NAME,
                score=result.seo_analysis.score,
                issue_count=len(result.seo_analysis.issues),
                elapsed_ms=round((time.perf_counter() - start) * 1000, 2),
            )
        return result

    def build_result(self, url: str, html: str, metrics: PerformanceMetrics) -> AnalysisResult:
        """Run extraction and scoring over an already fetched body."""
        try:
            page = self.extractor.extract(html, url)
        except MalformedContentError as exc:
            self.logger.warning("Returning degraded result", url=url, reason=exc.user_message)
            return degraded_result(url, metrics, exc.user_message)

        links = self.link_classifier.classify(page.raw_links, url)

        return AnalysisResult(
            url=url,
            title=page.title or NO_TITLE_PLACEHOLDER,
            description=page.description,
            headings=page.headings,
            link_counts=LinkCounts(
                internal=len(links.internal),
                external=len(links.external),
                total=links.total,
            ),
            images=page.images,
            word_count=page.word_count,
            social_meta=extract_social_meta(page.soup),
            seo_analysis=analyze_seo(page.soup, page.title, page.description),
            performance_metrics=metrics,
        )
