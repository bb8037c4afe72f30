"""
Bulk Orchestrator - analyses a list of URLs in fixed-size concurrent batches.

Each batch runs all of its pipelines concurrently and must fully settle
before the next batch starts, so at most `max_concurrent` fetches are ever in
flight. One URL failing never affects any other URL.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable

import structlog
from structlog.contextvars import bound_contextvars

from linkanalyzer.core.config import Settings, get_settings
from linkanalyzer.core.errors import NoUrlsError, TooManyUrlsError, user_message_for
from linkanalyzer.engines.base import (
    AnalysisResult,
    BulkError,
    BulkItem,
    BulkResult,
    BulkSummary,
)

logger = structlog.get_logger(__name__)

Analyzer = Callable[[str], Awaitable[AnalysisResult]]


@dataclass
class Outcome:
    index: int
    url: str
    data: AnalysisResult | None = None
    error: str | None = None


class BulkOrchestrator:

    def __init__(self, analyze: Analyzer, settings: Settings | None = None):
        self.analyze = analyze
        self.settings = settings or get_settings()

    def validate(self, urls: list[str] | None) -> list[str]:
        if not urls:
            raise NoUrlsError()
        if len(urls) > self.settings.BULK_MAX_URLS:
            raise TooManyUrlsError(self.settings.BULK_MAX_URLS)
        return list(urls)

    async def run(self, urls: list[str] | None, max_concurrent: int | None = None) -> BulkResult:
        """
        Analyze every URL, batch by batch.

        Raises NoUrlsError / TooManyUrlsError before any fetching starts.
        Per-URL failures are reported in BulkResult.errors.
        """
        urls = self.validate(urls)
        width = max(1, max_concurrent or self.settings.BULK_DEFAULT_CONCURRENCY)

        logger.info("Bulk analysis starting", total=len(urls), batch_width=width)

        results: list[BulkItem] = []
        errors: list[BulkError] = []

        for offset in range(0, len(urls), width):
            batch = list(enumerate(urls[offset:offset + width], start=offset))
            outcomes = await asyncio.gather(
                *[self._analyze_one(index, url) for index, url in batch],
                return_exceptions=True,
            )

            for (index, url), outcome in zip(batch, outcomes):
                if isinstance(outcome, BaseException):
                    # only BaseExceptions such as CancelledError get here
                    outcome = Outcome(index=index, url=url, error=user_message_for(outcome))
                if outcome.data is not None:
                    results.append(BulkItem(index=outcome.index, url=outcome.url, data=outcome.data))
                else:
                    errors.append(BulkError(index=outcome.index, url=outcome.url, error=outcome.error or ""))

            logger.info(
                "Bulk batch complete",
                batch_start=offset,
                batch_size=len(batch),
                successful=len(results),
                failed=len(errors),
            )

        results.sort(key=lambda item: item.index)
        errors.sort(key=lambda item: item.index)

        return BulkResult(
            results=results,
            errors=errors,
            summary=BulkSummary(total=len(urls), successful=len(results), failed=len(errors)),
        )

    async def _analyze_one(self, index: int, url: str) -> Outcome:
        with bound_contextvars(bulk_index=index, url=url):
            try:
                data = await self.analyze(url)
            except Exception as exc:
                logger.warning("Bulk item failed", error=str(exc))
                return Outcome(index=index, url=url, error=user_message_for(exc))
        return Outcome(index=index, url=url, data=data)
