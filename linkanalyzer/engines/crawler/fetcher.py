"""
Page Fetcher - one bounded HTTP GET per analysed URL.

Limits enforced on every request:
- request timeout (CRAWLER_REQUEST_TIMEOUT)
- maximum body size, checked while the body streams in (CRAWLER_MAX_CONTENT_BYTES)
- maximum number of redirects followed (CRAWLER_MAX_REDIRECTS)

Transport failures are classified into the FetchError hierarchy. No retries.
"""

from __future__ import annotations

import socket
import time
from dataclasses import dataclass

import httpx
import structlog
from bs4.dammit import EncodingDetector

from linkanalyzer.core.config import Settings, get_settings
from linkanalyzer.core.errors import (
    ConnectionRefusedFetchError,
    FetchError,
    FetchTimeoutError,
    HostNotFoundError,
    ResponseTooLargeError,
    TooManyRedirectsError,
    UpstreamStatusError,
)
from linkanalyzer.engines.base import PerformanceMetrics

logger = structlog.get_logger(__name__)

DNS_FAILURE_MARKERS = (
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "temporary failure in name resolution",
    "no address associated with hostname",
    "name resolution",
)


@dataclass(frozen=True)
class FetchResult:
    body: str
    metrics: PerformanceMetrics


def create_http_client(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Build an AsyncClient carrying the crawler headers and limits."""
    settings = settings or get_settings()
    return httpx.AsyncClient(
        headers=settings.crawler_headers,
        follow_redirects=True,
        max_redirects=settings.CRAWLER_MAX_REDIRECTS,
        timeout=httpx.Timeout(settings.CRAWLER_REQUEST_TIMEOUT),
        transport=transport,
    )


def decode_body(raw: bytes, declared_charset: str | None) -> str:
    """
    Decode a page body. A byte-order mark wins, then the Content-Type charset,
    then a <meta charset> or XML declaration in the markup; utf-8 otherwise.
    """
    data, bom_encoding = EncodingDetector.strip_byte_order_mark(raw)
    sniffed = EncodingDetector.find_declared_encoding(data, is_html=True)
    for encoding in (bom_encoding, declared_charset, sniffed):
        if not encoding:
            continue
        try:
            return data.decode(encoding, errors="replace")
        except LookupError:
            logger.debug("Unknown charset", charset=encoding)
    return data.decode("utf-8", errors="replace")


def classify_connect_error(exc: httpx.ConnectError, url: str) -> FetchError:
    """Tell DNS failures apart from refused connections."""
    seen: set[int] = set()
    cause: BaseException | None = exc
    while cause is not None and id(cause) not in seen:
        seen.add(id(cause))
        if isinstance(cause, socket.gaierror):
            return HostNotFoundError(url=url)
        if isinstance(cause, ConnectionRefusedError):
            return ConnectionRefusedFetchError(url=url)
        cause = cause.__cause__ or cause.__context__

    message = str(exc).lower()
    if any(marker in message for marker in DNS_FAILURE_MARKERS):
        return HostNotFoundError(url=url)
    if "refused" in message:
        return ConnectionRefusedFetchError(url=url)
    return FetchError(url=url)


class PageFetcher:
    """
    Fetches a single page with httpx.
    A shared client may be injected; otherwise one is opened per fetch.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self.client = client
        self.max_bytes = self.settings.CRAWLER_MAX_CONTENT_BYTES

    async def fetch(self, url: str) -> FetchResult:
        if self.client is not None:
            return await self._fetch(self.client, url)
        async with create_http_client(self.settings) as client:
            return await self._fetch(client, url)

    async def _fetch(self, client: httpx.AsyncClient, url: str) -> FetchResult:
        start = time.perf_counter()
        try:
            async with client.stream("GET", url) as response:
                if not 200 <= response.status_code < 400:
                    logger.warning("Upstream error status", url=url, status=response.status_code)
                    raise UpstreamStatusError(response.status_code, response.reason_phrase, url=url)

                declared_size = self._declared_size(response)
                if declared_size is not None and declared_size > self.max_bytes:
                    raise ResponseTooLargeError(self.max_bytes, url=url)

                raw = await self._read_bounded(response, url)
                elapsed = (time.perf_counter() - start) * 1000

                metrics = PerformanceMetrics(
                    response_time_ms=round(elapsed),
                    content_size_bytes=declared_size if declared_size is not None else len(raw),
                    status_code=response.status_code,
                    redirect_count=len(response.history),
                )
                body = decode_body(raw, response.charset_encoding)

        except httpx.TimeoutException as exc:
            logger.warning("Fetch timed out", url=url, error=str(exc))
            raise FetchTimeoutError(url=url) from exc
        except httpx.ConnectError as exc:
            error = classify_connect_error(exc, url)
            logger.warning("Fetch connection failed", url=url, kind=error.code, error=str(exc))
            raise error from exc
        except httpx.TooManyRedirects as exc:
            logger.warning("Too many redirects", url=url, limit=self.settings.CRAWLER_MAX_REDIRECTS)
            raise TooManyRedirectsError(url=url) from exc
        except httpx.HTTPError as exc:
            logger.warning("Fetch failed", url=url, error=str(exc))
            raise FetchError(url=url) from exc

        logger.debug(
            "Fetch complete",
            url=url,
            status=metrics.status_code,
            bytes=metrics.content_size_bytes,
            elapsed_ms=metrics.response_time_ms,
        )
        return FetchResult(body=body, metrics=metrics)

    async def _read_bounded(self, response: httpx.Response, url: str) -> bytes:
        """Stream the body, aborting as soon as it exceeds max_bytes."""
        chunks: list[bytes] = []
        received = 0
        async for chunk in response.aiter_bytes():
            received += len(chunk)
            if received > self.max_bytes:
                logger.warning("Response too large", url=url, limit=self.max_bytes)
                raise ResponseTooLargeError(self.max_bytes, url=url)
            chunks.append(chunk)
        return b"".join(chunks)

    @staticmethod
    def _declared_size(response: httpx.Response) -> int | None:
        value = response.headers.get("content-length", "").strip()
        return int(value) if value.isdigit() else None
