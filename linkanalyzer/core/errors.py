"""
Error taxonomy for URL analysis.

Every failure the analyzer can report derives from AnalyzerError and carries:
- code:         stable machine-readable kind
- user_message: one sentence suitable for showing to an end user
- status_code:  HTTP status the route layer answers with
"""

from __future__ import annotations


class AnalyzerError(Exception):
    """Base class for all classified analysis failures."""

    code: str = "AnalysisFailed"
    status_code: int = 500
    default_message: str = "Failed to analyze URL"

    def __init__(self, message: str | None = None, *, url: str | None = None):
        self.user_message = message or self.default_message
        self.url = url
        super().__init__(self.user_message)


class InvalidURLError(AnalyzerError):
    code = "InvalidURL"
    status_code = 400
    default_message = "Invalid URL format"


# ─────────────────────────────────────────────
# Transport / protocol failures
# ─────────────────────────────────────────────

class FetchError(AnalyzerError):
    """A page could not be retrieved."""
    code = "FetchFailed"
    status_code = 502
    default_message = "Failed to fetch the page"


class HostNotFoundError(FetchError):
    code = "HostNotFound"
    status_code = 400
    default_message = "Could not resolve the website's host name"


class ConnectionRefusedFetchError(FetchError):
    code = "ConnectionRefused"
    status_code = 400
    default_message = "Could not connect to the website"


class FetchTimeoutError(FetchError):
    code = "Timeout"
    status_code = 504
    default_message = "The website took too long to respond"


class ResponseTooLargeError(FetchError):
    code = "ResponseTooLarge"
    status_code = 413
    default_message = "The page exceeds the maximum allowed size"

    def __init__(self, limit: int, *, url: str | None = None):
        self.limit = limit
        super().__init__(url=url)


class TooManyRedirectsError(FetchError):
    code = "TooManyRedirects"
    status_code = 400
    default_message = "The page redirected too many times"


class UpstreamStatusError(FetchError):
    code = "UpstreamStatusError"
    status_code = 400

    def __init__(self, status: int, reason: str = "", *, url: str | None = None):
        self.status = status
        self.reason = reason
        if status == 404:
            message = "Page not found (404)"
        else:
            message = f"Website returned error: {status}"
        super().__init__(message, url=url)


# ─────────────────────────────────────────────
# Content failures (recovered locally, never surfaced)
# ─────────────────────────────────────────────

class MalformedContentError(AnalyzerError):
    code = "MalformedContent"
    status_code = 422
    default_message = "The page content could not be parsed"


# ─────────────────────────────────────────────
# Bulk request validation
# ─────────────────────────────────────────────

class BulkRequestError(AnalyzerError):
    code = "InvalidBulkRequest"
    status_code = 400


class NoUrlsError(BulkRequestError):
    code = "NoUrls"
    default_message = "URLs array is required"


class TooManyUrlsError(BulkRequestError):
    code = "TooManyUrls"

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"Maximum {limit} URLs allowed per bulk analysis")


def user_message_for(exc: BaseException) -> str:
    """Reduce any exception to a one-line message for an end user."""
    if isinstance(exc, AnalyzerError):
        return exc.user_message
    return AnalyzerError.default_message
