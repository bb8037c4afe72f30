"""
URL utilities - validation and normalization of user-supplied URLs.
"""

from __future__ import annotations

from urllib.parse import SplitResult, urlsplit

from linkanalyzer.core.errors import InvalidURLError

DEFAULT_SCHEME_PREFIX = "https://"


def parse_absolute_url(url: str) -> SplitResult | None:
    """
    Parse url as an absolute URL.
    Returns None unless it has a scheme, a host and (if given) a valid port.
    """
    if not isinstance(url, str) or not url:
        return None
    try:
        parsed = urlsplit(url)
        parsed.port  # raises ValueError on a malformed port
    except ValueError:
        return None

    host = parsed.hostname
    if not parsed.scheme or not host:
        return None
    if any(ch.isspace() for ch in host):
        return None
    return parsed


class URLNormalizer:
    """Turns possibly schemeless input into a fetchable absolute URL."""

    @classmethod
    def normalize(cls, url: str) -> str:
        """
        Return url unchanged if it is already absolute, else the
        https-prefixed form. Trailing slashes, queries and fragments are kept.
        """
        if not isinstance(url, str):
            raise InvalidURLError()
        if parse_absolute_url(url) is not None:
            return url
        prefixed = f"{DEFAULT_SCHEME_PREFIX}{url}"
        if parse_absolute_url(prefixed) is not None:
            return prefixed
        raise InvalidURLError(url=url)

    @classmethod
    def is_valid(cls, url: str) -> bool:
        try:
            cls.normalize(url)
        except InvalidURLError:
            return False
        return True

    @classmethod
    def hostname(cls, url: str) -> str:
        parsed = parse_absolute_url(url)
        return parsed.hostname if parsed else ""
