"""
URL validation and manipulation utilities.

This module provides functions for checking that a pull source is an
HTTP(S) URL, extracting its final path component and deriving the URLs
of files published next to it.
"""

from urllib.parse import quote

import httpx

from ...exceptions import InvalidInputError
from ..constants import REMOTE_URL_SCHEMES


def http_url_is_valid(url: str) -> bool:
    """
    Check whether a string is an absolute http:// or https:// URL.

    The URL must consist of printable ASCII characters without whitespace
    and must name a host.

    Args:
        url: URL to check

    Returns:
        True if the URL can be pulled from, False otherwise

    Example:
        >>> http_url_is_valid("https://example.com/images/foo.tar.xz")
        True
        >>> http_url_is_valid("ftp://example.com/foo.tar")
        False
    """
    if not url or any(not ("!" <= c <= "~") for c in url):
        return False

    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL:
        return False

    return parsed.scheme in REMOTE_URL_SCHEMES and bool(parsed.host)


def url_last_component(url: str) -> str:
    """
    Return the final path segment of a URL.

    Query string and fragment are ignored and trailing slashes are skipped,
    so ``https://example.com/images/foo/`` yields ``foo``.

    Args:
        url: Source URL

    Returns:
        Final path segment (percent-decoded)

    Raises:
        InvalidInputError: If the URL has no path segment to derive a name from
    """
    try:
        path = httpx.URL(url).path
    except httpx.InvalidURL as e:
        raise InvalidInputError(f"URL '{url}' is not valid: {e}") from e

    component = path.rstrip("/").rsplit("/", 1)[-1]
    if not component:
        raise InvalidInputError(f"Failed to get final component of URL '{url}'.")

    return component


def url_sibling(url: str, filename: str) -> str:
    """
    Return the URL of a file in the same directory as ``url``.

    Args:
        url: URL of a file
        filename: Name of the sibling file (not yet percent-encoded)

    Returns:
        Absolute URL of the sibling file

    Example:
        >>> url_sibling("https://example.com/images/foo.raw.xz", "SHA256SUMS")
        'https://example.com/images/SHA256SUMS'
    """
    return str(httpx.URL(url).join("./" + quote(filename)))


__all__ = ["http_url_is_valid", "url_last_component", "url_sibling"]
