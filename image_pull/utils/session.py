"""
Session utilities for image downloads.

This module provides utilities for creating and configuring async HTTP
clients with retry strategies and connection pooling.
"""

import importlib.util
import logging

import httpx
from httpx import AsyncHTTPTransport

from .constants import DEFAULT_TIMEOUT
from .._version import __version__

# ============================================================================
# HTTP Configuration Constants
# ============================================================================

# Connection-level retries performed by the transport
MAX_RETRIES = 3

# Connect timeout (seconds), independent of the total timeout
CONNECT_TIMEOUT = 10.0

USER_AGENT = f"image-pull/{__version__}"


def create_async_session_with_retry(timeout: float = DEFAULT_TIMEOUT, max_connections: int = 10) -> httpx.AsyncClient:
    """
    Create an httpx async client with retry strategy and connection pooling.

    Args:
        timeout: Total timeout in seconds (default: DEFAULT_TIMEOUT)
        max_connections: Maximum number of connections in the pool (default: 10)

    Returns:
        Configured httpx.AsyncClient object with:
        - Automatic connection retries
        - HTTP/2 support when the h2 package is installed
        - Redirect following
        - Timeout configuration

    Example:
        >>> client = create_async_session_with_retry()
        >>> # inside a coroutine
        >>> response = await client.get("https://example.com/SHA256SUMS")
    """
    limits = httpx.Limits(
        max_connections=max_connections,
        max_keepalive_connections=max(5, max_connections // 2),
    )
    timeout_config = httpx.Timeout(timeout, connect=CONNECT_TIMEOUT)

    use_http2 = importlib.util.find_spec("h2") is not None
    if not use_http2:
        logging.debug("HTTP/2 support not available (h2 package not installed)")

    # Only connection failures are retried here; HTTP status errors are final
    transport = AsyncHTTPTransport(limits=limits, retries=MAX_RETRIES, http2=use_http2)

    return httpx.AsyncClient(
        transport=transport,
        timeout=timeout_config,
        follow_redirects=True,
        headers={"User-Agent": USER_AGENT},
    )


__all__ = ["create_async_session_with_retry"]
