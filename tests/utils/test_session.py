"""
Tests for session utilities.

This module tests async client creation and configuration.
"""

import asyncio
from unittest.mock import patch

import httpx

from image_pull.utils import create_async_session_with_retry
from image_pull.utils.session import CONNECT_TIMEOUT, USER_AGENT


class TestSessionUtilities:
    """Test session utility functions."""

    def test_create_async_session_with_retry(self):
        """Test create_async_session_with_retry function."""
        client = create_async_session_with_retry()
        try:
            assert isinstance(client, httpx.AsyncClient)
            assert client.timeout.connect == CONNECT_TIMEOUT
            assert client.follow_redirects is True
            assert client.headers["User-Agent"] == USER_AGENT
            assert not client.is_closed
        finally:
            asyncio.run(client.aclose())

    def test_custom_timeout(self):
        """Test that the total timeout is applied to read operations."""
        client = create_async_session_with_retry(timeout=42)
        try:
            assert client.timeout.read == 42
            assert client.timeout.connect == CONNECT_TIMEOUT
        finally:
            asyncio.run(client.aclose())

    def test_without_h2(self):
        """Test that the client is created when the h2 package is unavailable."""
        with patch("image_pull.utils.session.importlib.util.find_spec", return_value=None):
            client = create_async_session_with_retry()
        try:
            assert isinstance(client, httpx.AsyncClient)
        finally:
            asyncio.run(client.aclose())

    def test_respx_intercepts_requests(self, httpx_mock):
        """Test that requests made through the client can be mocked."""
        route = httpx_mock.get("https://example.com/SHA256SUMS").mock(
            return_value=httpx.Response(200, content=b"abc  foo.tar\n")
        )

        async def fetch():
            async with create_async_session_with_retry() as client:
                return await client.get("https://example.com/SHA256SUMS")

        response = asyncio.run(fetch())

        assert route.called
        assert response.content == b"abc  foo.tar\n"
        assert route.calls.last.request.headers["User-Agent"] == USER_AGENT
