"""Tests for cancellation tokens and signal routing."""

import asyncio
import logging
import signal
from unittest.mock import Mock

from image_pull.services import CancellationToken, install_signal_handlers, remove_signal_handlers
from image_pull.services.cancellation import INTERRUPT_SIGNALS


class TestCancellationToken:
    """Test CancellationToken."""

    def test_initial_state(self):
        """Test that a new token is not cancelled."""
        assert CancellationToken().cancelled is False

    def test_cancel_runs_callbacks(self):
        """Test that callbacks run on cancel."""
        token = CancellationToken()
        callback = Mock()
        token.add_callback(callback)

        token.cancel()

        assert token.cancelled is True
        callback.assert_called_once_with()

    def test_cancel_is_idempotent(self):
        """Test that a second cancel runs nothing."""
        token = CancellationToken()
        callback = Mock()
        token.add_callback(callback)

        token.cancel()
        token.cancel()

        callback.assert_called_once()

    def test_callback_added_after_cancel_runs_immediately(self):
        """Test late subscription to a cancelled token."""
        token = CancellationToken()
        token.cancel()
        callback = Mock()

        token.add_callback(callback)

        callback.assert_called_once()

    def test_removed_callback_not_called(self):
        """Test unsubscription."""
        token = CancellationToken()
        callback = Mock()
        token.add_callback(callback)
        token.remove_callback(callback)
        token.remove_callback(callback)

        token.cancel()

        callback.assert_not_called()


class TestSignalHandlers:
    """Test routing of signals into a token."""

    def test_install_and_remove(self):
        """Test that SIGTERM and SIGINT handlers are installed on the loop."""
        loop = Mock()
        token = CancellationToken()

        installed = install_signal_handlers(loop, token)

        assert installed == list(INTERRUPT_SIGNALS)
        loop.add_signal_handler.assert_any_call(signal.SIGTERM, token.cancel)
        loop.add_signal_handler.assert_any_call(signal.SIGINT, token.cancel)

        remove_signal_handlers(loop, installed)
        assert loop.remove_signal_handler.call_count == 2

    def test_install_failure_ignored(self, caplog):
        """Test that loops without signal support are tolerated."""
        loop = Mock()
        loop.add_signal_handler.side_effect = NotImplementedError()

        with caplog.at_level(logging.DEBUG):
            installed = install_signal_handlers(loop, CancellationToken())

        assert installed == []
        assert "Cannot watch signal SIGTERM" in caplog.text

    def test_signal_cancels_token(self):
        """Test delivery of a real SIGTERM through the loop."""
        loop = asyncio.new_event_loop()
        token = CancellationToken()
        installed = install_signal_handlers(loop, token, [signal.SIGTERM])
        try:
            assert installed == [signal.SIGTERM]
            loop.call_soon(signal.raise_signal, signal.SIGTERM)
            loop.run_until_complete(asyncio.sleep(0.05))
        finally:
            remove_signal_handlers(loop, installed)
            loop.close()

        assert token.cancelled is True
