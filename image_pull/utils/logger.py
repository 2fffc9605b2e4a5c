"""
Logging configuration and utilities for the image-pull package.

This module provides logging setup and a wrapping formatter so that long
URLs and paths in pull progress messages stay readable on a terminal.
"""

import logging
from typing import Optional

# ============================================================================
# Logging Configuration Constants
# ============================================================================

# Default width for log message wrapping
DEFAULT_LOG_WIDTH = 120

# Format shared by all handlers
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

# ============================================================================
# Custom Formatters
# ============================================================================


class WrappingFormatter(logging.Formatter):
    """
    Formatter that wraps long log messages at word boundaries.

    Words longer than the width (typically URLs) are kept on a line of
    their own rather than being split.
    """

    def __init__(
        self, fmt: Optional[str] = None, datefmt: Optional[str] = None, width: int = DEFAULT_LOG_WIDTH
    ) -> None:
        """
        Initialize the wrapping formatter.

        Args:
            fmt: Format string for log messages
            datefmt: Date format string
            width: Maximum width for log message wrapping
        """
        super().__init__(fmt, datefmt)
        self.width = width

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the log record with line wrapping.

        Args:
            record: Log record to format

        Returns:
            Formatted log message with wrapping
        """
        formatted = super().format(record)

        if len(formatted) <= self.width:
            return formatted

        lines = []
        current_line = ""
        for word in formatted.split():
            if len(current_line + " " + word) <= self.width:
                current_line += (" " + word) if current_line else word
            else:
                if current_line:
                    lines.append(current_line)
                current_line = word

        if current_line:
            lines.append(current_line)

        return "\n".join(lines)


# ============================================================================
# Logging Setup Functions
# ============================================================================


def _level_for_verbosity(verbosity: int) -> int:
    """Map a -d count to a logging level."""
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def setup_logging(verbosity: int = 0, use_wrapping: bool = False) -> None:
    """
    Setup logging configuration with multi-level verbosity.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG, 3+=DEBUG with HTTP logs)
        use_wrapping: If True, use wrapping formatter for long messages

    Verbosity Levels:
        0 (default): WARNING - errors and the abort notice only
        1 (-d):      INFO - pull start, side-car and completion messages
        2 (-dd):     DEBUG - temporary paths, checksums, store lookups
        3+ (-ddd):   DEBUG - additionally httpx/httpcore request logs

    Example:
        >>> from image_pull.utils import setup_logging
        >>> setup_logging(1)  # INFO level
    """
    level = _level_for_verbosity(verbosity)

    if use_wrapping:
        handler = logging.StreamHandler()
        handler.setFormatter(WrappingFormatter(fmt=LOG_FORMAT, width=DEFAULT_LOG_WIDTH))

        root_logger = logging.getLogger()
        root_logger.handlers.clear()
        root_logger.addHandler(handler)
        root_logger.setLevel(level)
    else:
        logging.basicConfig(level=level, format=LOG_FORMAT)

    # httpx logs every request at INFO, which drowns out pull progress
    http_level = logging.DEBUG if verbosity >= 3 else logging.WARNING
    logging.getLogger("httpx").setLevel(http_level)
    logging.getLogger("httpcore").setLevel(http_level)


__all__ = [
    "WrappingFormatter",
    "setup_logging",
]
