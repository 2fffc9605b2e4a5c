"""
Utility modules for image pull operations.
"""

from .logger import setup_logging, WrappingFormatter
from .session import create_async_session_with_retry
from .config_manager import ConfigManager
from .error_handling import errno_from_exception, handle_pull_error
from .validation import (
    empty_or_dash_to_none,
    http_url_is_valid,
    image_name_is_valid,
    url_last_component,
    url_sibling,
)

from . import constants
from . import logging_utils

__all__ = [
    "setup_logging",
    "WrappingFormatter",
    "create_async_session_with_retry",
    "ConfigManager",
    "errno_from_exception",
    "handle_pull_error",
    "empty_or_dash_to_none",
    "http_url_is_valid",
    "image_name_is_valid",
    "url_last_component",
    "url_sibling",
    "constants",
    "logging_utils",
]
