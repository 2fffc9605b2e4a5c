"""
Error handling utilities for standardized error logging and errno mapping.

Pullers report their outcome as a signed errno value; this module turns
exceptions raised while pulling into those values and logs them in a
consistent way.
"""

import errno
import logging
import tarfile
import traceback

import httpx

from ..exceptions import PullError


def errno_from_exception(error: BaseException) -> int:
    """
    Map an exception raised during a pull to a positive errno value.

    Args:
        error: The exception to map

    Returns:
        Positive errno value, EIO when nothing more specific applies
    """
    if isinstance(error, PullError):
        return error.errno
    if isinstance(error, httpx.TimeoutException):
        return errno.ETIMEDOUT
    if isinstance(error, httpx.ConnectError):
        return errno.ECONNREFUSED
    if isinstance(error, httpx.HTTPStatusError):
        if error.response.status_code == 404:
            return errno.ENOENT
        return errno.EIO
    if isinstance(error, httpx.HTTPError):
        return errno.EIO
    if isinstance(error, tarfile.TarError):
        return errno.EBADMSG
    if isinstance(error, OSError) and error.errno:
        return error.errno
    return errno.EIO


def handle_http_error(error: httpx.HTTPError, operation: str, *, log_traceback: bool = True) -> None:
    """
    Handle HTTP errors with standardized logging.

    Args:
        error: The HTTP error to handle
        operation: Description of the operation that failed
        log_traceback: Whether to log the full traceback
    """
    if isinstance(error, httpx.HTTPStatusError):
        status = error.response.status_code
        if status in (401, 403):
            logging.error("Access denied during %s (HTTP %d): %s", operation, status, error.request.url)
        elif status == 404:
            logging.error("Resource not found during %s: %s", operation, error.request.url)
        elif status >= 500:
            logging.error("Server error during %s: %s", operation, error)
        else:
            logging.error("HTTP error during %s: %s", operation, error)
    elif isinstance(error, httpx.TimeoutException):
        logging.error("Timeout during %s: %s", operation, error)
    else:
        logging.error("HTTP error during %s: %s", operation, error)

    if log_traceback:
        logging.debug("Traceback: %s", traceback.format_exc())


def handle_generic_error(error: BaseException, operation: str, *, log_traceback: bool = True) -> None:
    """
    Handle non-HTTP errors with standardized logging.

    Args:
        error: The exception to handle
        operation: Description of the operation that failed
        log_traceback: Whether to log the full traceback
    """
    if isinstance(error, PullError):
        logging.error("%s failed: %s", operation.capitalize(), error)
        log_traceback = False
    else:
        logging.error("Unexpected error during %s: %s", operation, error)

    if log_traceback:
        logging.debug("Traceback: %s", traceback.format_exc())


def handle_pull_error(error: BaseException, operation: str) -> int:
    """
    Log an exception raised while pulling and return the matching errno.

    Args:
        error: The exception raised by the pull
        operation: Description of the operation that failed

    Returns:
        Positive errno value describing the failure
    """
    if isinstance(error, httpx.HTTPError):
        handle_http_error(error, operation)
    else:
        handle_generic_error(error, operation)
    return errno_from_exception(error)


__all__ = [
    "errno_from_exception",
    "handle_http_error",
    "handle_generic_error",
    "handle_pull_error",
]
