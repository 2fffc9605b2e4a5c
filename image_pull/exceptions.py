"""
Exception hierarchy for image pull operations.

Every error that can terminate an invocation carries an errno value which
doubles as the process exit code.
"""

import errno as errno_codes
from typing import Optional


class PullError(Exception):
    """Base class for all errors raised by image-pull."""

    default_errno = errno_codes.EIO

    def __init__(self, message: str, errno: Optional[int] = None) -> None:
        """
        Initialize the error.

        Args:
            message: Human readable description including the offending value
            errno: Positive errno value, defaults to the class default
        """
        super().__init__(message)
        self.errno = abs(errno) if errno else self.default_errno

    @property
    def exit_code(self) -> int:
        """Process exit status for this error."""
        return self.errno


class InvalidInputError(PullError):
    """Malformed URL, image name, option value or verb invocation."""

    default_errno = errno_codes.EINVAL


class AlreadyExistsError(PullError):
    """The destination image name is already taken and FORCE is not set."""

    default_errno = errno_codes.EEXIST


class ImageNotFoundError(PullError):
    """The image store has no image of the requested name."""

    default_errno = errno_codes.ENOENT


class StoreUnavailableError(PullError):
    """The image store could not be queried."""


class PullFailedError(PullError):
    """The puller could not be created, started or reported a failure."""


class VerificationError(PullError):
    """Checksum or signature verification of downloaded content failed."""

    default_errno = errno_codes.EBADMSG


__all__ = [
    "PullError",
    "InvalidInputError",
    "AlreadyExistsError",
    "ImageNotFoundError",
    "StoreUnavailableError",
    "PullFailedError",
    "VerificationError",
]
