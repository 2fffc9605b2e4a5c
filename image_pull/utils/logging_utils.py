"""
Logging helpers for the pull lifecycle.

Pullers report the same milestones for every image kind; keeping the
wording here keeps the output of ``tar`` and ``raw`` pulls consistent.
"""

import enum
import logging


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in human-readable format.

    Examples:
        >>> format_file_size(0)
        '0 B'
        >>> format_file_size(1536)
        '1.5 KB'
    """
    if size_bytes == 0:
        return "0 B"

    units = ["B", "KB", "MB", "GB", "TB"]
    size = float(size_bytes)
    unit = 0
    while size >= 1024 and unit < len(units) - 1:
        size /= 1024.0
        unit += 1

    return f"{size:.1f} {units[unit]}"


def describe_flags(flags: enum.IntFlag) -> str:
    """Return the enabled flags as a comma separated list, or "none"."""
    names = [flag.name.lower().replace("_", "-") for flag in type(flags) if flags & flag and flag.name]
    return ", ".join(names) or "none"


def log_pull_start(kind: str, url: str, flags: enum.IntFlag, verify: str) -> None:
    """
    Log the start of a pull with its effective settings.

    Args:
        kind: Image kind ("tar" or "raw")
        url: Source URL of the image
        flags: Kind-filtered pull flags
        verify: Verification mode
    """
    logging.info("Starting %s pull of %s", kind, url)
    logging.debug("Pull settings: flags=%s, verify=%s", describe_flags(flags), verify)


def log_pull_complete(kind: str, destination: str) -> None:
    """Log a successfully materialized image."""
    logging.info("Completed %s pull, image stored at %s", kind, destination)


def log_download(url: str, size_bytes: int, checksum: str) -> None:
    """
    Log a finished download with its size; the full digest goes to debug.

    Args:
        url: URL that was downloaded
        size_bytes: Number of bytes received
        checksum: SHA256 hex digest of the received bytes
    """
    logging.info("Downloaded %s (%s)", url, format_file_size(size_bytes))
    logging.debug("SHA256 of %s: %s", url, checksum)


def log_sidecar_missing(description: str) -> None:
    """Log an optional side-car file the server does not have."""
    logging.info("%s not available, proceeding without.", description)


__all__ = [
    "format_file_size",
    "describe_flags",
    "log_pull_start",
    "log_pull_complete",
    "log_download",
    "log_sidecar_missing",
]
