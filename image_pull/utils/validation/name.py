"""
Local image name validation utilities.

Local image names follow host name syntax so they can double as machine
names: dot-separated labels of ASCII letters, digits and inner hyphens.
"""

import re
from typing import Iterable, Optional

from ..constants import MAX_IMAGE_NAME_LENGTH, NO_LOCAL_NAME_PLACEHOLDERS

_LABEL_RE = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?$")


def empty_or_dash_to_none(name: Optional[str]) -> Optional[str]:
    """Treat "" and "-" as "no local name"."""
    if name is None or name in NO_LOCAL_NAME_PLACEHOLDERS:
        return None
    return name


def image_name_is_valid(name: str) -> bool:
    """
    Check a local image name against host name rules.

    Args:
        name: Candidate image name

    Returns:
        True if the name is acceptable

    Examples:
        >>> image_name_is_valid("fedora-40")
        True
        >>> image_name_is_valid("-fedora")
        False
        >>> image_name_is_valid("fedora.")
        False
    """
    if not name or len(name) > MAX_IMAGE_NAME_LENGTH:
        return False

    return all(_LABEL_RE.match(label) for label in name.split("."))


def strip_first_suffix(name: str, suffixes: Iterable[str]) -> str:
    """
    Strip the first matching suffix from ``name``.

    Args:
        name: File name
        suffixes: Candidate suffixes, tried in order

    Returns:
        Name without the suffix (may be empty), or the unchanged name
    """
    for suffix in suffixes:
        if name.endswith(suffix):
            return name[: -len(suffix)]
    return name


def strip_all_suffixes(name: str, suffixes: Iterable[str]) -> str:
    """
    Strip matching suffixes from ``name`` until none matches.

    Example:
        >>> strip_all_suffixes("disk.raw.xz", [".xz", ".raw"])
        'disk'
    """
    suffixes = list(suffixes)
    while True:
        stripped = strip_first_suffix(name, suffixes)
        if stripped == name or not stripped:
            return stripped
        name = stripped


__all__ = [
    "empty_or_dash_to_none",
    "image_name_is_valid",
    "strip_first_suffix",
    "strip_all_suffixes",
]
