"""
Validation utilities for image-pull.

This package contains validation functions organized by domain:
- url: Source URL validation and sibling URL derivation
- name: Local image name validation and suffix stripping
"""

from .name import (
    empty_or_dash_to_none,
    image_name_is_valid,
    strip_all_suffixes,
    strip_first_suffix,
)
from .url import http_url_is_valid, url_last_component, url_sibling

__all__ = [
    "empty_or_dash_to_none",
    "image_name_is_valid",
    "strip_all_suffixes",
    "strip_first_suffix",
    "http_url_is_valid",
    "url_last_component",
    "url_sibling",
]
