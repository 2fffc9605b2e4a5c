"""
Pydantic models for image-pull.

This package contains the models used in the application:
- base: Shared base model configuration
- policy: Pull flags, verification modes and the pull policy
- image: Image kinds and image store records
- context: Context handed from the CLI to verb handlers
"""

from .base import ImagePullBaseModel
from .context import PullContext
from .image import DownloadedFile, Image, ImageKind, ImageType
from .policy import PullFlags, PullPolicy, VerifyMode

__all__ = [
    "ImagePullBaseModel",
    "PullContext",
    "DownloadedFile",
    "Image",
    "ImageKind",
    "ImageType",
    "PullFlags",
    "PullPolicy",
    "VerifyMode",
]
