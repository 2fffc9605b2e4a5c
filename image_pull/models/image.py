"""Image kind and image store models."""

import enum
from typing import List

from pydantic import Field

from .base import ImagePullBaseModel
from .policy import PullFlags
from ..utils.constants import RAW_SUFFIXES, TAR_SUFFIXES
from ..utils.validation.name import strip_all_suffixes, strip_first_suffix


class ImageKind(str, enum.Enum):
    """Format of a pulled image."""

    TAR = "tar"
    RAW = "raw"

    @property
    def flags_mask(self) -> PullFlags:
        """Flags pullers of this kind act on."""
        if self is ImageKind.TAR:
            return PullFlags.FORCE | PullFlags.SETTINGS
        return (
            PullFlags.FORCE
            | PullFlags.SETTINGS
            | PullFlags.ROOTHASH
            | PullFlags.ROOTHASH_SIGNATURE
            | PullFlags.VERITY
        )

    @property
    def suffixes(self) -> List[str]:
        """File name suffixes recognized for this kind."""
        return TAR_SUFFIXES if self is ImageKind.TAR else RAW_SUFFIXES

    def strip_suffixes(self, name: str) -> str:
        """
        Strip compression and format suffixes from a file name.

        Tar images lose the first matching suffix; raw images lose suffixes
        repeatedly, so ``disk.raw.xz`` becomes ``disk``.
        """
        if self is ImageKind.TAR:
            return strip_first_suffix(name, TAR_SUFFIXES)
        return strip_all_suffixes(name, RAW_SUFFIXES)


class ImageType(str, enum.Enum):
    """On-disk representation of an image in the store."""

    DIRECTORY = "directory"
    RAW = "raw"


class Image(ImagePullBaseModel):
    """
    An image found in the local image store.

    Attributes:
        name: Image name
        path: Absolute path of the image directory or file
        type: Whether the image is a directory tree or a raw disk file
    """

    name: str
    path: str
    type: ImageType


class DownloadedFile(ImagePullBaseModel):
    """
    A file fetched by a puller into a temporary location.

    Attributes:
        url: URL the file was fetched from
        filename: Final path component of the URL, as listed in SHA256SUMS
        path: Temporary file holding the content
        sha256: Hex digest of the content
        size: Content size in bytes
    """

    url: str
    filename: str
    path: str
    sha256: str
    size: int = Field(ge=0)


__all__ = ["ImageKind", "ImageType", "Image", "DownloadedFile"]
