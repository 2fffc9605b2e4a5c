"""
Image store protocol for type safety.
"""

from typing import Protocol

from ..models.image import Image


class ImageStoreProtocol(Protocol):
    """Read-only view of the local image store."""

    def find(self, name: str) -> Image:
        """
        Look up an image by name.

        Args:
            name: Image name

        Returns:
            The image

        Raises:
            ImageNotFoundError: If no image of that name exists
            StoreUnavailableError: If the store could not be queried
        """
        ...


__all__ = ["ImageStoreProtocol"]
