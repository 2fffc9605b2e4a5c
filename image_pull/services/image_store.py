"""
Read-only lookup of images in the local image store.

Machine images live either as directory trees or as ``<name>.raw`` disk
files in one of a list of search directories; the first match wins.
"""

import logging
import os
import stat
from typing import List, Optional, Sequence

from ..exceptions import ImageNotFoundError, StoreUnavailableError
from ..models.image import Image, ImageType
from ..utils.constants import MACHINE_SEARCH_PATHS


class ImageStore:
    """Query existing images by name across the search directories."""

    def __init__(self, search_paths: Optional[Sequence[str]] = None, image_root: Optional[str] = None) -> None:
        """
        Initialize the image store.

        Args:
            search_paths: Directories to search, defaults to the machine image paths
            image_root: Image root of this invocation, searched first if not listed
        """
        paths: List[str] = list(search_paths) if search_paths is not None else list(MACHINE_SEARCH_PATHS)
        if image_root and image_root not in paths:
            paths.insert(0, image_root)
        self.search_paths = paths

    def find(self, name: str) -> Image:
        """
        Find an image by name.

        Args:
            name: Image name

        Returns:
            The first matching image

        Raises:
            ImageNotFoundError: If no search directory holds an image of that name
            StoreUnavailableError: If a candidate path could not be examined
        """
        for directory in self.search_paths:
            for path, image_type in (
                (os.path.join(directory, name), ImageType.DIRECTORY),
                (os.path.join(directory, f"{name}.raw"), ImageType.RAW),
            ):
                try:
                    st = os.stat(path)
                except (FileNotFoundError, NotADirectoryError):
                    continue
                except OSError as e:
                    raise StoreUnavailableError(
                        f"Failed to check whether image '{name}' exists: {e.strerror or e}", errno=e.errno
                    ) from e

                if image_type is ImageType.DIRECTORY and not stat.S_ISDIR(st.st_mode):
                    continue
                if image_type is ImageType.RAW and not stat.S_ISREG(st.st_mode):
                    continue

                logging.debug("Found image '%s' at %s", name, path)
                return Image(name=name, path=os.path.abspath(path), type=image_type)

        raise ImageNotFoundError(f"No image '{name}' found.")


__all__ = ["ImageStore"]
