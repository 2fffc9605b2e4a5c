"""
Resolution of the local name a pulled image is stored under.
"""

import logging
from typing import Optional

from ..exceptions import AlreadyExistsError, ImageNotFoundError, InvalidInputError
from ..models.image import ImageKind
from ..protocols.image_store_protocol import ImageStoreProtocol
from ..utils.validation import (
    empty_or_dash_to_none,
    http_url_is_valid,
    image_name_is_valid,
    url_last_component,
)


class NameResolver:
    """
    Derive, validate and check the destination name of a pull.

    The only side effect is a read-only query of the image store.
    """

    def __init__(self, store: ImageStoreProtocol) -> None:
        """
        Initialize the resolver.

        Args:
            store: Image store used for collision detection
        """
        self.store = store

    def resolve(self, kind: ImageKind, url: str, local: Optional[str] = None, *, force: bool = False) -> Optional[str]:
        """
        Resolve the local image name for a pull.

        Args:
            kind: Image kind, selects the suffixes stripped from the name
            url: Source URL
            local: Caller supplied name; None derives it from the URL, "" or "-"
                mean the image is stored by URL identity only
            force: Skip the collision check

        Returns:
            The local image name, or None for "no local name"

        Raises:
            InvalidInputError: If the URL or the resulting name is not valid
            AlreadyExistsError: If an image of that name exists and force is not set
            StoreUnavailableError: If the collision check itself failed
        """
        if not http_url_is_valid(url):
            raise InvalidInputError(f"URL '{url}' is not valid.")

        if local is None:
            local = url_last_component(url)

        local = empty_or_dash_to_none(local)
        if local is None:
            return None

        name = kind.strip_suffixes(local)
        if not image_name_is_valid(name):
            raise InvalidInputError(f"Local image name '{name}' is not valid.")

        if not force:
            self._check_collision(name)

        return name

    def _check_collision(self, name: str) -> None:
        try:
            image = self.store.find(name)
        except ImageNotFoundError:
            logging.debug("No existing image named '%s'", name)
            return

        logging.debug("Found existing image at %s", image.path)
        raise AlreadyExistsError(f"Image '{name}' already exists.")


__all__ = ["NameResolver"]
