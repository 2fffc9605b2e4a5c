"""Puller for container file system trees shipped as tarballs."""

import logging
import tarfile
import tempfile
from pathlib import Path

from ..models.image import DownloadedFile, ImageKind
from ..utils.constants import TEMP_FILE_PREFIX
from .base import BasePuller


def extract_tarball(archive: Path, target: Path) -> None:
    """
    Unpack a (possibly compressed) tarball into ``target``.

    The "tar" extraction filter rejects absolute paths, links escaping the
    target and device nodes.
    """
    with tarfile.open(archive, "r:*") as tar:
        tar.extractall(target, filter="tar")


class TarPuller(BasePuller):
    """Download a tarball and unpack it as a directory image."""

    kind = ImageKind.TAR

    async def materialize(self, image: DownloadedFile, name: str, *, force: bool) -> Path:
        destination = self.image_root / name
        self.check_destination(destination, name, force=force)

        tree = self.track(Path(tempfile.mkdtemp(prefix=f"{TEMP_FILE_PREFIX}{name}", dir=self.image_root)))
        logging.info("Unpacking %s", image.filename)
        await self.run_blocking(extract_tarball, Path(image.path), tree)
        tree.chmod(0o755)

        self.discard(Path(image.path))
        self.install(tree, destination, force=force)
        return destination


__all__ = ["TarPuller", "extract_tarball"]
