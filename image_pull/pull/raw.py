"""Puller for raw disk images, optionally compressed."""

import bz2
import gzip
import logging
import lzma
import os
import shutil
import tempfile
from pathlib import Path
from typing import BinaryIO, Callable, Dict, Optional

from ..models.image import DownloadedFile, ImageKind
from ..utils.constants import DOWNLOAD_CHUNK_SIZE, TEMP_FILE_PREFIX
from .base import BasePuller

XZ_MAGIC = b"\xfd7zXZ\x00"
GZIP_MAGIC = b"\x1f\x8b"
BZIP2_MAGIC = b"BZh"


def detect_compression(path: Path) -> Optional[str]:
    """
    Detect the compression of a file from its magic bytes.

    Returns:
        "xz", "gzip", "bzip2" or None for uncompressed content
    """
    with open(path, "rb") as f:
        header = f.read(len(XZ_MAGIC))

    if header.startswith(XZ_MAGIC):
        return "xz"
    if header.startswith(GZIP_MAGIC):
        return "gzip"
    if header.startswith(BZIP2_MAGIC):
        return "bzip2"
    return None


OPENERS: Dict[str, Callable[[Path], BinaryIO]] = {
    "xz": lambda p: lzma.open(p, "rb"),
    "gzip": lambda p: gzip.open(p, "rb"),
    "bzip2": lambda p: bz2.open(p, "rb"),
}


def decompress_file(source: Path, target: Path) -> Optional[str]:
    """
    Write the decompressed content of ``source`` to ``target``.

    Uncompressed input is copied as is.

    Returns:
        The detected compression, or None
    """
    compression = detect_compression(source)
    opener = OPENERS.get(compression) if compression else None

    with open(target, "wb") as out:
        if opener is None:
            with open(source, "rb") as f:
                shutil.copyfileobj(f, out, DOWNLOAD_CHUNK_SIZE)
        else:
            with opener(source) as f:
                shutil.copyfileobj(f, out, DOWNLOAD_CHUNK_SIZE)

    return compression


class RawPuller(BasePuller):
    """Download a raw disk image and store it as ``<name>.raw``."""

    kind = ImageKind.RAW

    async def materialize(self, image: DownloadedFile, name: str, *, force: bool) -> Path:
        destination = self.image_root / f"{name}.raw"
        self.check_destination(destination, name, force=force)

        fd, temp_name = tempfile.mkstemp(prefix=f"{TEMP_FILE_PREFIX}{name}.raw", dir=self.image_root)
        os.close(fd)
        unpacked = self.track(Path(temp_name))

        compression = await self.run_blocking(decompress_file, Path(image.path), unpacked)
        if compression:
            logging.info("Decompressed %s (%s)", image.filename, compression)

        self.discard(Path(image.path))
        self.install(unpacked, destination, force=force)
        return destination


__all__ = ["RawPuller", "decompress_file", "detect_compression"]
