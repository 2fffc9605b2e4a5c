"""
HTTP pullers for tar and raw images.

This package contains:
- base: Download, side-car and verification logic shared by all pullers
- tar: Tarball puller producing directory images
- raw: Raw disk image puller producing ``.raw`` files
- verify: SHA256SUMS and GnuPG signature checks
"""

from functools import partial
from typing import Dict

from ..models.image import ImageKind
from ..protocols.puller_protocol import PullerFactory
from ..utils.constants import DEFAULT_KEYRING
from .base import BasePuller
from .raw import RawPuller
from .tar import TarPuller
from .verify import parse_checksums, verify_checksum, verify_signature


def default_puller_factories(keyring: str = DEFAULT_KEYRING) -> Dict[ImageKind, PullerFactory]:
    """
    Puller factories for every image kind.

    Args:
        keyring: Keyring used for signature verification

    Returns:
        Mapping of image kind to a factory taking (loop, image_root, on_finished)
    """
    return {
        ImageKind.TAR: partial(TarPuller, keyring=keyring),
        ImageKind.RAW: partial(RawPuller, keyring=keyring),
    }


__all__ = [
    "BasePuller",
    "RawPuller",
    "TarPuller",
    "default_puller_factories",
    "parse_checksums",
    "verify_checksum",
    "verify_signature",
]
