"""
image-pull - Download container and virtual machine images over HTTP.

This package pulls tarball and raw disk images into the local machine image
store, optionally verifying them against signed SHA256SUMS files and
fetching their settings, root hash and verity side-car files.
"""

from ._version import __version__

# Import main classes and functions for easy access
from .exceptions import PullError
from .models import ImageKind, PullFlags, PullPolicy, VerifyMode
from .pull import RawPuller, TarPuller, default_puller_factories
from .services import CancellationToken, ImageStore, PolicyResolver, PullOrchestrator
from .utils import setup_logging, WrappingFormatter
from .cli import main as cli_main, cli as cli_command

__all__ = [
    "__version__",
    "PullError",
    "ImageKind",
    "PullFlags",
    "PullPolicy",
    "VerifyMode",
    "RawPuller",
    "TarPuller",
    "default_puller_factories",
    "CancellationToken",
    "ImageStore",
    "PolicyResolver",
    "PullOrchestrator",
    "setup_logging",
    "WrappingFormatter",
    "cli_main",
    "cli_command",
]
