"""
Service layer for image pull operations.

This package provides the components that decide what to pull and drive
a pull to completion: name and policy resolution, the image store lookup,
cancellation and the pull orchestrator.
"""

from .cancellation import CancellationToken, install_signal_handlers, remove_signal_handlers
from .image_store import ImageStore
from .name_resolver import NameResolver
from .orchestrator import PullOrchestrator, PullOutcome, PullState
from .policy_resolver import PolicyResolver, parse_boolean, parse_verify_mode

__all__ = [
    "CancellationToken",
    "install_signal_handlers",
    "remove_signal_handlers",
    "ImageStore",
    "NameResolver",
    "PullOrchestrator",
    "PullOutcome",
    "PullState",
    "PolicyResolver",
    "parse_boolean",
    "parse_verify_mode",
]
