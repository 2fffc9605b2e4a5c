"""
Protocols for type safety.

This package provides protocols that define the interfaces of the
collaborators the pull orchestrator depends on.
"""

from .image_store_protocol import ImageStoreProtocol
from .puller_protocol import FinishedCallback, PullerFactory, PullerProtocol

__all__ = ["ImageStoreProtocol", "PullerProtocol", "FinishedCallback", "PullerFactory"]
