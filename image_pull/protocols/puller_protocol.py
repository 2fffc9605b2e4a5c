"""
Puller protocol for type safety.

This module defines the interface the orchestrator uses to drive a puller
service for one image kind.
"""

import asyncio
from typing import Callable, Optional, Protocol

from ..models.policy import PullFlags, VerifyMode


class PullerProtocol(Protocol):
    """
    Protocol defining the interface of a puller service.

    A puller is bound to one event loop. After ``start`` it performs its
    work as loop tasks and reports the outcome exactly once through the
    completion callback it was constructed with.
    """

    def start(self, url: str, local: Optional[str], flags: PullFlags, verify: VerifyMode) -> None:
        """
        Begin pulling asynchronously.

        Args:
            url: Source URL of the image
            local: Local image name, or None to store by URL identity only
            flags: Flags already filtered by the puller's kind mask
            verify: Verification mode

        Raises:
            PullError: If the pull cannot be started
        """
        ...

    async def aclose(self) -> None:
        """Cancel in-flight work and release all resources. Idempotent."""
        ...


# Completion callback: (puller, code) where code is 0 or a negative errno
FinishedCallback = Callable[[PullerProtocol, int], None]

# Constructs a puller for one kind: (loop, image_root, on_finished)
PullerFactory = Callable[[asyncio.AbstractEventLoop, str, FinishedCallback], PullerProtocol]


__all__ = ["PullerProtocol", "FinishedCallback", "PullerFactory"]
