"""
Pull orchestrator service.

This module drives a single pull to completion: it resolves the local name,
runs one puller on a private event loop, watches for cancellation and turns
the terminal outcome into a process exit status.
"""

import asyncio
import enum
import logging
from typing import Dict, List, Mapping, Optional

from ..exceptions import PullError, PullFailedError
from ..models.image import ImageKind
from ..models.policy import PullPolicy
from ..protocols.image_store_protocol import ImageStoreProtocol
from ..protocols.puller_protocol import PullerFactory, PullerProtocol
from ..pull import default_puller_factories
from ..utils.constants import EXIT_USER_INTERRUPT
from ..utils.error_handling import errno_from_exception
from .cancellation import CancellationToken, install_signal_handlers, remove_signal_handlers
from .image_store import ImageStore
from .name_resolver import NameResolver


class PullState(str, enum.Enum):
    """Lifecycle of a PullOrchestrator."""

    IDLE = "idle"
    NAME_RESOLVING = "name-resolving"
    TASK_STARTING = "task-starting"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PullOutcome:
    """
    One-shot terminal value of a pull.

    The value is set either by the puller's completion or by cancellation,
    whichever the event loop observes first; later events are ignored. The
    puller may complete at most once, which is asserted here.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        """
        Initialize the outcome.

        Args:
            loop: Loop the underlying future belongs to
        """
        self.future: "asyncio.Future[int]" = loop.create_future()
        self.completed = False
        self.interrupted = False

    @property
    def done(self) -> bool:
        """Whether the terminal value has been decided."""
        return self.future.done()

    def complete(self, code: int) -> bool:
        """
        Record the puller's completion.

        Args:
            code: 0 on success, a negative (or positive) errno on failure

        Returns:
            True if this completion decided the outcome

        Raises:
            RuntimeError: If the puller reports completion a second time
        """
        if self.completed:
            raise RuntimeError("Puller reported completion more than once")
        self.completed = True

        if self.future.done():
            return False
        self.future.set_result(abs(code))
        return True

    def interrupt(self) -> bool:
        """
        Record cancellation.

        Returns:
            True if this cancellation decided the outcome
        """
        if self.future.done():
            return False
        self.interrupted = True
        self.future.set_result(EXIT_USER_INTERRUPT)
        return True


class PullOrchestrator:
    """
    Run one pull of one image kind to completion.

    Instances are single-use: one call to pull() per orchestrator, mirroring
    one pull per process invocation.
    """

    def __init__(
        self,
        policy: PullPolicy,
        *,
        store: Optional[ImageStoreProtocol] = None,
        puller_factories: Optional[Mapping[ImageKind, PullerFactory]] = None,
        cancellation: Optional[CancellationToken] = None,
        handle_signals: bool = True,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            policy: Resolved pull policy
            store: Image store for collision checks, searched from the image root by default
            puller_factories: Puller factory per image kind, the httpx pullers by default
            cancellation: Token that interrupts the pull, a fresh one by default
            handle_signals: Feed SIGTERM/SIGINT into the cancellation token
        """
        self.policy = policy
        self.store = store if store is not None else ImageStore(image_root=policy.image_root)
        self.puller_factories: Dict[ImageKind, PullerFactory] = (
            dict(puller_factories) if puller_factories is not None else default_puller_factories()
        )
        self.cancellation = cancellation if cancellation is not None else CancellationToken()
        self.handle_signals = handle_signals
        self.state = PullState.IDLE
        self.outcome: Optional[PullOutcome] = None

    def pull(self, kind: ImageKind, url: str, local: Optional[str] = None) -> int:
        """
        Pull an image and return the exit status.

        Args:
            kind: Image kind
            url: Source URL
            local: Local name; None derives it from the URL, "" or "-" store
                the image by URL identity only

        Returns:
            0 on success, the puller's error magnitude on failure, or
            EXIT_USER_INTERRUPT if the pull was cancelled

        Raises:
            InvalidInputError: If the URL or local name is not valid
            AlreadyExistsError: If the local name is taken and force is not set
            StoreUnavailableError: If the collision check failed
            PullFailedError: If the puller could not be created or started
        """
        if self.state is not PullState.IDLE:
            raise RuntimeError("PullOrchestrator.pull() may only be called once")

        self.state = PullState.NAME_RESOLVING
        try:
            local = NameResolver(self.store).resolve(kind, url, local, force=self.policy.force)
        except PullError:
            self.state = PullState.COMPLETED
            raise

        if local:
            logging.info("Pulling '%s', saving as '%s'.", url, local)
        else:
            logging.info("Pulling '%s'.", url)

        self.state = PullState.TASK_STARTING
        loop = asyncio.new_event_loop()
        try:
            code = self._run(loop, kind, url, local)
        finally:
            _close_loop(loop)

        logging.info("Exiting.")
        return code

    def _run(self, loop: asyncio.AbstractEventLoop, kind: ImageKind, url: str, local: Optional[str]) -> int:
        outcome = PullOutcome(loop)
        self.outcome = outcome

        def on_interrupt() -> None:
            if outcome.interrupt():
                logging.warning("Transfer aborted.")
                self.state = PullState.CANCELLED

        def on_finished(puller: PullerProtocol, error: int) -> None:
            if outcome.complete(error):
                if error == 0:
                    logging.info("Operation completed successfully.")
                self.state = PullState.COMPLETED

        self.cancellation.add_callback(on_interrupt)
        signals: List[int] = install_signal_handlers(loop, self.cancellation) if self.handle_signals else []
        puller: Optional[PullerProtocol] = None
        try:
            # A token cancelled before the pull settles the outcome on subscription
            if not outcome.done:
                puller = self._create_puller(kind, loop, on_finished)
                try:
                    puller.start(url, local, self.policy.flags_for(kind), self.policy.verify)
                except (PullError, OSError) as e:
                    raise PullFailedError(f"Failed to pull image: {e}", errno=errno_from_exception(e)) from e

            if not outcome.done:
                self.state = PullState.RUNNING
            return loop.run_until_complete(outcome.future)
        except PullError:
            self.state = PullState.COMPLETED
            raise
        finally:
            self.cancellation.remove_callback(on_interrupt)
            remove_signal_handlers(loop, signals)
            if puller is not None:
                loop.run_until_complete(puller.aclose())

    def _create_puller(self, kind: ImageKind, loop: asyncio.AbstractEventLoop, on_finished) -> PullerProtocol:
        factory = self.puller_factories.get(kind)
        if factory is None:
            raise PullFailedError(f"No puller available for {kind.value} images")

        try:
            return factory(loop, self.policy.image_root, on_finished)
        except (PullError, OSError) as e:
            raise PullFailedError(f"Failed to allocate puller: {e}", errno=errno_from_exception(e)) from e


def _close_loop(loop: asyncio.AbstractEventLoop) -> None:
    """Cancel leftover tasks, shut down generators and executor, close the loop."""
    try:
        pending = asyncio.all_tasks(loop)
        for task in pending:
            task.cancel()
        if pending:
            results = loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
            for result in results:
                if isinstance(result, Exception):
                    logging.debug("Task failed during shutdown: %s", result)
        loop.run_until_complete(loop.shutdown_asyncgens())
        loop.run_until_complete(loop.shutdown_default_executor())
    finally:
        loop.close()


__all__ = ["PullOrchestrator", "PullOutcome", "PullState"]
