"""
Shared machinery for image pullers.

A puller streams one image over HTTP into the image root, fetches the
side-car files enabled by its flags, verifies everything it downloaded and
finally moves the result into place. Subclasses only decide how the
downloaded image is materialized.
"""

import asyncio
import errno
import hashlib
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx

from ..exceptions import AlreadyExistsError, InvalidInputError, PullFailedError
from ..models.image import DownloadedFile, ImageKind
from ..models.policy import PullFlags, VerifyMode
from ..protocols.puller_protocol import FinishedCallback
from ..utils.constants import (
    CHECKSUM_FILENAME,
    DEFAULT_KEYRING,
    DOWNLOAD_CHUNK_SIZE,
    ROOTHASH_SIGNATURE_SUFFIX,
    ROOTHASH_SUFFIX,
    SETTINGS_SUFFIX,
    SIGNATURE_FILENAME,
    TEMP_FILE_PREFIX,
    VERITY_SUFFIX,
)
from ..utils.error_handling import handle_pull_error
from ..utils.logging_utils import log_download, log_pull_complete, log_pull_start, log_sidecar_missing
from ..utils.session import create_async_session_with_retry
from ..utils.validation import http_url_is_valid, image_name_is_valid, url_last_component, url_sibling
from .verify import parse_checksums, verify_checksum, verify_signature

# Side-car files in download order: (flag, suffix, description)
SIDECARS: List[Tuple[PullFlags, str, str]] = [
    (PullFlags.SETTINGS, SETTINGS_SUFFIX, "Settings file"),
    (PullFlags.ROOTHASH, ROOTHASH_SUFFIX, "Root hash file"),
    (PullFlags.ROOTHASH_SIGNATURE, ROOTHASH_SIGNATURE_SUFFIX, "Root hash signature file"),
    (PullFlags.VERITY, VERITY_SUFFIX, "Verity data file"),
]


def remove_path(path: Path) -> None:
    """Remove a file or directory tree if it exists."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink(missing_ok=True)


class BasePuller:
    """
    Base class for pullers of one image kind.

    Subclasses set ``kind`` and implement ``materialize()``.
    """

    kind: ImageKind

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        image_root: str,
        on_finished: FinishedCallback,
        *,
        keyring: str = DEFAULT_KEYRING,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """
        Initialize the puller.

        Args:
            loop: Event loop the pull runs on
            image_root: Directory images are written to
            on_finished: Called exactly once with (puller, 0 or -errno)
            keyring: Keyring for signature verification
            client: HTTP client to use; one is created (and closed) if not given
        """
        self.loop = loop
        self.image_root = Path(image_root)
        self.on_finished = on_finished
        self.keyring = keyring
        self._client = client
        self._owns_client = client is None
        self._task: Optional["asyncio.Task[None]"] = None
        self._finished = False
        self._closed = False
        self._temp_paths: List[Path] = []
        self._blocking: List["asyncio.Future[Any]"] = []

    # ========================================================================
    # Lifecycle
    # ========================================================================

    def start(self, url: str, local: Optional[str], flags: PullFlags, verify: VerifyMode) -> None:
        """
        Begin pulling ``url`` as a task on the puller's loop.

        Raises:
            InvalidInputError: If the URL or local name is not valid
            PullFailedError: If the puller is closed or already started
        """
        if self._closed:
            raise PullFailedError("Puller is closed.", errno=errno.EBADF)
        if self._task is not None:
            raise PullFailedError("Pull already in progress.", errno=errno.EBUSY)
        if not http_url_is_valid(url):
            raise InvalidInputError(f"URL '{url}' is not valid.")
        if local is not None and not image_name_is_valid(local):
            raise InvalidInputError(f"Local image name '{local}' is not valid.")

        self._task = self.loop.create_task(self._run(url, local, flags & self.kind.flags_mask, verify))

    async def aclose(self) -> None:
        """Cancel the pull if still running and release all resources."""
        if self._closed:
            return
        self._closed = True

        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                logging.debug("Pull task cancelled during teardown")

        # Executor threads outlive task cancellation; wait for them before removing their output
        if self._blocking:
            await asyncio.gather(*self._blocking, return_exceptions=True)
            self._blocking.clear()

        if self._client is not None and self._owns_client:
            await self._client.aclose()

        for path in reversed(self._temp_paths):
            remove_path(path)
        self._temp_paths.clear()

    async def _run(self, url: str, local: Optional[str], flags: PullFlags, verify: VerifyMode) -> None:
        log_pull_start(self.kind.value, url, flags, verify.value)
        try:
            destination = await self.pull(url, local, flags, verify)
        except asyncio.CancelledError:
            logging.debug("Pull of %s cancelled", url)
            raise
        except Exception as e:  # pylint: disable=broad-except  # reported through on_finished
            code = -handle_pull_error(e, f"pull of {url}")
        else:
            code = 0
            log_pull_complete(self.kind.value, str(destination))

        self._finish(code)

    def _finish(self, code: int) -> None:
        if self._finished:
            raise RuntimeError("Pull completion already reported")
        self._finished = True
        self.on_finished(self, code)

    # ========================================================================
    # Pull Steps
    # ========================================================================

    async def pull(self, url: str, local: Optional[str], flags: PullFlags, verify: VerifyMode) -> Path:
        """
        Download, verify and materialize one image with its side-cars.

        Returns:
            Path of the materialized image
        """
        self.image_root.mkdir(parents=True, exist_ok=True)
        client = self._get_client()

        checksums: Optional[Dict[str, str]] = None
        if verify is not VerifyMode.NONE:
            checksums = await self.fetch_checksums(client, url, verify)

        image = await self.download(client, url)

        sidecars: Dict[str, DownloadedFile] = {}
        base = self.kind.strip_suffixes(url_last_component(url))
        for flag, suffix, description in SIDECARS:
            if not flags & flag:
                continue
            sidecar = await self.download(client, url_sibling(url, base + suffix), required=False)
            if sidecar is None:
                log_sidecar_missing(description)
                continue
            sidecars[suffix] = sidecar

        if checksums is not None:
            for downloaded in [image, *sidecars.values()]:
                verify_checksum(checksums, downloaded.filename, downloaded.sha256)

        name = local or self.anonymous_name(url)
        force = bool(flags & PullFlags.FORCE)
        destination = await self.materialize(image, name, force=force)

        for suffix, sidecar in sidecars.items():
            self.install(Path(sidecar.path), self.image_root / f"{name}{suffix}", force=force)

        return destination

    async def fetch_checksums(self, client: httpx.AsyncClient, url: str, verify: VerifyMode) -> Dict[str, str]:
        """
        Fetch SHA256SUMS (and check its signature in signature mode).

        Returns:
            Mapping of filename to hex digest
        """
        response = await client.get(url_sibling(url, CHECKSUM_FILENAME))
        response.raise_for_status()

        if verify is VerifyMode.SIGNATURE:
            signature = await client.get(url_sibling(url, SIGNATURE_FILENAME))
            signature.raise_for_status()
            await verify_signature(response.content, signature.content, self.keyring)

        return parse_checksums(response.content.decode("utf-8", errors="replace"))

    async def download(
        self, client: httpx.AsyncClient, url: str, *, required: bool = True
    ) -> Optional[DownloadedFile]:
        """
        Stream a URL into a temporary file in the image root.

        Args:
            client: HTTP client
            url: URL to fetch
            required: If False, a 404 response yields None instead of an error

        Returns:
            The downloaded file, or None if an optional file does not exist
        """
        filename = url_last_component(url)
        fd, temp_name = tempfile.mkstemp(prefix=f"{TEMP_FILE_PREFIX}{filename}", dir=self.image_root)
        path = Path(temp_name)
        self._temp_paths.append(path)

        sha256 = hashlib.sha256()
        size = 0
        with os.fdopen(fd, "wb") as f:
            async with client.stream("GET", url) as response:
                if response.status_code == 404 and not required:
                    logging.debug("%s not found", url)
                    self.discard(path)
                    return None
                response.raise_for_status()

                async for chunk in response.aiter_bytes(DOWNLOAD_CHUNK_SIZE):
                    f.write(chunk)
                    sha256.update(chunk)
                    size += len(chunk)

        digest = sha256.hexdigest()
        log_download(url, size, digest)
        return DownloadedFile(url=url, filename=filename, path=str(path), sha256=digest, size=size)

    async def materialize(self, image: DownloadedFile, name: str, *, force: bool) -> Path:
        """Move the downloaded image into place as ``name``; implemented per kind."""
        raise NotImplementedError

    # ========================================================================
    # Helpers
    # ========================================================================

    def anonymous_name(self, url: str) -> str:
        """Hidden name for images pulled without a local name."""
        return f".{self.kind.value}-{hashlib.sha256(url.encode()).hexdigest()[:16]}"

    def check_destination(self, destination: Path, name: str, *, force: bool) -> None:
        """
        Refuse to overwrite an existing destination unless forced.

        Raises:
            AlreadyExistsError: If the destination exists and force is not set
        """
        if os.path.lexists(destination) and not force:
            raise AlreadyExistsError(f"Image '{name}' already exists.")

    def install(self, source: Path, destination: Path, *, force: bool) -> None:
        """Atomically move a finished temporary file or directory to its destination."""
        if force and os.path.lexists(destination):
            remove_path(destination)
        if source.is_file():
            source.chmod(0o644)
        os.rename(source, destination)
        self.forget(source)
        logging.debug("Installed %s", destination)

    async def run_blocking(self, func: Callable[..., Any], *args: Any) -> Any:
        """
        Run a blocking function in the loop's default executor.

        The executor future is shielded from cancellation of the pull task and
        kept until ``aclose()`` has waited for it, so the thread is never still
        writing into a temporary path that is being removed.
        """
        future = self.loop.run_in_executor(None, func, *args)
        self._blocking.append(future)
        return await asyncio.shield(future)

    def track(self, path: Path) -> Path:
        """Remember a temporary path for cleanup on close."""
        self._temp_paths.append(path)
        return path

    def forget(self, path: Path) -> None:
        """Stop tracking a temporary path that has been moved into place."""
        if path in self._temp_paths:
            self._temp_paths.remove(path)

    def discard(self, path: Path) -> None:
        """Remove a temporary path now."""
        remove_path(path)
        self.forget(path)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = create_async_session_with_retry()
        return self._client


__all__ = ["BasePuller", "SIDECARS", "remove_path"]
