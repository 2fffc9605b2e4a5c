"""
Checksum and signature verification of downloaded images.

Images are authenticated through a ``SHA256SUMS`` file published next to
them and, in signature mode, its detached GnuPG signature
``SHA256SUMS.gpg``.
"""

import asyncio
import errno
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict

from ..exceptions import VerificationError
from ..utils.constants import CHECKSUM_FILENAME, GPG_BINARY, SIGNATURE_FILENAME


def parse_checksums(content: str) -> Dict[str, str]:
    """
    Parse a SHA256SUMS file.

    Args:
        content: File content, lines of "<hex digest> [*]<filename>"

    Returns:
        Mapping of filename to lower-case hex digest

    Example:
        >>> parse_checksums("abc123  foo.raw.xz\\n")
        {'foo.raw.xz': 'abc123'}
    """
    checksums = {}
    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        parts = line.split(maxsplit=1)
        if len(parts) != 2:
            continue

        digest, filename = parts
        # Leading '*' marks binary mode
        checksums[filename.lstrip("*").strip()] = digest.lower()

    return checksums


def verify_checksum(checksums: Dict[str, str], filename: str, digest: str) -> None:
    """
    Check a downloaded file's digest against the SHA256SUMS entries.

    Raises:
        VerificationError: If the file is not listed or the digest differs
    """
    expected = checksums.get(filename)
    if expected is None:
        raise VerificationError(f"Checksum of '{filename}' not listed in {CHECKSUM_FILENAME}.")

    if expected != digest.lower():
        raise VerificationError(f"Checksum of '{filename}' does not match: expected {expected}, got {digest}.")

    logging.info("SHA256 checksum of %s is valid.", filename)


async def verify_signature(data: bytes, signature: bytes, keyring: str) -> None:
    """
    Verify the detached signature of a SHA256SUMS file with gpg.

    gpg runs against the given keyring only, inside a throw-away home
    directory, so no user keys or trust settings take part.

    Args:
        data: Content of SHA256SUMS
        signature: Content of SHA256SUMS.gpg
        keyring: Path of the keyring holding the trusted keys

    Raises:
        VerificationError: If the keyring or gpg is missing, or the signature is bad
    """
    if not os.path.exists(keyring):
        raise VerificationError(f"Keyring {keyring} not found, cannot verify signature.", errno=errno.ENOENT)

    with tempfile.TemporaryDirectory(prefix="image-pull-gpg-") as gpg_home:
        data_path = Path(gpg_home) / CHECKSUM_FILENAME
        signature_path = Path(gpg_home) / SIGNATURE_FILENAME
        data_path.write_bytes(data)
        signature_path.write_bytes(signature)

        cmd = [
            GPG_BINARY,
            "--no-options",
            "--no-default-keyring",
            "--no-auto-key-locate",
            "--no-auto-check-trustdb",
            "--batch",
            "--trust-model=always",
            f"--keyring={keyring}",
            "--verify",
            str(signature_path),
            str(data_path),
        ]
        logging.debug("Running %s", " ".join(cmd))

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env={**os.environ, "GNUPGHOME": gpg_home},
            )
        except FileNotFoundError as e:
            raise VerificationError(f"{GPG_BINARY} not found, cannot verify signature.", errno=errno.ENOENT) from e

        try:
            _, stderr = await process.communicate()
        except asyncio.CancelledError:
            process.kill()
            await process.wait()
            raise

    if process.returncode != 0:
        details = stderr.decode("utf-8", errors="replace").strip()
        raise VerificationError(f"Signature verification failed: {details or 'gpg exited with ' + str(process.returncode)}")

    logging.info("Signature verification succeeded.")


__all__ = ["parse_checksums", "verify_checksum", "verify_signature"]
