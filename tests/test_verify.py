"""Tests for checksum and signature verification."""

import asyncio
import errno
import logging
from unittest.mock import AsyncMock, Mock, patch

import pytest

from image_pull.exceptions import VerificationError
from image_pull.pull.verify import parse_checksums, verify_checksum, verify_signature

DIGEST = "a" * 64


class TestParseChecksums:
    """Test parse_checksums function."""

    def test_text_and_binary_entries(self):
        """Test both "  name" and " *name" separators."""
        content = f"{DIGEST}  foo.tar.xz\n{'B' * 64} *img.raw\n"
        assert parse_checksums(content) == {"foo.tar.xz": DIGEST, "img.raw": "b" * 64}

    def test_blank_comment_and_malformed_lines_skipped(self):
        """Test that lines without a digest and name are ignored."""
        content = f"\n# comment\nonlyonefield\n{DIGEST}  foo.nspawn\n"
        assert parse_checksums(content) == {"foo.nspawn": DIGEST}


class TestVerifyChecksum:
    """Test verify_checksum function."""

    def test_match(self, caplog):
        """Test a matching digest."""
        with caplog.at_level(logging.INFO):
            verify_checksum({"foo.tar": DIGEST}, "foo.tar", DIGEST.upper())
        assert "SHA256 checksum of foo.tar is valid." in caplog.text

    def test_mismatch(self):
        """Test a digest mismatch."""
        with pytest.raises(VerificationError, match="does not match") as exc_info:
            verify_checksum({"foo.tar": DIGEST}, "foo.tar", "b" * 64)
        assert exc_info.value.errno == errno.EBADMSG

    def test_not_listed(self):
        """Test a file missing from SHA256SUMS."""
        with pytest.raises(VerificationError, match="not listed in SHA256SUMS"):
            verify_checksum({"foo.tar": DIGEST}, "foo.nspawn", DIGEST)


class TestVerifySignature:
    """Test verify_signature function."""

    def test_missing_keyring(self, tmp_path):
        """Test that a missing keyring fails with ENOENT."""
        with pytest.raises(VerificationError, match="Keyring") as exc_info:
            asyncio.run(verify_signature(b"sums", b"sig", str(tmp_path / "absent.gpg")))
        assert exc_info.value.errno == errno.ENOENT

    def test_good_signature(self, tmp_path):
        """Test that gpg exiting 0 accepts the signature."""
        keyring = tmp_path / "ring.gpg"
        keyring.write_bytes(b"")
        process = Mock(returncode=0)
        process.communicate = AsyncMock(return_value=(b"", b"Good signature"))

        with patch("asyncio.create_subprocess_exec", new=AsyncMock(return_value=process)) as mock_exec:
            asyncio.run(verify_signature(b"sums", b"sig", str(keyring)))

        args = mock_exec.call_args.args
        assert args[0] == "gpg"
        assert f"--keyring={keyring}" in args
        assert "--verify" in args
        assert args[-2].endswith("SHA256SUMS.gpg")
        assert args[-1].endswith("SHA256SUMS")
        assert "GNUPGHOME" in mock_exec.call_args.kwargs["env"]

    def test_bad_signature(self, tmp_path):
        """Test that a non-zero gpg exit rejects the signature."""
        keyring = tmp_path / "ring.gpg"
        keyring.write_bytes(b"")
        process = Mock(returncode=1)
        process.communicate = AsyncMock(return_value=(b"", b"BAD signature"))

        with patch("asyncio.create_subprocess_exec", new=AsyncMock(return_value=process)):
            with pytest.raises(VerificationError, match="BAD signature") as exc_info:
                asyncio.run(verify_signature(b"sums", b"sig", str(keyring)))
        assert exc_info.value.errno == errno.EBADMSG

    def test_gpg_missing(self, tmp_path):
        """Test that a missing gpg binary fails with ENOENT."""
        keyring = tmp_path / "ring.gpg"
        keyring.write_bytes(b"")

        with patch("asyncio.create_subprocess_exec", new=AsyncMock(side_effect=FileNotFoundError())):
            with pytest.raises(VerificationError, match="not found") as exc_info:
                asyncio.run(verify_signature(b"sums", b"sig", str(keyring)))
        assert exc_info.value.errno == errno.ENOENT
