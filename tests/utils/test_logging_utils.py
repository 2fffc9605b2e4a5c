"""Tests for pull lifecycle logging helpers."""

import logging

import pytest

from image_pull.models.policy import PullFlags
from image_pull.utils.logging_utils import (
    describe_flags,
    format_file_size,
    log_download,
    log_pull_complete,
    log_pull_start,
    log_sidecar_missing,
)


class TestFormatFileSize:
    """Test format_file_size function."""

    @pytest.mark.parametrize(
        "size,expected",
        [
            (0, "0 B"),
            (512, "512.0 B"),
            (1536, "1.5 KB"),
            (5 * 1024 * 1024, "5.0 MB"),
            (3 * 1024**4, "3.0 TB"),
        ],
    )
    def test_sizes(self, size, expected):
        """Test human readable sizes."""
        assert format_file_size(size) == expected


class TestDescribeFlags:
    """Test describe_flags function."""

    def test_no_flags(self):
        """Test that an empty flag set reads "none"."""
        assert describe_flags(PullFlags(0)) == "none"

    def test_flag_names(self):
        """Test that flags are listed in declaration order with dashes."""
        flags = PullFlags.VERITY | PullFlags.FORCE | PullFlags.ROOTHASH_SIGNATURE
        assert describe_flags(flags) == "force, roothash-signature, verity"


class TestPullLogging:
    """Test pull milestone messages."""

    def test_log_pull_start(self, caplog):
        """Test the start message and the settings at debug."""
        with caplog.at_level(logging.DEBUG):
            log_pull_start("tar", "https://example.com/foo.tar", PullFlags.SETTINGS, "no")
        assert "Starting tar pull of https://example.com/foo.tar" in caplog.text
        assert "Pull settings: flags=settings, verify=no" in caplog.text

    def test_log_pull_complete(self, caplog):
        """Test the completion message names the destination."""
        with caplog.at_level(logging.INFO):
            log_pull_complete("raw", "/var/lib/machines/img.raw")
        assert "Completed raw pull, image stored at /var/lib/machines/img.raw" in caplog.text

    def test_log_download(self, caplog):
        """Test download message with size and checksum at debug."""
        with caplog.at_level(logging.DEBUG):
            log_download("https://example.com/img.raw", 2048, "ab" * 32)
        assert "Downloaded https://example.com/img.raw (2.0 KB)" in caplog.text
        assert "ab" * 32 in caplog.text

    def test_log_sidecar_missing(self, caplog):
        """Test the message for a side-car the server does not have."""
        with caplog.at_level(logging.INFO):
            log_sidecar_missing("Verity data file")
        assert "Verity data file not available, proceeding without." in caplog.text
