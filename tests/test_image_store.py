"""Tests for the image store lookup."""

import errno
from unittest.mock import patch

import pytest

from image_pull.exceptions import ImageNotFoundError, StoreUnavailableError
from image_pull.models import ImageType
from image_pull.services import ImageStore
from image_pull.utils.constants import MACHINE_SEARCH_PATHS


class TestImageStoreInit:
    """Test search path setup."""

    def test_default_search_paths(self):
        """Test the default machine search paths."""
        assert ImageStore().search_paths == MACHINE_SEARCH_PATHS

    def test_image_root_searched_first(self, tmp_path):
        """Test that the image root is prepended."""
        store = ImageStore(search_paths=["/a", "/b"], image_root=str(tmp_path))
        assert store.search_paths == [str(tmp_path), "/a", "/b"]

    def test_image_root_not_duplicated(self):
        """Test that an image root already listed is not added twice."""
        store = ImageStore(search_paths=["/a", "/b"], image_root="/b")
        assert store.search_paths == ["/a", "/b"]


class TestImageStoreFind:
    """Test ImageStore.find()."""

    def test_find_directory_image(self, tmp_path):
        """Test finding a directory tree image."""
        (tmp_path / "foo").mkdir()
        image = ImageStore(search_paths=[str(tmp_path)]).find("foo")
        assert image.type is ImageType.DIRECTORY
        assert image.path == str(tmp_path / "foo")

    def test_find_raw_image(self, tmp_path):
        """Test finding a raw disk image."""
        (tmp_path / "img.raw").write_bytes(b"\0" * 16)
        image = ImageStore(search_paths=[str(tmp_path)]).find("img")
        assert image.type is ImageType.RAW
        assert image.name == "img"

    def test_first_match_wins(self, tmp_path):
        """Test search order."""
        first, second = tmp_path / "first", tmp_path / "second"
        (first / "foo").mkdir(parents=True)
        (second / "foo").mkdir(parents=True)
        image = ImageStore(search_paths=[str(first), str(second)]).find("foo")
        assert image.path == str(first / "foo")

    def test_file_named_like_directory_image_ignored(self, tmp_path):
        """Test that a plain file without .raw is not an image."""
        (tmp_path / "foo").write_text("not an image")
        with pytest.raises(ImageNotFoundError):
            ImageStore(search_paths=[str(tmp_path)]).find("foo")

    def test_missing_search_directory(self, tmp_path):
        """Test that missing search directories are skipped."""
        with pytest.raises(ImageNotFoundError):
            ImageStore(search_paths=[str(tmp_path / "absent")]).find("foo")

    def test_stat_failure(self, tmp_path):
        """Test that unexpected stat errors surface as StoreUnavailableError."""
        with patch("image_pull.services.image_store.os.stat", side_effect=PermissionError(errno.EACCES, "denied")):
            with pytest.raises(StoreUnavailableError) as exc_info:
                ImageStore(search_paths=[str(tmp_path)]).find("foo")
        assert exc_info.value.errno == errno.EACCES
