"""
Test fixtures and helpers for image-pull tests.

This module provides common fixtures for policies, a fake image store,
test images served through respx, and configuration files.

Best Practices for Temporary Files in Tests:
1. Prefer pytest's tmp_path fixture for image roots and config files
2. Use the image_root fixture for anything a puller writes
3. Never point tests at the real /var/lib/machines
"""

import io
import logging
import tarfile
from pathlib import Path
from typing import Dict, List, Optional

import pytest
import respx

from image_pull.exceptions import ImageNotFoundError
from image_pull.models import Image, ImageType, PullPolicy, VerifyMode


class FakeImageStore:
    """In-memory image store recording every lookup."""

    def __init__(self, images: Optional[Dict[str, Image]] = None, error: Optional[Exception] = None) -> None:
        self.images = images or {}
        self.error = error
        self.queries: List[str] = []

    def add(self, name: str, image_type: ImageType = ImageType.DIRECTORY) -> None:
        """Register an existing image."""
        self.images[name] = Image(name=name, path=f"/var/lib/machines/{name}", type=image_type)

    def find(self, name: str) -> Image:
        self.queries.append(name)
        if self.error is not None:
            raise self.error
        if name not in self.images:
            raise ImageNotFoundError(f"No image '{name}' found.")
        return self.images[name]


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo logging changes made by setup_logging() during a test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def httpx_mock():
    """Provide respx mock for HTTP mocking."""
    with respx.mock:
        yield respx


@pytest.fixture
def image_root(tmp_path: Path) -> Path:
    """Empty image root directory."""
    root = tmp_path / "machines"
    root.mkdir()
    return root


@pytest.fixture
def policy(image_root: Path) -> PullPolicy:
    """Policy with verification off, writing to the temporary image root."""
    return PullPolicy(verify=VerifyMode.NONE, image_root=str(image_root))


@pytest.fixture
def fake_store() -> FakeImageStore:
    """Empty fake image store."""
    return FakeImageStore()


@pytest.fixture
def make_tarball():
    """
    Factory fixture building an in-memory tarball.

    Example:
        def test_something(make_tarball):
            data = make_tarball({"etc/os-release": b"ID=test\\n"}, compression="xz")
    """

    def _make(files: Dict[str, bytes], compression: str = "") -> bytes:
        buffer = io.BytesIO()
        mode = f"w:{compression}" if compression else "w"
        with tarfile.open(fileobj=buffer, mode=mode) as tar:
            for name, content in files.items():
                info = tarfile.TarInfo(name)
                info.size = len(content)
                info.mode = 0o644
                tar.addfile(info, io.BytesIO(content))
        return buffer.getvalue()

    return _make


@pytest.fixture
def create_config(tmp_path: Path):
    """
    Factory fixture writing a TOML config file and returning its path.

    Example:
        def test_something(create_config):
            path = create_config('[pull]\\nverify = "no"\\n')
    """

    def _create(content: str, filename: str = "pull.toml") -> str:
        path = tmp_path / filename
        path.write_text(content, encoding="utf-8")
        return str(path)

    return _create
