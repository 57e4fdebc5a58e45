"""Pytest fixtures for copycheck tests."""

import io
import os
import platform
import tempfile
from pathlib import Path
from typing import Callable, Generator, Optional

import pytest
from rich.console import Console

from copycheck.caching import CacheStore, JsonArtifactStore
from copycheck.models import FileDescriptor
from copycheck.scanning import DirectoryWalker, FileHasher
from copycheck.scheduling import AdmissionPool
from copycheck.ui import CheckTUI


def pytest_configure(config) -> None:
    config.addinivalue_line("markers", "unit: fast tests of a single component")
    config.addinivalue_line("markers", "integration: tests spanning several components")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for isolated test environments.

    Yields:
        Path to the temporary directory.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def cache_dir(temp_dir: Path) -> Path:
    """Directory holding cache artifacts, kept apart from scanned trees."""
    path = temp_dir / "cache"
    path.mkdir()
    return path


@pytest.fixture
def sample_tree(temp_dir: Path) -> Path:
    """Create a nested tree of files with known content.

    Creates:
        temp_dir/tree/
        ├── a.txt ("alpha")
        ├── b.txt ("bravo")
        └── sub/
            ├── c.txt ("charlie")
            └── deeper/
                └── d.bin (1KB of 0x00)

    Args:
        temp_dir: Temporary directory fixture.

    Returns:
        Path to the tree root.
    """
    root = temp_dir / "tree"
    (root / "sub" / "deeper").mkdir(parents=True)
    (root / "a.txt").write_text("alpha")
    (root / "b.txt").write_text("bravo")
    (root / "sub" / "c.txt").write_text("charlie")
    (root / "sub" / "deeper" / "d.bin").write_bytes(b"\x00" * 1024)
    return root


@pytest.fixture
def symlink_file(temp_dir: Path) -> Generator[Optional[Path], None, None]:
    """Create a directory holding a regular file and a symlink to it.

    Note: Symlinks may not be supported on all Windows configurations.

    Yields:
        Path to the directory, or None if symlinks are not supported.
    """
    folder = temp_dir / "links"
    folder.mkdir()
    target_file = folder / "target.txt"
    target_file.write_text("target content")

    try:
        (folder / "link.txt").symlink_to(target_file)
        yield folder
    except OSError:
        # Symlinks not supported on this platform/configuration
        yield None


@pytest.fixture
def restricted_file(temp_dir: Path) -> Generator[Optional[Path], None, None]:
    """Create a directory holding one readable and one unreadable file.

    Note: This fixture is platform-specific. On Windows, or when running as
    root, permissions cannot prevent reads and None is yielded.

    Yields:
        Path to the directory, or None if permissions cannot be enforced.
    """
    if platform.system() == "Windows" or (hasattr(os, "geteuid") and os.geteuid() == 0):
        yield None
        return

    folder = temp_dir / "restricted"
    folder.mkdir()
    (folder / "open.txt").write_text("open content")
    restricted = folder / "secret.txt"
    restricted.write_text("secret content")

    original_mode = restricted.stat().st_mode
    os.chmod(restricted, 0o000)

    try:
        yield folder
    finally:
        # Restore permissions for cleanup
        os.chmod(restricted, original_mode)


@pytest.fixture
def make_descriptor() -> Callable[..., FileDescriptor]:
    """Factory building FileDescriptor instances with fixed default timestamps.

    Example:
        descriptor = make_descriptor("a.txt", hash="abc")
    """

    def factory(path: str, hash: Optional[str] = None, **overrides) -> FileDescriptor:
        fields = {
            "name": os.path.basename(path),
            "path": path,
            "hash": hash,
            "creation_time_ms": 1_000.0,
            "last_change_time_ms": 2_000.0,
            "last_modify_time_ms": 3_000.0,
        }
        fields.update(overrides)
        return FileDescriptor(**fields)

    return factory


@pytest.fixture
def pool() -> AdmissionPool:
    """A small, isolated AdmissionPool."""
    return AdmissionPool(capacity=4)


@pytest.fixture
def walker(pool: AdmissionPool) -> DirectoryWalker:
    """DirectoryWalker backed by its own pool."""
    return DirectoryWalker(FileHasher(pool))


@pytest.fixture
def cache_store(cache_dir: Path, walker: DirectoryWalker) -> CacheStore:
    """CacheStore writing JSON artifacts to the temporary cache directory."""
    return CacheStore(JsonArtifactStore(cache_dir), walker)


@pytest.fixture
def tui_with_captured_output() -> CheckTUI:
    """Create a CheckTUI instance with Console output captured to StringIO.

    Access captured output via: tui.console.file.getvalue()
    """
    output = io.StringIO()
    console = Console(file=output, force_terminal=False, width=200)
    return CheckTUI(console=console)
