"""Persistent key-value stores for scan artifacts."""

import asyncio
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from copycheck.models import CacheIOFailure

from .artifacts import CacheArtifact

logger = logging.getLogger(__name__)

# Environment variable overriding the default cache directory
CACHE_DIR_ENV = "COPYCHECK_CACHE_DIR"


def default_cache_dir() -> Path:
    """Return the cache directory from the environment, or ~/.cache/copycheck."""
    override = os.environ.get(CACHE_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".cache" / "copycheck"


class ArtifactStore(ABC):
    """Interface for artifact storage backends."""

    @abstractmethod
    async def keys(self) -> List[str]:
        """List the keys of every stored artifact."""

    @abstractmethod
    async def read(self, key: str) -> Optional[CacheArtifact]:
        """Return the artifact for `key`, or None if there is none.

        Raises:
            CacheIOFailure: If an artifact exists but cannot be read or parsed.
        """

    @abstractmethod
    async def write(self, key: str, artifact: CacheArtifact) -> None:
        """Store `artifact` under `key`, replacing any previous one.

        Raises:
            CacheIOFailure: If the artifact cannot be written.
        """


class JsonArtifactStore(ArtifactStore):
    """File-based store keeping one JSON file per artifact under `cache_dir`."""

    def __init__(self, cache_dir: Path) -> None:
        self._root = Path(cache_dir).expanduser()

    @property
    def cache_dir(self) -> Path:
        return self._root

    def artifact_path(self, key: str) -> Path:
        """Return file path for an artifact key."""
        safe_key = key.replace("/", "_").replace("\\", "_")
        return self._root / f"{safe_key}.json"

    async def keys(self) -> List[str]:
        return await asyncio.to_thread(self._list_keys)

    async def read(self, key: str) -> Optional[CacheArtifact]:
        return await asyncio.to_thread(self._read, key)

    async def write(self, key: str, artifact: CacheArtifact) -> None:
        await asyncio.to_thread(self._write, key, artifact)

    def _list_keys(self) -> List[str]:
        if not self._root.is_dir():
            return []
        try:
            return sorted(path.stem for path in self._root.glob("*.json"))
        except OSError as e:
            raise CacheIOFailure(str(self._root), "Failed to list cache artifacts") from e

    def _read(self, key: str) -> Optional[CacheArtifact]:
        path = self.artifact_path(key)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as e:
            raise CacheIOFailure(str(path), "Invalid cache artifact") from e
        except OSError as e:
            raise CacheIOFailure(str(path), "Failed to read cache artifact") from e

        try:
            return CacheArtifact.model_validate_json(raw)
        except ValidationError as e:
            raise CacheIOFailure(str(path), "Invalid cache artifact") from e

    def _write(self, key: str, artifact: CacheArtifact) -> None:
        path = self.artifact_path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            # Write to a sibling temp file first so readers never see a partial artifact
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(artifact.model_dump_json(by_alias=True))
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise CacheIOFailure(str(path), "Failed to write cache artifact") from e
        logger.debug("Wrote %d entries to %s", len(artifact.entries), path)
