"""Cached and incremental scanning on top of an ArtifactStore.

This module provides the CacheStore class, the entry point for obtaining the
FileDescriptor list of a tree. It returns a persisted result when one exists
and, for incremental requests, seeds the walk with every digest already known
for paths under the requested root, whichever artifact they were stored in.

Example:
    >>> cache = CacheStore(JsonArtifactStore(default_cache_dir()), walker)
    >>> files = await cache.load("/data/photos", ScanOptions(is_incremental=True))
"""

import logging
import os
from typing import Dict, List, Optional

from copycheck.models import CacheIOFailure, FileDescriptor, ScanOptions
from copycheck.scanning import DirectoryWalker

from .artifact_store import ArtifactStore
from .artifacts import CacheArtifact, artifact_key

logger = logging.getLogger(__name__)


def normalize_root(root: str) -> str:
    """Return `root` as an absolute, normalized path string."""
    return os.path.abspath(os.fspath(root))


def is_under(path: str, root: str) -> bool:
    """Return True if `path` is `root` or lies inside it."""
    try:
        return os.path.commonpath([path, root]) == root
    except ValueError:
        # Mixed drives or absolute/relative paths
        return False


class CacheStore:
    """Loads scan results from the artifact store or produces them by walking.

    Results are keyed by `artifact_key(root, with_hash)`. A non-incremental
    load of a root that already has an artifact never touches the
    filesystem being scanned. An incremental load always walks, but reuses
    digests from:

    - the artifact of the exact same key, and
    - when hashing is enabled, every other artifact in the store, for
      entries whose path falls under the requested root.

    A digest reused this way is never checked against the file's current
    metadata. Every fresh result overwrites the artifact for its key and is
    memoized for the rest of the process, as is every artifact read.

    Unreadable artifacts count as missing. Write failures propagate.

    Attributes:
        store: Backend holding the persisted artifacts.
        walker: DirectoryWalker used when a scan is needed.
    """

    def __init__(self, store: ArtifactStore, walker: DirectoryWalker) -> None:
        """Initialize the CacheStore.

        Args:
            store: ArtifactStore holding persisted scan results.
            walker: DirectoryWalker used to scan roots.
        """
        self.store = store
        self.walker = walker
        self._memo: Dict[str, List[FileDescriptor]] = {}

    async def load(self, root: str, options: ScanOptions) -> List[FileDescriptor]:
        """Return the FileDescriptor list for `root`.

        Args:
            root: Directory whose content is requested.
            options: Scan settings; `with_hash` is part of the cache key.

        Returns:
            The persisted list on a non-incremental cache hit, otherwise the
            result of a fresh walk.

        Raises:
            CacheIOFailure: If the fresh result cannot be persisted.
            ScanFailure: If the walk fails and `continue_on_failure` is False.
        """
        root = normalize_root(root)
        key = artifact_key(root, options.with_hash)

        if options.is_incremental:
            known_hashes = await self._bootstrap(root, key, options)
            logger.info(
                "Incrementally computing cache for %s with options %s (%d known hashes)",
                root, options, len(known_hashes),
            )
        else:
            cached = await self._read_entries(key)
            if cached is not None:
                logger.info(
                    "Cache found for %s with options %s: %d results", root, options, len(cached)
                )
                return list(cached)
            logger.info("No cache found for %s with options %s", root, options)
            known_hashes = {}

        results = await self.walker.scan(root, known_hashes, options)
        logger.info("Scan of %s found %d results", root, len(results))

        await self.store.write(key, CacheArtifact.from_descriptors(root, options.with_hash, results))
        self._memo[key] = results
        logger.info("Wrote cache for %s under key %s", root, key)
        return list(results)

    async def _bootstrap(self, root: str, key: str, options: ScanOptions) -> Dict[str, Optional[str]]:
        known_hashes: Dict[str, Optional[str]] = {}

        baseline = await self._read_entries(key)
        if baseline is not None:
            for entry in baseline:
                if entry.hash is not None:
                    known_hashes[entry.path] = entry.hash

        if not options.with_hash:
            return known_hashes

        try:
            other_keys = [other for other in await self.store.keys() if other != key]
        except CacheIOFailure as e:
            logger.warning("Cannot list cache artifacts, using exact match only: %s", e)
            return known_hashes

        for other_key in other_keys:
            entries = await self._read_entries(other_key)
            if not entries:
                continue
            for entry in entries:
                if entry.hash is None:
                    continue
                path = os.path.normpath(entry.path)
                if is_under(path, root):
                    known_hashes.setdefault(path, entry.hash)
        return known_hashes

    async def _read_entries(self, key: str) -> Optional[List[FileDescriptor]]:
        if key in self._memo:
            return self._memo[key]
        try:
            artifact = await self.store.read(key)
        except CacheIOFailure as e:
            logger.warning("Ignoring unreadable cache artifact %s: %s", key, e)
            return None
        if artifact is None:
            return None
        entries = artifact.to_descriptors()
        self._memo[key] = entries
        return entries
