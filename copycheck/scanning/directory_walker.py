"""Recursive directory walker producing FileDescriptor lists.

This module provides the DirectoryWalker class for enumerating a whole tree
concurrently and hashing its regular files through a FileHasher.

Example:
    >>> from copycheck.scanning import DirectoryWalker, FileHasher
    >>> walker = DirectoryWalker(FileHasher(AdmissionPool()))
    >>> files = await walker.scan("/data/photos", {}, ScanOptions())
    >>> print(f"{len(files)} files")
"""

import asyncio
import logging
import os
import stat
from typing import Dict, List, Optional

from copycheck.models import (
    EnumerationFailure,
    FileDescriptor,
    ScanFailure,
    ScanOptions,
)
from copycheck.scheduling import join_all

from .file_hasher import FileHasher

logger = logging.getLogger(__name__)

KnownHashes = Dict[str, Optional[str]]


class DirectoryWalker:
    """Walks a directory tree and describes every regular file in it.

    Traversal fans out without limit: each directory entry becomes its own
    task. Only hashing is bounded, by the AdmissionPool behind the
    FileHasher. Symlinks, sockets, devices and FIFOs are skipped and logged.

    With `continue_on_failure` a failing entry (stat, listing, or hashing
    failure) is logged and dropped while its siblings carry on. Without it
    the first failure cancels the rest of the walk and is raised from scan().

    Attributes:
        hasher: The FileHasher used for files with no known digest.

    Example:
        >>> walker = DirectoryWalker(hasher)
        >>> options = ScanOptions(with_hash=True, continue_on_failure=True)
        >>> files = await walker.scan("/backup", known_hashes, options)
    """

    def __init__(self, hasher: FileHasher) -> None:
        """Initialize the DirectoryWalker.

        Args:
            hasher: FileHasher used to digest files missing from the
                known-hash map.
        """
        self.hasher = hasher

    async def scan(
        self,
        root: str,
        known_hashes: Optional[KnownHashes] = None,
        options: ScanOptions = ScanOptions(),
    ) -> List[FileDescriptor]:
        """Scan a tree and return one descriptor per regular file.

        Args:
            root: Directory to scan.
            known_hashes: Optional map from file path to a digest computed
                earlier. Matching paths reuse the digest without reading
                the file.
            options: Scan settings.

        Returns:
            FileDescriptor list in no particular order.

        Raises:
            EnumerationFailure: If `root` itself cannot be listed, or any
                entry fails while `continue_on_failure` is False.
            HashFailure, RetryExhausted: If hashing fails while
                `continue_on_failure` is False.
        """
        results: List[FileDescriptor] = []
        await self._scan_directory(root, known_hashes or {}, options, results)
        return results

    async def _scan_directory(
        self,
        directory: str,
        known_hashes: KnownHashes,
        options: ScanOptions,
        results: List[FileDescriptor],
    ) -> None:
        try:
            names = await asyncio.to_thread(os.listdir, directory)
        except OSError as e:
            raise EnumerationFailure(directory) from e

        failures = await join_all(
            (
                self._scan_entry(directory, name, known_hashes, options, results)
                for name in names
            ),
            fail_fast=not options.continue_on_failure,
        )
        for failure in failures:
            if not isinstance(failure, ScanFailure):
                raise failure
            logger.warning("Dropped %s from scan results: %s", failure.path, failure)

    async def _scan_entry(
        self,
        directory: str,
        name: str,
        known_hashes: KnownHashes,
        options: ScanOptions,
        results: List[FileDescriptor],
    ) -> None:
        path = os.path.join(directory, name)
        try:
            stats = await asyncio.to_thread(os.lstat, path)
        except OSError as e:
            raise EnumerationFailure(path) from e

        if stat.S_ISDIR(stats.st_mode):
            await self._scan_directory(path, known_hashes, options, results)
        elif stat.S_ISREG(stats.st_mode):
            digest = None
            if options.with_hash:
                digest = known_hashes.get(path)
                if digest is None:
                    digest = await self.hasher.hash_file(path, stats.st_size)
            results.append(_describe(name, path, digest, stats))
        else:
            logger.info("Skipped non directory or file element: %s", path)


def _describe(name: str, path: str, digest: Optional[str], stats: os.stat_result) -> FileDescriptor:
    birth_time = getattr(stats, "st_birthtime", None)
    return FileDescriptor(
        name=name,
        path=path,
        hash=digest,
        creation_time_ms=birth_time * 1000 if birth_time is not None else stats.st_ctime_ns / 1e6,
        last_change_time_ms=stats.st_ctime_ns / 1e6,
        last_modify_time_ms=stats.st_mtime_ns / 1e6,
    )
