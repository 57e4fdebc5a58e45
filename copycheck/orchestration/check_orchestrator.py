"""CheckOrchestrator for coordinating cache builds and tree checks.

This module provides the CheckOrchestrator class that wires the
AdmissionPool, FileHasher, DirectoryWalker, CacheStore and ComparisonEngine
together and implements the two workflows exposed by the CLI:

- build: Warm the cache for one or more roots, optionally scanning
  subdirectories first (deepest first) so their digests can be reused.
- check: Scan a copy tree and a source tree and report what in the copy
  is missing from the source.

Example:
    from copycheck.orchestration import CheckOrchestrator
    from copycheck.models import ComparisonKey, ScanOptions

    orchestrator = CheckOrchestrator(cache_dir=Path("~/.cache/copycheck"))
    summary = orchestrator.run_build_workflow(["/data/photos"], ScanOptions(), dig=1)
    report = orchestrator.run_check_workflow(
        "/backup/photos", "/data/photos", ScanOptions(), ComparisonKey()
    )
"""

import asyncio
import logging
import os
import time
from pathlib import Path
from typing import List, Optional, Sequence

from copycheck.caching import ArtifactStore, CacheStore, JsonArtifactStore, default_cache_dir
from copycheck.matching import ComparisonEngine
from copycheck.models import (
    BuildSummary,
    CheckReport,
    ComparisonKey,
    EnumerationFailure,
    FileDescriptor,
    ScanOptions,
)
from copycheck.orchestration.check_logger import CheckLogger
from copycheck.scanning import DirectoryWalker, FileHasher
from copycheck.scheduling import DEFAULT_CAPACITY, AdmissionPool
from copycheck.ui import CheckTUI

logger = logging.getLogger(__name__)


class CheckOrchestrator:
    """Orchestrates cache build and check workflows.

    One orchestrator owns one AdmissionPool, so every scan it runs shares
    the same hashing capacity.

    Attributes:
        pool: AdmissionPool bounding concurrent hashing.
        cache: CacheStore used for every scan.
        log_file_path: Optional path for the check report log file.
        written_log_path: Path of the last log file actually written, or None.

    Example:
        orchestrator = CheckOrchestrator(capacity=32)
        report = orchestrator.run_check_workflow(copy, source, options, key)
    """

    def __init__(
        self,
        cache_dir: Optional[Path] = None,
        capacity: int = DEFAULT_CAPACITY,
        log_file_path: Optional[Path] = None,
        tui: Optional[CheckTUI] = None,
        store: Optional[ArtifactStore] = None,
    ) -> None:
        """Initialize the CheckOrchestrator.

        Args:
            cache_dir: Directory holding cache artifacts. Defaults to
                default_cache_dir(). Ignored when `store` is given.
            capacity: Maximum number of concurrently running hash jobs.
            log_file_path: Optional path for a check report log file.
            tui: Optional CheckTUI for output. Defaults to a new CheckTUI.
            store: Optional ArtifactStore replacing the JSON store.

        Raises:
            ValueError: If capacity is less than 1.
        """
        self.pool = AdmissionPool(capacity=capacity)
        walker = DirectoryWalker(FileHasher(self.pool))
        if store is None:
            store = JsonArtifactStore(cache_dir if cache_dir is not None else default_cache_dir())
        self.cache = CacheStore(store, walker)
        self.log_file_path = log_file_path
        self.written_log_path: Optional[Path] = None
        self._tui = tui or CheckTUI()

    async def build(
        self,
        roots: Sequence[str],
        options: ScanOptions,
        dig: int = 0,
    ) -> BuildSummary:
        """Build the cache for each root, in order.

        Args:
            roots: Directories to scan.
            options: Scan settings applied to every scan.
            dig: Number of subdirectory levels scanned before each root,
                deepest first.

        Returns:
            BuildSummary counting scans and the files of each root.

        Raises:
            ValueError: If a root is not a directory or dig is negative.
        """
        if dig < 0:
            raise ValueError(f"dig must be non-negative, got {dig}")
        for root in roots:
            _validate_directory(root)

        started = time.monotonic()
        summary = BuildSummary(roots=[str(root) for root in roots])
        for root in roots:
            results = await self._dig(dig, str(root), options, summary)
            summary.files += len(results)
        summary.duration = time.monotonic() - started
        return summary

    async def _dig(
        self,
        depth: int,
        directory: str,
        options: ScanOptions,
        summary: BuildSummary,
    ) -> List[FileDescriptor]:
        if depth > 0:
            try:
                subdirectories = await asyncio.to_thread(_list_subdirectories, directory)
            except OSError as e:
                raise EnumerationFailure(directory) from e
            for subdirectory in subdirectories:
                await self._dig(depth - 1, subdirectory, options, summary)
        summary.scans += 1
        return await self.cache.load(directory, options)

    async def check(
        self,
        copy_root: str,
        source_root: str,
        options: ScanOptions,
        key: ComparisonKey,
    ) -> CheckReport:
        """Report the entries of `copy_root` missing from `source_root`.

        Args:
            copy_root: Tree expected to be contained in the source.
            source_root: Tree expected to contain the copy.
            options: Scan settings for both trees.
            key: Composite key configuration for the comparison.

        Returns:
            CheckReport with the missing entries.

        Raises:
            ValueError: If either root is not a directory.
        """
        _validate_directory(copy_root)
        _validate_directory(source_root)

        logger.info('Check if some entries of "copy" are missing in "source"')
        logger.info("  -> with source: %s", source_root)
        logger.info("  -> with copy: %s", copy_root)
        enabled = set(key.enabled_fields())
        for name in ("hash", "name", "creation", "change", "modify"):
            logger.info("  -> with %s: %s", name, "ON" if name in enabled else "OFF")

        started = time.monotonic()
        source_files = await self.cache.load(source_root, options)
        copy_files = await self.cache.load(copy_root, options)

        report = ComparisonEngine(key).check(
            str(copy_root), copy_files, str(source_root), source_files
        )
        report.duration = time.monotonic() - started
        return report

    def run_build_workflow(
        self,
        roots: Sequence[str],
        options: ScanOptions,
        dig: int = 0,
    ) -> BuildSummary:
        """Run build() on a fresh event loop and display its summary."""
        summary = asyncio.run(self.build(roots, options, dig))
        self._tui.display_build_summary(summary)
        return summary

    def run_check_workflow(
        self,
        copy_root: str,
        source_root: str,
        options: ScanOptions,
        key: ComparisonKey,
    ) -> CheckReport:
        """Run check() on a fresh event loop, display and optionally log it.

        The log file is only written when `log_file_path` is set. A log file
        that cannot be written is reported as a warning and leaves
        `written_log_path` unset; the check result is still returned.
        """
        report = asyncio.run(self.check(copy_root, source_root, options, key))
        self._tui.display_check_report(report)

        self.written_log_path = None
        if self.log_file_path is not None:
            try:
                with CheckLogger(self.log_file_path) as check_log:
                    check_log.log_header(report)
                    check_log.log_missing_entries(report)
                    check_log.log_summary(report)
                self.written_log_path = self.log_file_path
            except OSError as e:
                logger.warning("Could not write log file %s: %s", self.log_file_path, e)

        if report.is_complete:
            logger.info("Every element known in copy is available in source")
        else:
            logger.info(
                "Found %d elements in copy that cannot match anything in source",
                len(report.missing),
            )
        return report


def _validate_directory(path: str) -> None:
    if not os.path.isdir(path):
        raise ValueError(f"Not a directory: {path}")


def _list_subdirectories(directory: str) -> List[str]:
    with os.scandir(directory) as entries:
        return sorted(entry.path for entry in entries if entry.is_dir(follow_symlinks=False))
