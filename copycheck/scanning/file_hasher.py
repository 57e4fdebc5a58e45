"""File hashing utility with bounded retries.

This module provides the FileHasher class for computing SHA-1 digests of
files through an AdmissionPool, retrying failed reads with decreasing
priority.

Example:
    >>> from copycheck.scanning import FileHasher
    >>> from copycheck.scheduling import AdmissionPool
    >>> hasher = FileHasher(AdmissionPool())
    >>> digest = await hasher.hash_file("/path/to/file.txt", size=1024)
"""

import asyncio
import hashlib
import logging
from typing import Awaitable, Callable, Dict, List, Optional, TypeVar

from copycheck.models import HashFailure, PoolAnalytics, RetryExhausted
from copycheck.scheduling import AdmissionPool

logger = logging.getLogger(__name__)

# Buffer size for chunked file reading (8KB)
CHUNK_SIZE = 8192

# Attempts made per file before giving up
MAX_ATTEMPTS = 5

T = TypeVar("T")


async def with_retries(
    action: Callable[[int], Awaitable[T]],
    attempts: int,
    path: str,
) -> T:
    """Await `action(attempt_number)` until it succeeds or attempts run out.

    Attempt numbers start at 1. Each failed attempt is logged as a warning.

    Args:
        action: Callable taking the 1-based attempt number.
        attempts: Maximum number of attempts.
        path: File the action works on, used for logging and the final error.

    Returns:
        The result of the first successful attempt.

    Raises:
        RetryExhausted: If every attempt failed. It carries each attempt's
            error and is chained to the last one.
    """
    errors: List[Exception] = []
    for attempt in range(1, attempts + 1):
        try:
            return await action(attempt)
        except Exception as e:
            outcome = "giving up" if attempt == attempts else "might retry later"
            logger.warning(
                "Attempt %d/%d failed for %s, %s: %s", attempt, attempts, path, outcome, e
            )
            errors.append(e)
    raise RetryExhausted(path, errors) from (errors[-1] if errors else None)


class FileHasher:
    """Computes SHA-1 digests of files through an AdmissionPool.

    Files are streamed in CHUNK_SIZE blocks so memory use does not depend on
    file size. Reads run in a worker thread via asyncio.to_thread, leaving
    the event loop free to drive other scans.

    Each attempt is submitted to the pool with weight `size / attempt`, so
    retries of one file lose priority against fresh work.

    Attributes:
        pool: The AdmissionPool every hashing attempt goes through.
        max_attempts: Attempts per file before RetryExhausted is raised.

    Example:
        >>> hasher = FileHasher(AdmissionPool(capacity=8))
        >>> digest = await hasher.hash_file("big.iso", size=4_700_000_000)
        >>> hasher.get_stats()
        {'hashed': 1, 'failed_attempts': 0}
    """

    def __init__(self, pool: AdmissionPool, max_attempts: int = MAX_ATTEMPTS) -> None:
        """Initialize the FileHasher.

        Args:
            pool: AdmissionPool used to bound concurrent hashing.
            max_attempts: Attempts per file. Defaults to MAX_ATTEMPTS.
        """
        self.pool = pool
        self.max_attempts = max_attempts
        self._hashed: int = 0
        self._failed_attempts: int = 0

    async def compute_digest(self, file_path: str) -> str:
        """Compute the SHA-1 hex digest of a file.

        Args:
            file_path: Path of the file to read.

        Returns:
            The SHA-1 hex digest.

        Raises:
            HashFailure: If the file cannot be opened or read.
        """
        try:
            return await asyncio.to_thread(_sha1_file, file_path)
        except OSError as e:
            raise HashFailure(file_path) from e

    async def hash_file(self, file_path: str, size: int) -> str:
        """Hash a file with up to `max_attempts` pool-admitted attempts.

        Args:
            file_path: Path of the file to hash.
            size: File size in bytes, used as the base pool weight.

        Returns:
            The SHA-1 hex digest.

        Raises:
            RetryExhausted: If every attempt failed.
        """
        analytics: Optional[PoolAnalytics] = None

        def record(report: PoolAnalytics) -> None:
            nonlocal analytics
            analytics = report

        async def attempt(number: int) -> str:
            try:
                return await self.pool.submit(
                    lambda: self.compute_digest(file_path),
                    weight=size / number,
                    on_analytics=record,
                )
            except Exception:
                self._failed_attempts += 1
                raise

        digest = await with_retries(attempt, self.max_attempts, file_path)
        self._hashed += 1
        logger.debug(
            "Hashed %s: %s (analytics: %s, pool: %s)",
            file_path, digest, analytics, self.pool.stats(),
        )
        return digest

    def get_stats(self) -> Dict[str, int]:
        """Get hashing statistics for debugging and monitoring.

        Returns:
            Dictionary containing:
            - 'hashed': Number of files successfully hashed
            - 'failed_attempts': Number of attempts that raised
        """
        return {"hashed": self._hashed, "failed_attempts": self._failed_attempts}


def _sha1_file(file_path: str) -> str:
    sha1_hash = hashlib.sha1()
    with open(file_path, "rb") as f:
        while True:
            chunk = f.read(CHUNK_SIZE)
            if not chunk:
                break
            sha1_hash.update(chunk)
    return sha1_hash.hexdigest()
