"""
Error taxonomy for copycheck.

Per-entry scan failures share the ScanFailure base so the directory walker
can decide, in one place, whether to drop an entry or abort the scan:
- EnumerationFailure: listing or stat-ing a path failed
- HashFailure: reading a file failed while computing its digest
- RetryExhausted: every hashing attempt for one file failed

CacheIOFailure covers reading and writing persisted scan artifacts.
"""

from typing import List, Sequence


class CopyCheckError(Exception):
    """Base class for all copycheck errors."""


class ScanFailure(CopyCheckError):
    """A failure tied to a single path encountered while scanning."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{message}: {path}")
        self.path = path


class EnumerationFailure(ScanFailure):
    """Directory listing or stat failure."""

    def __init__(self, path: str) -> None:
        super().__init__(path, "Failed to enumerate")


class HashFailure(ScanFailure):
    """Read failure while streaming a file through the digest."""

    def __init__(self, path: str) -> None:
        super().__init__(path, "Failed to compute the hash of")


class RetryExhausted(ScanFailure):
    """All attempts at hashing one file failed.

    Attributes:
        errors: The error raised by each attempt, in attempt order.
    """

    def __init__(self, path: str, errors: Sequence[BaseException]) -> None:
        super().__init__(path, f"Failed after {len(errors)} attempts")
        self.errors: List[BaseException] = list(errors)


class CacheIOFailure(CopyCheckError):
    """Reading or writing a cache artifact failed."""

    def __init__(self, path: str, message: str = "Cache artifact I/O failed") -> None:
        super().__init__(f"{message}: {path}")
        self.path = path
