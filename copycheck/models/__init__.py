"""
Models package for copycheck.

This package provides convenient imports for all data models and errors:
- FileDescriptor: One scanned file
- ScanOptions: Scan settings
- PoolAnalytics: Per-job pool timings
- ComparisonKey: Composite key configuration
- MissingEntry: Copy entry absent from the source
- CheckReport: Result of a check
- BuildSummary: Result of a cache build
- CopyCheckError and its subclasses
"""

from .data_models import (
    BuildSummary,
    CheckReport,
    ComparisonKey,
    FileDescriptor,
    MissingEntry,
    PoolAnalytics,
    ScanOptions,
)
from .errors import (
    CacheIOFailure,
    CopyCheckError,
    EnumerationFailure,
    HashFailure,
    RetryExhausted,
    ScanFailure,
)

__all__ = [
    "BuildSummary",
    "CheckReport",
    "ComparisonKey",
    "FileDescriptor",
    "MissingEntry",
    "PoolAnalytics",
    "ScanOptions",
    "CacheIOFailure",
    "CopyCheckError",
    "EnumerationFailure",
    "HashFailure",
    "RetryExhausted",
    "ScanFailure",
]
