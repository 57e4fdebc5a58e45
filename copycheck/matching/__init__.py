"""Tree comparison package for copycheck.

This package contains the ComparisonEngine implementation for finding the
files of a copy tree that are missing from a source tree.

Example:
    >>> from copycheck.matching import ComparisonEngine
    >>> from copycheck.models import ComparisonKey
    >>> engine = ComparisonEngine(ComparisonKey(use_name=False))
    >>> missing = engine.diff(copy_files, source_files)
    >>> for entry in missing:
    ...     print(entry.descriptor.path)
"""

from .comparison_engine import ComparisonEngine

__all__ = [
    "ComparisonEngine",
]
