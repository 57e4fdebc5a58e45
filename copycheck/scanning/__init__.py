"""File scanning package for copycheck.

This package walks directory trees and computes file digests.
It contains two main classes:

- FileHasher: Computes SHA-1 digests of files through an AdmissionPool,
  with up to five attempts per file.
- DirectoryWalker: Recursively enumerates a tree into FileDescriptor
  records, reusing known digests and applying the configured failure
  policy.

Example:
    >>> from copycheck.scanning import DirectoryWalker, FileHasher
    >>> from copycheck.scheduling import AdmissionPool
    >>>
    >>> hasher = FileHasher(AdmissionPool())
    >>> walker = DirectoryWalker(hasher)
    >>> files = await walker.scan("/data", {}, ScanOptions())
"""

from .directory_walker import DirectoryWalker
from .file_hasher import CHUNK_SIZE, MAX_ATTEMPTS, FileHasher, with_retries

__all__ = ["CHUNK_SIZE", "DirectoryWalker", "FileHasher", "MAX_ATTEMPTS", "with_retries"]
