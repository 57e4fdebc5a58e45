"""Scan result caching package for copycheck.

This package persists scan results and reuses them across runs:

- CacheArtifact / FileDescriptorRecord: Versioned pydantic schema of a
  persisted scan result.
- ArtifactStore / JsonArtifactStore: Key-value storage of artifacts, one
  JSON file per (root, with_hash) pair.
- CacheStore: Returns cached results or walks the tree, bootstrapping
  incremental walks from every overlapping artifact.

Example:
    >>> from copycheck.caching import CacheStore, JsonArtifactStore, default_cache_dir
    >>> cache = CacheStore(JsonArtifactStore(default_cache_dir()), walker)
    >>> files = await cache.load("/data", ScanOptions())
"""

from .artifact_store import CACHE_DIR_ENV, ArtifactStore, JsonArtifactStore, default_cache_dir
from .artifacts import SCHEMA_VERSION, CacheArtifact, FileDescriptorRecord, artifact_key
from .cache_store import CacheStore, is_under, normalize_root

__all__ = [
    "ArtifactStore",
    "CACHE_DIR_ENV",
    "CacheArtifact",
    "CacheStore",
    "FileDescriptorRecord",
    "JsonArtifactStore",
    "SCHEMA_VERSION",
    "artifact_key",
    "default_cache_dir",
    "is_under",
    "normalize_root",
]
