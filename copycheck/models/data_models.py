"""
Core data models for copycheck.

This module contains the following dataclasses:
- FileDescriptor: One scanned file with its digest and timestamps
- ScanOptions: Per-invocation scan settings
- PoolAnalytics: Timing report for one job run through an AdmissionPool
- ComparisonKey: Which descriptor fields form the composite matching key
- MissingEntry: A copy entry with no counterpart in the source tree
- CheckReport: Result of comparing a copy tree against a source tree
- BuildSummary: Summary of a cache build run
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class FileDescriptor:
    """Represents one regular file found while scanning a tree."""
    name: str                                   # Base name of the file
    path: str                                   # Full path as scanned
    hash: Optional[str] = None                  # SHA-1 hex digest, None when hashing is off
    creation_time_ms: Optional[float] = None    # Birth time (ctime where unavailable)
    last_change_time_ms: Optional[float] = None # Metadata change time
    last_modify_time_ms: Optional[float] = None # Content modification time


@dataclass(frozen=True)
class ScanOptions:
    """Settings for one scan invocation."""
    with_hash: bool = True              # Compute a digest for every file
    is_incremental: bool = False        # Rescan, reusing digests already known
    continue_on_failure: bool = False   # Drop failing entries instead of aborting


@dataclass(frozen=True)
class PoolAnalytics:
    """Timing report for a single job that went through an AdmissionPool."""
    execution_time: float   # Seconds spent running
    time_in_queue: float    # Seconds spent waiting for a slot
    waiting_ratio: float    # time_in_queue / total time, 0.0 when total is 0
    succeeded: bool = True


@dataclass(frozen=True)
class ComparisonKey:
    """Selects the FileDescriptor fields that make up the composite key."""
    use_hash: bool = True
    use_name: bool = True
    use_creation: bool = True
    use_change: bool = True
    use_modify: bool = True

    def enabled_fields(self) -> Tuple[str, ...]:
        """Return the enabled field names in their fixed key order."""
        toggles = (
            ("hash", self.use_hash),
            ("name", self.use_name),
            ("creation", self.use_creation),
            ("change", self.use_change),
            ("modify", self.use_modify),
        )
        return tuple(name for name, enabled in toggles if enabled)


@dataclass(frozen=True)
class MissingEntry:
    """A copy entry whose composite key does not occur in the source."""
    descriptor: FileDescriptor
    identical_in_source: Optional[str] = None  # Source path holding the same content

    @property
    def hint(self) -> Optional[str]:
        if self.identical_in_source is None:
            return None
        return f"identical file found in source at {self.identical_in_source}"


@dataclass
class CheckReport:
    """Result of checking a copy tree against a source tree."""
    copy_root: str
    source_root: str
    key: ComparisonKey
    copy_count: int = 0
    source_count: int = 0
    missing: List[MissingEntry] = field(default_factory=list)
    duration: float = 0.0   # Seconds, including both scans

    @property
    def is_complete(self) -> bool:
        return not self.missing


@dataclass
class BuildSummary:
    """Summary of a cache build run over one or more roots."""
    roots: List[str] = field(default_factory=list)
    scans: int = 0          # Number of cache loads performed, dig pre-scans included
    files: int = 0          # Files in the final scan of each root
    duration: float = 0.0
