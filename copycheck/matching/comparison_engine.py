"""Comparison of two scanned trees for copycheck.

This module provides the ComparisonEngine class which reports the entries of
a copy tree that have no counterpart in a source tree.

Entries are matched on a composite key built from the FileDescriptor fields
enabled in a ComparisonKey, in this fixed order:
    1. hash (SHA-1 digest)
    2. name (base name)
    3. creation (creation time)
    4. change (metadata change time)
    5. modify (content modification time)

Disabled fields are left out of the key entirely.

Example:
    >>> from copycheck.matching import ComparisonEngine
    >>> from copycheck.models import ComparisonKey
    >>> engine = ComparisonEngine(ComparisonKey(use_creation=False, use_change=False))
    >>> for entry in engine.diff(copy_files, source_files):
    ...     print(entry.descriptor.path, entry.hint or "")
"""

from typing import Dict, Hashable, List, Sequence, Tuple

from copycheck.models import CheckReport, ComparisonKey, FileDescriptor, MissingEntry

CompositeKey = Tuple[Tuple[str, Hashable], ...]


class ComparisonEngine:
    """Diffs two FileDescriptor lists on a configurable composite key.

    The composite key is a tuple of (field, value) pairs, so values that
    contain separator characters can never collide.

    When the hash field is enabled, a missing copy entry whose digest occurs
    somewhere in the source under a different key (renamed, or different
    timestamps) gets a hint pointing at that source path.

    Attributes:
        key: Which descriptor fields take part in matching.

    Example:
        >>> engine = ComparisonEngine(ComparisonKey(use_creation=False))
        >>> missing = engine.diff(copy_files, source_files)
    """

    def __init__(self, key: ComparisonKey = ComparisonKey()) -> None:
        """Initialize the ComparisonEngine.

        Args:
            key: Composite key configuration. Defaults to every field.
        """
        self.key = key
        self._fields = key.enabled_fields()

    def composite_key(self, descriptor: FileDescriptor) -> CompositeKey:
        """Build the composite key of a descriptor from the enabled fields.

        Example:
            >>> ComparisonEngine(ComparisonKey(True, True, False, False, False)).composite_key(d)
            (('hash', '2fd4e1c6...'), ('name', 'a.txt'))
        """
        values = {
            "hash": descriptor.hash,
            "name": descriptor.name,
            "creation": descriptor.creation_time_ms,
            "change": descriptor.last_change_time_ms,
            "modify": descriptor.last_modify_time_ms,
        }
        return tuple((name, values[name]) for name in self._fields)

    def index(self, descriptors: Sequence[FileDescriptor]) -> Dict[CompositeKey, FileDescriptor]:
        """Map each composite key to the first descriptor carrying it."""
        indexed: Dict[CompositeKey, FileDescriptor] = {}
        for descriptor in descriptors:
            indexed.setdefault(self.composite_key(descriptor), descriptor)
        return indexed

    def diff(
        self,
        copy_set: Sequence[FileDescriptor],
        source_set: Sequence[FileDescriptor],
    ) -> List[MissingEntry]:
        """List the copy entries whose composite key is absent from the source.

        Every copy entry is checked, duplicates included, and results keep
        the order of `copy_set`. Neither input is modified.

        Args:
            copy_set: Descriptors of the tree expected to be contained.
            source_set: Descriptors of the tree expected to contain it.

        Returns:
            One MissingEntry per unmatched copy entry, with
            `identical_in_source` set when the hash field is enabled and the
            same digest exists in the source.
        """
        source_index = self.index(source_set)

        source_by_hash: Dict[str, FileDescriptor] = {}
        if self.key.use_hash:
            for descriptor in source_set:
                if descriptor.hash is not None:
                    source_by_hash.setdefault(descriptor.hash, descriptor)

        missing: List[MissingEntry] = []
        for descriptor in copy_set:
            if self.composite_key(descriptor) in source_index:
                continue
            same_content = source_by_hash.get(descriptor.hash) if descriptor.hash else None
            missing.append(
                MissingEntry(
                    descriptor=descriptor,
                    identical_in_source=same_content.path if same_content is not None else None,
                )
            )
        return missing

    def check(
        self,
        copy_root: str,
        copy_set: Sequence[FileDescriptor],
        source_root: str,
        source_set: Sequence[FileDescriptor],
    ) -> CheckReport:
        """Diff two scanned trees and wrap the result in a CheckReport."""
        return CheckReport(
            copy_root=copy_root,
            source_root=source_root,
            key=self.key,
            copy_count=len(copy_set),
            source_count=len(source_set),
            missing=self.diff(copy_set, source_set),
        )
