"""Versioned record schema for persisted scan artifacts.

An artifact is the scan result of one root, stored as JSON:

    {"schemaVersion": 2, "root": "/data/a", "withHash": true,
     "entries": [{"name": ..., "path": ..., "hash": ...,
                  "creationTimeMs": ..., "lastChangeTimeMs": ...,
                  "lastModifyTimeMs": ...}]}

Older artifacts were a bare JSON list whose records carried only path and
hash, then name, then timestamps under shorter names. They still load;
fields they lack come back as None.
"""

import hashlib
import os
from typing import Any, List, Optional, Sequence

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from copycheck.models import FileDescriptor

SCHEMA_VERSION = 2


def artifact_key(root: str, with_hash: bool) -> str:
    """Return the stable identifier of the artifact for `root`.

    The key is `<basename>-<sha1 of root>-<true|false>`.
    """
    digest = hashlib.sha1(root.encode("utf-8", errors="surrogateescape")).hexdigest()
    return f"{os.path.basename(root)}-{digest}-{'true' if with_hash else 'false'}"


class FileDescriptorRecord(BaseModel):
    """One persisted FileDescriptor, in any known schema version."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    path: str
    hash: Optional[str] = None
    creation_time_ms: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("creationTimeMs", "creationMs"),
        serialization_alias="creationTimeMs",
    )
    last_change_time_ms: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("lastChangeTimeMs", "lastChangedMs"),
        serialization_alias="lastChangeTimeMs",
    )
    last_modify_time_ms: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("lastModifyTimeMs", "lastModifiedMs"),
        serialization_alias="lastModifyTimeMs",
    )

    @model_validator(mode="before")
    @classmethod
    def _name_from_path(cls, data: Any) -> Any:
        # The earliest records had no name
        if isinstance(data, dict) and not data.get("name") and isinstance(data.get("path"), str):
            return {**data, "name": os.path.basename(data["path"])}
        return data

    @classmethod
    def from_descriptor(cls, descriptor: FileDescriptor) -> "FileDescriptorRecord":
        return cls(
            name=descriptor.name,
            path=descriptor.path,
            hash=descriptor.hash,
            creation_time_ms=descriptor.creation_time_ms,
            last_change_time_ms=descriptor.last_change_time_ms,
            last_modify_time_ms=descriptor.last_modify_time_ms,
        )

    def to_descriptor(self) -> FileDescriptor:
        return FileDescriptor(
            name=self.name,
            path=self.path,
            hash=self.hash,
            creation_time_ms=self.creation_time_ms,
            last_change_time_ms=self.last_change_time_ms,
            last_modify_time_ms=self.last_modify_time_ms,
        )


class CacheArtifact(BaseModel):
    """Persisted scan result for one (root, with_hash) pair.

    Validation rejects schema versions newer than SCHEMA_VERSION. A bare
    list of records loads as schema version 1 with no root; `with_hash` is
    then inferred from whether any record carries a hash.

    Example:
        >>> artifact = CacheArtifact.from_descriptors("/data", True, files)
        >>> raw = artifact.model_dump_json(by_alias=True)
        >>> CacheArtifact.model_validate_json(raw).to_descriptors() == files
        True
    """

    model_config = ConfigDict(populate_by_name=True)

    schema_version: int = Field(default=SCHEMA_VERSION, alias="schemaVersion", le=SCHEMA_VERSION)
    root: Optional[str] = None
    with_hash: bool = Field(default=True, alias="withHash")
    entries: List[FileDescriptorRecord] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _wrap_bare_list(cls, data: Any) -> Any:
        if not isinstance(data, list):
            return data
        return {
            "schemaVersion": 1,
            "root": None,
            "withHash": any(isinstance(record, dict) and record.get("hash") is not None for record in data),
            "entries": data,
        }

    @classmethod
    def from_descriptors(
        cls, root: str, with_hash: bool, descriptors: Sequence[FileDescriptor]
    ) -> "CacheArtifact":
        return cls(
            root=root,
            with_hash=with_hash,
            entries=[FileDescriptorRecord.from_descriptor(d) for d in descriptors],
        )

    def to_descriptors(self) -> List[FileDescriptor]:
        return [record.to_descriptor() for record in self.entries]
