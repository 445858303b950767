"""Data models for version keeper."""

import posixpath
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional


class EntryType(Enum):
    """Kinds of filesystem entries reported by listings."""
    FILE = "file"
    DIRECTORY = "directory"


@dataclass
class WalkEntry:
    """A single entry yielded by the directory walker."""
    relative_path: str
    absolute_path: str
    name: str
    entry_type: EntryType
    size: int
    modified_at: Optional[int]

    @property
    def is_dir(self) -> bool:
        return self.entry_type is EntryType.DIRECTORY


@dataclass
class ConflictRecord:
    """A conflict file found in a synced folder."""
    relative_path: str
    inferred_original_name: str
    size_bytes: int
    modified_at: Optional[int] = None

    @property
    def original_relative_path(self) -> str:
        """Relative path of the file this conflict was forked from."""
        parent = posixpath.dirname(self.relative_path)
        return posixpath.join(parent, self.inferred_original_name)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "ConflictRecord":
        return cls(**data)


@dataclass
class VersionEntry:
    """A file or directory inside the versions directory."""
    file_name: str
    original_name: str
    entry_type: EntryType
    size_bytes: Optional[int] = None
    modified_at: Optional[int] = None
    version_timestamp: Optional[str] = None

    @property
    def is_dir(self) -> bool:
        return self.entry_type is EntryType.DIRECTORY

    def to_dict(self) -> dict:
        data = asdict(self)
        data["entry_type"] = self.entry_type.value
        return data


@dataclass
class StorageReport:
    """Aggregate size of the versions directory."""
    total_bytes: int
    total_formatted: str
    file_count: int
    exists: bool

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class RetentionResult:
    """Outcome of a pruning pass over the versions directory."""
    files_deleted: int
    bytes_freed: int
    bytes_freed_formatted: str
    success: bool = True
    error: Optional[str] = None
    skipped: int = 0

    def to_dict(self) -> dict:
        return asdict(self)
