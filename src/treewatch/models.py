"""Data models for the treewatch package."""

import os
import stat as stat_module
from dataclasses import dataclass
from enum import Enum


class EntryKind(Enum):
    """Type of a filesystem entry as far as the watcher cares."""
    FILE = "file"
    DIRECTORY = "directory"
    OTHER = "other"


class EventType(Enum):
    """The two event streams a watcher emits."""
    CHANGED = "changed"
    REMOVED = "removed"


@dataclass(frozen=True)
class StatRecord:
    """
    The subset of stat data the watcher records for each path.

    Only presence and kind are used for diffing; size and mtime are
    carried along for consumers.

    Attributes:
        kind: Whether the entry is a file, a directory, or something else
        size: Size in bytes
        mtime: Modification time as a Unix timestamp
        mode: Raw st_mode bits
    """
    kind: EntryKind
    size: int = 0
    mtime: float = 0.0
    mode: int = 0

    @classmethod
    def from_stat_result(cls, result: os.stat_result) -> "StatRecord":
        """Build a record from an os.stat() result."""
        if stat_module.S_ISDIR(result.st_mode):
            kind = EntryKind.DIRECTORY
        elif stat_module.S_ISREG(result.st_mode):
            kind = EntryKind.FILE
        else:
            kind = EntryKind.OTHER
        return cls(
            kind=kind,
            size=result.st_size,
            mtime=result.st_mtime,
            mode=result.st_mode,
        )

    def is_file(self) -> bool:
        return self.kind is EntryKind.FILE

    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "kind": self.kind.value,
            "size": self.size,
            "mtime": self.mtime,
            "mode": self.mode,
        }


@dataclass(frozen=True)
class PathEntry:
    """A root-relative path together with its stat record, as seen by filters."""
    path: str
    stats: StatRecord


@dataclass(frozen=True)
class ChangedEvent:
    """
    A path appeared or changed.

    Attributes:
        path: Root-relative path, always '/'-separated
        stats: Current stat record
        is_new: True if the path was not previously known
    """
    path: str
    stats: StatRecord
    is_new: bool

    @property
    def event_type(self) -> EventType:
        return EventType.CHANGED

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "event_type": self.event_type.value,
            "path": self.path,
            "stats": self.stats.to_dict(),
            "is_new": self.is_new,
        }


@dataclass(frozen=True)
class RemovedEvent:
    """
    A previously known path disappeared.

    Attributes:
        path: Root-relative path, always '/'-separated
        stats: Last known stat record
    """
    path: str
    stats: StatRecord

    @property
    def event_type(self) -> EventType:
        return EventType.REMOVED

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "event_type": self.event_type.value,
            "path": self.path,
            "stats": self.stats.to_dict(),
        }
