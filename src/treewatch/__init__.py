"""
treewatch

A debounced create/update/delete event stream over a directory tree, built
on per-directory native watches.

Features:
- One native watch per directory, added and removed as the tree changes
- Per-path debouncing of noisy native notifications
- Snapshot diffing to classify changes as new, updated or removed
- Cascading events when populated directories are moved in, out or deleted
- Optional sync or async inclusion filter and glob ignore patterns
- Enumerate-only mode with watching disabled
"""

from .models import (
    EntryKind,
    EventType,
    StatRecord,
    PathEntry,
    ChangedEvent,
    RemovedEvent,
)

from .config import WatcherConfig

from .exceptions import (
    WatcherError,
    WatcherConfigError,
    WatcherAlreadyInitializedError,
    WatcherNotInitializedError,
    WatcherClosedError,
    FilterError,
)

from .backend import WatchBackend, WatchHandle, WatchdogBackend
from .watcher import TreeWatcher


__all__ = [
    # Models
    "EntryKind",
    "EventType",
    "StatRecord",
    "PathEntry",
    "ChangedEvent",
    "RemovedEvent",
    # Config
    "WatcherConfig",
    # Exceptions
    "WatcherError",
    "WatcherConfigError",
    "WatcherAlreadyInitializedError",
    "WatcherNotInitializedError",
    "WatcherClosedError",
    "FilterError",
    # Backends
    "WatchBackend",
    "WatchHandle",
    "WatchdogBackend",
    # Main entry point
    "TreeWatcher",
]

__version__ = "0.1.0"
