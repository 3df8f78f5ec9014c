"""
Snapshot and watch tables keyed by root-relative path.

Both tables are owned by a single watcher and only touched from its event
loop thread, so they carry no locking.
"""

from typing import Dict, Iterator, List, Optional, Tuple

from .backend import WatchHandle
from .models import StatRecord
from .paths import is_nested, is_within


class SnapshotTable:
    """Last observed stat record for every tracked path under the root."""

    def __init__(self):
        self._entries: Dict[str, StatRecord] = {}

    def get(self, path: str) -> Optional[StatRecord]:
        return self._entries.get(path)

    def set(self, path: str, stats: StatRecord) -> None:
        """Record the stats for ``path``. The root itself is never recorded."""
        if not path:
            raise ValueError("the root is never recorded in the snapshot")
        self._entries[path] = stats

    def pop(self, path: str) -> Optional[StatRecord]:
        return self._entries.pop(path, None)

    def nested_under(self, path: str) -> List[Tuple[str, StatRecord]]:
        """
        Get every entry strictly nested under ``path``.

        Returns:
            List of (relative_path, stats) pairs
        """
        return [(p, s) for p, s in self._entries.items() if is_nested(p, path)]

    def pop_nested(self, path: str) -> List[Tuple[str, StatRecord]]:
        """
        Remove and return every entry strictly nested under ``path``.

        Returns:
            List of removed (relative_path, stats) pairs
        """
        removed = self.nested_under(path)
        for nested, _ in removed:
            del self._entries[nested]
        return removed

    def as_dict(self) -> Dict[str, StatRecord]:
        """The underlying mapping. Callers must not mutate it."""
        return self._entries

    def __contains__(self, path: str) -> bool:
        return path in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))


class WatchTable:
    """Active native watch for every tracked directory, and the root under ''."""

    def __init__(self):
        self._watches: Dict[str, WatchHandle] = {}

    def add(self, path: str, handle: WatchHandle) -> None:
        """
        Register the watch for a directory, closing any stale one it replaces.
        """
        previous = self._watches.get(path)
        if previous is not None and previous is not handle:
            previous.close()
        self._watches[path] = handle

    def has_within(self, path: str) -> bool:
        """Check whether any watch is on ``path`` or nested under it."""
        return any(is_within(watched, path) for watched in self._watches)

    def close_within(self, path: str) -> int:
        """
        Close and forget every watch on ``path`` or nested under it.

        Returns:
            Number of watches closed
        """
        doomed = [watched for watched in self._watches if is_within(watched, path)]
        for watched in doomed:
            self._watches.pop(watched).close()
        return len(doomed)

    def close_all(self) -> int:
        """
        Close and forget every watch.

        Returns:
            Number of watches closed
        """
        count = len(self._watches)
        for handle in self._watches.values():
            handle.close()
        self._watches.clear()
        return count

    def paths(self) -> List[str]:
        return list(self._watches)

    def __contains__(self, path: str) -> bool:
        return path in self._watches

    def __len__(self) -> int:
        return len(self._watches)
