"""In-memory FIFO of absolute paths awaiting reconciliation."""

from collections import deque
from typing import Deque, Iterator, Optional


class PendingQueue:
    """
    FIFO queue of absolute paths.

    Duplicates are allowed: a path may be reconciled, found deleted and
    re-created, each occupying its own slot.
    """

    def __init__(self):
        self._items: Deque[str] = deque()

    def enqueue(self, path: str) -> None:
        """Append a path to the end of the queue."""
        self._items.append(path)

    def dequeue(self) -> Optional[str]:
        """
        Remove and return the oldest path.

        Returns:
            The path, or None if the queue is empty
        """
        if not self._items:
            return None
        return self._items.popleft()

    def clear(self) -> int:
        """
        Drop every queued path.

        Returns:
            Number of paths dropped
        """
        count = len(self._items)
        self._items.clear()
        return count

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._items))
