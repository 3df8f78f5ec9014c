"""
Pytest configuration for the treewatch test suite.

Provides an in-memory watch backend that lets tests fire native
notifications on demand, plus an event log that records duplicates.
"""

import asyncio
import os
import threading
from typing import Callable, Dict, List, Set

import pytest

from treewatch.backend import NativeCallback, WatchBackend, WatchHandle
from treewatch.models import ChangedEvent, RemovedEvent


class ManualBackend(WatchBackend):
    """Watch backend whose notifications are fired by the test."""

    def __init__(self):
        self.watches: Dict[str, NativeCallback] = {}
        self.closed: List[str] = []
        self.started = False
        self.stopped = False
        self.stop_thread = None
        # Full path -> error raised by the next watch_directory() call for it
        self.failures: Dict[str, OSError] = {}

    def start(self, loop: asyncio.AbstractEventLoop) -> None:
        self.started = True

    def stop(self) -> None:
        self.stopped = True
        self.stop_thread = threading.get_ident()

    def watch_directory(self, path: str, callback: NativeCallback) -> WatchHandle:
        error = self.failures.pop(path, None)
        if error is not None:
            raise error
        self.watches[path] = callback
        return WatchHandle(path, lambda: self._close(path))

    def _close(self, path: str) -> None:
        self.watches.pop(path, None)
        self.closed.append(path)

    def fire(self, full_path) -> bool:
        """Notify the watch on the parent of ``full_path``, if there is one."""
        parent, name = os.path.split(str(full_path))
        callback = self.watches.get(parent)
        if callback is None:
            return False
        callback(parent, name)
        return True

    def is_watching(self, path) -> bool:
        return str(path) in self.watches


class EventLog:
    """Records watcher events as readable strings, noting duplicates."""

    def __init__(self):
        self.events: Set[str] = set()
        self.duplicates: List[str] = []
        self.history: List[object] = []

    @staticmethod
    def _kind(stats) -> str:
        if stats.is_file():
            return "file"
        if stats.is_dir():
            return "directory"
        return "other"

    def _add(self, text: str) -> None:
        if text in self.events:
            self.duplicates.append(text)
        self.events.add(text)

    def on_changed(self, event: ChangedEvent) -> None:
        self.history.append(event)
        state = "new" if event.is_new else "updated"
        self._add(f"{state} {self._kind(event.stats)} {event.path}")

    def on_removed(self, event: RemovedEvent) -> None:
        self.history.append(event)
        self._add(f"deleted {self._kind(event.stats)} {event.path}")

    def attach(self, watcher) -> "EventLog":
        watcher.on_changed(self.on_changed)
        watcher.on_removed(self.on_removed)
        return self

    def clear(self) -> None:
        self.events.clear()
        self.duplicates.clear()
        self.history.clear()

    def __len__(self) -> int:
        return len(self.events)

    def __contains__(self, text: str) -> bool:
        return text in self.events


async def settle(watcher, delay: float = 0.05) -> None:
    """Let debounce timers fire, then wait for reconciliation to finish."""
    await asyncio.sleep(delay)
    await watcher.wait_idle()


@pytest.fixture
def backend():
    return ManualBackend()


@pytest.fixture
def event_log():
    return EventLog()


@pytest.fixture
def settle_watcher() -> Callable:
    return settle
