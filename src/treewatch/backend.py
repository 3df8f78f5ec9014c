"""Native per-directory watch primitive, backed by the watchdog library."""

import asyncio
import logging
import os
import threading
from typing import Callable, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)

# (directory, child_name), always invoked on the event loop thread
NativeCallback = Callable[[str, str], None]

# Events that never change what stat() reports
_IGNORED_EVENT_TYPES = frozenset({"opened", "closed_no_write"})


class WatchHandle:
    """An active watch on one directory. close() is idempotent."""

    def __init__(self, path: str, on_close: Callable[[], None]):
        self.path = path
        self._on_close = on_close
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._on_close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<WatchHandle {self.path!r} {state}>"


class WatchBackend:
    """
    Base interface for native watch primitives.

    A backend reports "something changed under this directory, possibly
    naming a child". It makes no promise about duplicates, ordering or
    event kinds; the watcher re-stats every reported path.
    """

    def start(self, loop: asyncio.AbstractEventLoop) -> None:
        """Prepare to deliver callbacks on ``loop``."""
        raise NotImplementedError

    def stop(self) -> None:
        """Stop delivering callbacks and release all watches."""
        raise NotImplementedError

    def watch_directory(self, path: str, callback: NativeCallback) -> WatchHandle:
        """
        Start watching a single directory, non-recursively.

        Raises:
            OSError: If the directory cannot be watched, including when the
                host runs out of watch descriptors
        """
        raise NotImplementedError


class DirectoryEventHandler(FileSystemEventHandler):
    """Handler that converts watchdog events into (directory, child) notifications."""

    def __init__(
        self,
        directory: str,
        callback: NativeCallback,
        loop: asyncio.AbstractEventLoop,
    ):
        super().__init__()
        self.directory = directory
        self.callback = callback
        self.loop = loop

    def _notify(self, path: str) -> None:
        """Forward a changed path to the callback on the event loop thread."""
        if path == self.directory:
            # The watched directory itself changed; report it as a child of its parent
            parent, name = os.path.split(path)
        else:
            parent, name = os.path.dirname(path), os.path.basename(path)
            if parent != self.directory:
                return

        if not name or self.loop.is_closed():
            return
        try:
            self.loop.call_soon_threadsafe(self.callback, parent, name)
        except RuntimeError:
            # Loop closed between the check and the call
            logger.debug(f"Dropped native event for {path}: event loop is closed")

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.event_type in _IGNORED_EVENT_TYPES:
            return
        self._notify(os.fsdecode(event.src_path))
        dest_path = getattr(event, "dest_path", "")
        if dest_path:
            self._notify(os.fsdecode(dest_path))


class WatchdogBackend(WatchBackend):
    """
    Watch backend using a single watchdog observer.

    Each directory gets its own non-recursive schedule, so watches can be
    added and removed individually as the tree changes.
    """

    def __init__(self, observer_factory: Callable[[], Observer] = Observer):
        """
        Initialize the backend.

        Args:
            observer_factory: Callable creating the watchdog observer
        """
        self._observer_factory = observer_factory
        self._observer: Optional[Observer] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._lock = threading.Lock()

    def start(self, loop: asyncio.AbstractEventLoop) -> None:
        with self._lock:
            if self._observer is not None:
                return
            self._loop = loop
            self._observer = self._observer_factory()
            self._observer.start()
        logger.debug("Watchdog observer started")

    def stop(self) -> None:
        with self._lock:
            observer = self._observer
            self._observer = None
        if observer is None:
            return
        observer.stop()
        observer.join(timeout=5.0)
        logger.debug("Watchdog observer stopped")

    def watch_directory(self, path: str, callback: NativeCallback) -> WatchHandle:
        with self._lock:
            if self._observer is None or self._loop is None:
                raise RuntimeError("backend is not started")
            handler = DirectoryEventHandler(path, callback, self._loop)
            watch = self._observer.schedule(handler, path, recursive=False)

        def unschedule() -> None:
            with self._lock:
                if self._observer is not None:
                    self._observer.unschedule(watch)

        return WatchHandle(path, unschedule)

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._observer is not None
