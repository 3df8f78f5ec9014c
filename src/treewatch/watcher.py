"""Public entry point: a debounced create/update/delete stream over a directory tree."""

import asyncio
import dataclasses
import functools
import logging
import os
from pathlib import Path
from types import MappingProxyType
from typing import Callable, List, Mapping, Optional, Union

from .backend import WatchBackend, WatchdogBackend
from .config import WatcherConfig
from .debounce import Debouncer
from .events import EventDispatcher, Subscriber
from .exceptions import (
    WatcherAlreadyInitializedError,
    WatcherClosedError,
    WatcherConfigError,
    WatcherNotInitializedError,
)
from .filters import InclusionFilter
from .fs import list_directory, stat_path
from .models import EventType, StatRecord
from .paths import join
from .reconciler import Reconciler
from .recursor import Recursor
from .tables import SnapshotTable, WatchTable

logger = logging.getLogger(__name__)


class TreeWatcher:
    """
    Watches a directory tree and reports files and directories that appear,
    change or disappear.

    One native watch is kept per tracked directory. Native notifications are
    debounced per path, then reconciled one at a time against a snapshot of
    the tree, so consumers see at most one event per settled change.

    Example:
        async with TreeWatcher("/srv/data") as watcher:
            watcher.on_changed(lambda e: print("+", e.path, e.is_new))
            watcher.on_removed(lambda e: print("-", e.path))
            ...
    """

    def __init__(
        self,
        root: Optional[Union[str, Path]] = None,
        config: Optional[WatcherConfig] = None,
        backend: Optional[WatchBackend] = None,
    ):
        """
        Initialize the watcher. Nothing touches the filesystem until initialize().

        Args:
            root: Directory to watch (overrides config.root)
            config: Watcher configuration
            backend: Native watch backend (defaults to watchdog)

        Raises:
            WatcherConfigError: If neither root nor config is given, or a
                configuration value is invalid
        """
        if config is None:
            if root is None:
                raise WatcherConfigError("either root or config is required")
            config = WatcherConfig(root=root)
        elif root is not None:
            config = dataclasses.replace(config, root=Path(root))

        self.config = config
        self._root = os.path.abspath(str(config.root))
        self._backend = backend if backend is not None else WatchdogBackend()

        self._snapshot = SnapshotTable()
        self._watches = WatchTable()
        self._dispatcher = EventDispatcher()
        self._inclusion = InclusionFilter(config)
        self._stat = functools.partial(stat_path, follow_symlinks=config.follow_symlinks)

        self._recursor = Recursor(
            self._root,
            self._snapshot,
            self._watches,
            self._inclusion,
            self._stat,
            list_directory,
            backend=self._backend if config.watch else None,
            on_native_event=self._on_native_event if config.watch else None,
        )
        self._reconciler = Reconciler(
            self._root,
            self._snapshot,
            self._watches,
            self._inclusion,
            self._stat,
            self._recursor,
            self._dispatcher,
        )
        self._debouncer: Optional[Debouncer] = None

        self._init_started = False
        self._initialized = False
        self._closed = False

    @property
    def root(self) -> str:
        """Absolute path of the watched root."""
        return self._root

    @property
    def paths(self) -> Mapping[str, StatRecord]:
        """
        Read-only view of every tracked path and its last known stats.

        Raises:
            WatcherNotInitializedError: If initialize() has not completed
        """
        if not self._initialized:
            raise WatcherNotInitializedError("paths are not available before initialize() finishes")
        return MappingProxyType(self._snapshot.as_dict())

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def pending_count(self) -> int:
        """Number of paths debouncing or queued for reconciliation."""
        debouncing = len(self._debouncer) if self._debouncer is not None else 0
        return debouncing + self._reconciler.pending_count

    def watched_directories(self) -> List[str]:
        """Relative paths of every directory with an active watch ('' is the root)."""
        return self._watches.paths()

    def subscribe(self, event_type: EventType, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback for CHANGED or REMOVED events.

        Returns:
            A function that removes the subscription
        """
        return self._dispatcher.subscribe(event_type, callback)

    def on_changed(self, callback: Subscriber) -> Callable[[], None]:
        """Subscribe to paths appearing or changing (ChangedEvent)."""
        return self.subscribe(EventType.CHANGED, callback)

    def on_removed(self, callback: Subscriber) -> Callable[[], None]:
        """Subscribe to paths disappearing (RemovedEvent)."""
        return self.subscribe(EventType.REMOVED, callback)

    async def initialize(self) -> None:
        """
        Walk the tree, record every matching path and start watching.

        Raises:
            WatcherAlreadyInitializedError: If called more than once
            WatcherClosedError: If the watcher was shut down
            OSError: If the root or any entry cannot be stat'ed or listed
            FilterError: If the filter predicate raises
        """
        if self._closed:
            raise WatcherClosedError("cannot initialize a watcher after shutdown()")
        if self._init_started:
            raise WatcherAlreadyInitializedError("cannot call initialize() twice")
        self._init_started = True

        if self.config.watch:
            loop = asyncio.get_running_loop()
            self._debouncer = Debouncer(self._reconciler.enqueue, self.config.debounce_seconds, loop)
            self._backend.start(loop)

        logger.debug(f"Scanning {self._root}")
        try:
            await self._recursor.recurse(self._root)
        except BaseException:
            if self.config.watch:
                self._watches.close_all()
                await loop.run_in_executor(None, self._backend.stop)
            raise

        self._initialized = True
        logger.info(
            f"Initialized {self._root}: {len(self._snapshot)} path(s), "
            f"{len(self._watches)} watch(es)"
        )
        self._reconciler.start()

    async def shutdown(self) -> None:
        """
        Close every watch. No events are emitted afterwards.

        Pending debounce timers and queued paths are discarded.

        Raises:
            WatcherNotInitializedError: If initialize() has not completed
            WatcherClosedError: If called more than once
        """
        if not self._initialized:
            raise WatcherNotInitializedError("cannot call shutdown() before initialize() finishes")
        if self._closed:
            raise WatcherClosedError("cannot call shutdown() twice")
        self._closed = True

        cancelled = self._debouncer.cancel_all() if self._debouncer is not None else 0
        discarded = self._reconciler.close()
        closed = self._watches.close_all()

        if self.config.watch:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, self._backend.stop)

        logger.info(
            f"Shut down {self._root}: closed {closed} watch(es), "
            f"discarded {cancelled + discarded} pending path(s)"
        )

    async def wait_idle(self) -> None:
        """Wait for the reconciliation loop in flight, if any, to finish."""
        await self._reconciler.wait_idle()

    def _on_native_event(self, directory: str, name: str) -> None:
        """Debounce a native notification for ``directory/name``."""
        if self._closed or self._debouncer is None:
            return
        full_path = join(directory, name)
        logger.debug(f"Native event: {full_path}")
        self._debouncer.schedule(full_path)

    async def __aenter__(self) -> "TreeWatcher":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        if not self._closed:
            await self.shutdown()
        return False

    def __repr__(self) -> str:
        if self._closed:
            state = "closed"
        elif self._initialized:
            state = "watching" if self.config.watch else "scanned"
        else:
            state = "new"
        return f"<TreeWatcher {self._root!r} {state}>"
