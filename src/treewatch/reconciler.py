"""Single-flight reconciliation of queued paths against the snapshot."""

import asyncio
import logging
from typing import Optional

from .events import EventDispatcher, WatchEvent
from .exceptions import FilterError
from .filters import InclusionFilter
from .models import ChangedEvent, RemovedEvent, StatRecord
from .paths import to_relative
from .queue import PendingQueue
from .recursor import Recursor, StatFunc
from .tables import SnapshotTable, WatchTable

logger = logging.getLogger(__name__)

# A directory disappearing or becoming unreadable mid-walk; its parent's
# watch reports the final state
_VANISHED_ERRORS = (FileNotFoundError, NotADirectoryError, PermissionError)


class Reconciler:
    """
    Drains the pending queue, diffing each path's current state against the
    snapshot and emitting classified events.

    Only one drain loop runs at a time. Paths queued before start() is
    called are held until then.
    """

    def __init__(
        self,
        root: str,
        snapshot: SnapshotTable,
        watches: WatchTable,
        inclusion: InclusionFilter,
        stat: StatFunc,
        recursor: Recursor,
        dispatcher: EventDispatcher,
    ):
        """
        Initialize the reconciler.

        Args:
            root: Absolute path of the watched root
            snapshot: Snapshot table to diff against and update
            watches: Watch table to extend or tear down
            inclusion: Filter applied to every reconciled path
            stat: Async stat function
            recursor: Recursor used for newly discovered directories
            dispatcher: Receives every emitted event
        """
        self.root = root
        self.snapshot = snapshot
        self.watches = watches
        self.inclusion = inclusion
        self.stat = stat
        self.recursor = recursor
        self.dispatcher = dispatcher

        self._queue = PendingQueue()
        self._processing = False
        self._started = False
        self._closed = False
        self._task: Optional[asyncio.Task] = None

    def enqueue(self, full_path: str) -> None:
        """Queue an absolute path and make sure a drain loop will pick it up."""
        if self._closed:
            return
        self._queue.enqueue(full_path)
        self._kick()

    def start(self) -> None:
        """Allow draining; called once the initial snapshot is complete."""
        self._started = True
        self._kick()

    def close(self) -> int:
        """
        Stop draining and discard queued paths.

        A drain loop in flight stops before its next entry.

        Returns:
            Number of queued paths discarded
        """
        self._closed = True
        return self._queue.clear()

    async def wait_idle(self) -> None:
        """Wait until the current drain loop, if any, has finished."""
        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})

    @property
    def is_processing(self) -> bool:
        return self._processing

    @property
    def pending_count(self) -> int:
        return len(self._queue)

    def _kick(self) -> None:
        if self._processing or not self._started or self._closed or not self._queue:
            return
        self._processing = True
        self._task = asyncio.get_running_loop().create_task(self._drain())
        self._task.add_done_callback(self._on_drain_done)

    async def _drain(self) -> None:
        try:
            while self._queue and not self._closed:
                full_path = self._queue.dequeue()
                try:
                    await self.reconcile(full_path)
                except FilterError as e:
                    logger.error(f"Skipping {full_path}: {e}")
        finally:
            self._processing = False

    def _on_drain_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(
                f"Reconciliation stopped with {len(self._queue)} path(s) still queued",
                exc_info=error,
            )

    async def reconcile(self, full_path: str) -> None:
        """
        Bring the tables up to date for one absolute path and emit events.

        Raises:
            FilterError: If the filter predicate raises
            OSError: If registering a watch fails for a reason other than
                the directory disappearing
        """
        try:
            path = to_relative(self.root, full_path)
        except ValueError:
            logger.debug(f"Ignoring path outside the root: {full_path}")
            return
        if not path:
            return

        try:
            stats: Optional[StatRecord] = await self.stat(full_path)
        except OSError:
            # Any stat failure counts as removal
            stats = None

        if self._closed:
            return

        if stats is None:
            self._remove(path)
            return

        if not await self.inclusion.accepts(path, stats):
            logger.debug(f"Filtered out: {path}")
            return

        previous = self.snapshot.get(path)
        is_new = previous is None
        if previous is not None and previous.is_dir() and not stats.is_dir():
            self._drop_descendants(path)

        self.snapshot.set(path, stats)
        self._emit(ChangedEvent(path=path, stats=stats, is_new=is_new))

        if stats.is_dir() and path not in self.watches:
            try:
                await self.recursor.recurse(full_path)
            except _VANISHED_ERRORS as e:
                logger.warning(f"Directory changed while scanning {path}: {e}")

            for nested, nested_stats in self.snapshot.nested_under(path):
                self._emit(ChangedEvent(path=nested, stats=nested_stats, is_new=True))

    def _remove(self, path: str) -> None:
        previous = self.snapshot.pop(path)
        if previous is None:
            # Already reconciled away
            self.watches.close_within(path)
            return

        self._emit(RemovedEvent(path=path, stats=previous))
        if previous.is_dir() or self.watches.has_within(path):
            self._drop_descendants(path)

    def _drop_descendants(self, path: str) -> None:
        closed = self.watches.close_within(path)
        removed = self.snapshot.pop_nested(path)
        logger.debug(f"Dropped {path}: {closed} watch(es), {len(removed)} descendant(s)")
        for nested, nested_stats in removed:
            self._emit(RemovedEvent(path=nested, stats=nested_stats))

    def _emit(self, event: WatchEvent) -> None:
        if self._closed:
            return
        self.dispatcher.emit(event)
