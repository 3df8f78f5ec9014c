"""Depth-first walk that populates the snapshot and watch tables."""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from .backend import NativeCallback, WatchBackend
from .filters import InclusionFilter
from .models import StatRecord
from .paths import join, to_relative
from .tables import SnapshotTable, WatchTable

logger = logging.getLogger(__name__)

StatFunc = Callable[[str], Awaitable[StatRecord]]
ListFunc = Callable[[str], Awaitable[List[str]]]


class Recursor:
    """
    Walks a directory tree, recording stats and registering watches.

    Sibling subtrees are walked concurrently; a call for a directory
    returns only after all of its children are done. Any stat or listing
    failure propagates to the caller.
    """

    def __init__(
        self,
        root: str,
        snapshot: SnapshotTable,
        watches: WatchTable,
        inclusion: InclusionFilter,
        stat: StatFunc,
        listdir: ListFunc,
        backend: Optional[WatchBackend] = None,
        on_native_event: Optional[NativeCallback] = None,
    ):
        """
        Initialize the recursor.

        Args:
            root: Absolute path of the watched root
            snapshot: Table receiving stat records
            watches: Table receiving watch handles
            inclusion: Filter applied to every path below the root
            stat: Async stat function
            listdir: Async directory listing function
            backend: Native watch backend, or None when watching is disabled
            on_native_event: Callback bound to every registered watch
        """
        self.root = root
        self.snapshot = snapshot
        self.watches = watches
        self.inclusion = inclusion
        self.stat = stat
        self.listdir = listdir
        self.backend = backend
        self.on_native_event = on_native_event

    @property
    def watching(self) -> bool:
        return self.backend is not None and self.on_native_event is not None

    async def recurse(self, full_path: str) -> None:
        """
        Record ``full_path`` and, if it is a directory, everything beneath it.

        Raises:
            OSError: If a stat, listing or watch registration fails
            FilterError: If the filter predicate raises
        """
        path = to_relative(self.root, full_path)
        stats = await self.stat(full_path)

        if path:
            if not await self.inclusion.accepts(path, stats):
                return
            self.snapshot.set(path, stats)

        if not stats.is_dir():
            return

        if self.watching and path not in self.watches:
            self.watches.add(path, self.backend.watch_directory(full_path, self.on_native_event))

        children = await self.listdir(full_path)
        if not children:
            return

        # Let every sibling finish before reporting a failure, so no walk
        # keeps mutating the tables after this call returns
        results = await asyncio.gather(
            *(self.recurse(join(full_path, child)) for child in children),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
