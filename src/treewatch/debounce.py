"""Per-path debouncing of native watch notifications."""

import asyncio
import logging
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)


class Debouncer:
    """
    Collapses bursts of notifications for the same absolute path.

    Every schedule() for a path cancels that path's outstanding timer and
    starts a new one, so only the last notification in a quiet-period
    window reaches ``on_ready``.
    """

    def __init__(
        self,
        on_ready: Callable[[str], None],
        debounce_seconds: float,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        """
        Initialize the debouncer.

        Args:
            on_ready: Called with the path once its quiet period elapses
            debounce_seconds: Length of the quiet period
            loop: Event loop to schedule timers on (defaults to the running loop)
        """
        self.on_ready = on_ready
        self.debounce_seconds = debounce_seconds
        self._loop = loop
        self._timers: Dict[str, asyncio.TimerHandle] = {}

    def schedule(self, path: str) -> None:
        """(Re)start the quiet-period timer for ``path``."""
        timer = self._timers.pop(path, None)
        if timer is not None:
            timer.cancel()

        loop = self._loop or asyncio.get_running_loop()
        self._timers[path] = loop.call_later(self.debounce_seconds, self._fire, path)

    def _fire(self, path: str) -> None:
        del self._timers[path]
        self.on_ready(path)

    def cancel(self, path: str) -> bool:
        """
        Cancel the pending timer for ``path``.

        Returns:
            True if a timer was cancelled
        """
        timer = self._timers.pop(path, None)
        if timer is None:
            return False
        timer.cancel()
        return True

    def cancel_all(self) -> int:
        """
        Cancel every pending timer.

        Returns:
            Number of timers cancelled
        """
        count = len(self._timers)
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()
        if count:
            logger.debug(f"Cancelled {count} pending debounce timer(s)")
        return count

    def __len__(self) -> int:
        return len(self._timers)

    def __contains__(self, path: str) -> bool:
        return path in self._timers
