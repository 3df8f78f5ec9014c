"""Inclusion filter combining ignore patterns with a user predicate."""

import inspect
import logging
from typing import Optional

from .config import FilterFunc, WatcherConfig
from .exceptions import FilterError
from .models import PathEntry, StatRecord

logger = logging.getLogger(__name__)


class InclusionFilter:
    """
    Decides whether a path is tracked.

    Ignore patterns are checked first and short-circuit; the user predicate
    may be a plain function or a coroutine function.
    """

    def __init__(self, config: WatcherConfig):
        self.config = config
        self.predicate: Optional[FilterFunc] = config.filter

    async def accepts(self, path: str, stats: StatRecord) -> bool:
        """
        Check whether ``path`` should be tracked.

        Args:
            path: Root-relative path
            stats: Current stat record of the path

        Returns:
            True if the path passes the filter

        Raises:
            FilterError: If the user predicate raises
        """
        if self.config.ignore_patterns and self.config.should_ignore(path):
            logger.debug(f"Ignored by pattern: {path}")
            return False

        if self.predicate is None:
            return True

        try:
            result = self.predicate(PathEntry(path=path, stats=stats))
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            raise FilterError(f"filter failed for '{path}': {e}", path) from e

        return bool(result)
