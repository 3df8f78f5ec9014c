"""Configuration for the treewatch package."""

import fnmatch
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, Union

from .exceptions import WatcherConfigError
from .models import PathEntry

FilterFunc = Callable[[PathEntry], Union[bool, Awaitable[bool]]]

ENV_PREFIX = "TREEWATCH_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class WatcherConfig:
    """
    Configuration options for a tree watcher.

    Attributes:
        root: Directory whose tree is watched
        filter: Optional predicate over a PathEntry deciding whether a path
            is tracked; may return a bool or an awaitable of one
        watch: Whether to watch for changes, or only enumerate once
        debounce_ms: Quiet period before a native notification is reconciled
        ignore_patterns: Glob patterns for paths that are never tracked
        follow_symlinks: Whether stat follows symbolic links
    """
    root: Path
    filter: Optional[FilterFunc] = None
    watch: bool = True
    debounce_ms: int = 10
    ignore_patterns: List[str] = field(default_factory=list)
    follow_symlinks: bool = True

    def __post_init__(self):
        if isinstance(self.root, str):
            self.root = Path(self.root)
        if not isinstance(self.root, Path):
            raise WatcherConfigError("root must be a string or a Path")
        if self.filter is not None and not callable(self.filter):
            raise WatcherConfigError("filter must be callable")
        if not isinstance(self.watch, bool):
            raise WatcherConfigError("watch must be a boolean")
        if isinstance(self.debounce_ms, bool) or not isinstance(self.debounce_ms, int):
            raise WatcherConfigError("debounce_ms must be an integer")
        if self.debounce_ms < 0:
            raise WatcherConfigError("debounce_ms must not be negative")
        if isinstance(self.ignore_patterns, str):
            raise WatcherConfigError("ignore_patterns must be a list of patterns")

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000.0

    def should_ignore(self, relative_path: str) -> bool:
        """
        Check if a root-relative path should be ignored based on ignore patterns.

        Args:
            relative_path: '/'-separated path relative to the root

        Returns:
            True if the path should be ignored
        """
        name = relative_path.rsplit("/", 1)[-1]

        for pattern in self.ignore_patterns:
            if fnmatch.fnmatch(name, pattern):
                return True
            if fnmatch.fnmatch(relative_path, pattern):
                return True
            if fnmatch.fnmatch(relative_path, f"*/{pattern}"):
                return True

        return False

    @classmethod
    def from_env(cls, root: Union[str, Path], prefix: str = ENV_PREFIX) -> "WatcherConfig":
        """
        Build a config for ``root`` from environment variables.

        Reads ``<prefix>DEBOUNCE_MS``, ``<prefix>WATCH``, ``<prefix>IGNORE``
        (comma-separated) and ``<prefix>FOLLOW_SYMLINKS``; unset variables
        keep their defaults.
        """
        kwargs = {}

        debounce = os.environ.get(f"{prefix}DEBOUNCE_MS")
        if debounce:
            try:
                kwargs["debounce_ms"] = int(debounce)
            except ValueError:
                raise WatcherConfigError(f"{prefix}DEBOUNCE_MS must be an integer: {debounce!r}")

        watch = os.environ.get(f"{prefix}WATCH")
        if watch:
            kwargs["watch"] = _parse_bool(f"{prefix}WATCH", watch)

        ignore = os.environ.get(f"{prefix}IGNORE")
        if ignore:
            kwargs["ignore_patterns"] = [p.strip() for p in ignore.split(",") if p.strip()]

        follow = os.environ.get(f"{prefix}FOLLOW_SYMLINKS")
        if follow:
            kwargs["follow_symlinks"] = _parse_bool(f"{prefix}FOLLOW_SYMLINKS", follow)

        return cls(root=root, **kwargs)


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise WatcherConfigError(f"{name} must be a boolean: {value!r}")
