"""Custom exceptions for the treewatch package."""


class WatcherError(Exception):
    """Base exception for all watcher errors."""
    pass


class WatcherConfigError(WatcherError, ValueError):
    """Watcher configuration value is invalid."""
    pass


class WatcherAlreadyInitializedError(WatcherError):
    """initialize() was called more than once."""
    pass


class WatcherNotInitializedError(WatcherError):
    """Watcher has not finished initializing."""
    pass


class WatcherClosedError(WatcherError):
    """Watcher has already been shut down."""
    pass


class FilterError(WatcherError):
    """The inclusion filter raised while evaluating a path."""

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path
