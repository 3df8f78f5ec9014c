"""Helpers for converting between absolute and root-relative paths."""

import os

SEPARATOR = "/"


def join(directory: str, name: str) -> str:
    """Join a directory and a child name into an absolute path."""
    return os.path.join(directory, name)


def to_relative(root: str, full_path: str) -> str:
    """
    Convert an absolute path under ``root`` to a '/'-separated relative path.

    The root itself maps to the empty string.

    Raises:
        ValueError: If ``full_path`` is not ``root`` or nested under it
    """
    if full_path == root:
        return ""
    prefix = root if root.endswith(os.sep) else root + os.sep
    if not full_path.startswith(prefix):
        raise ValueError(f"'{full_path}' is not under root '{root}'")
    relative = full_path[len(prefix):]
    if os.sep != SEPARATOR:
        relative = relative.replace(os.sep, SEPARATOR)
    return relative


def is_within(path: str, parent: str) -> bool:
    """Check whether ``path`` equals ``parent`` or is nested under it."""
    return path == parent or is_nested(path, parent)


def is_nested(path: str, parent: str) -> bool:
    """Check whether relative ``path`` is strictly nested under ``parent``."""
    if not parent:
        return bool(path)
    return path.startswith(parent + SEPARATOR)
