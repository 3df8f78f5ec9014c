"""Async stat and directory listing, run in the loop's default executor."""

import asyncio
import os
from typing import List

from .models import StatRecord


async def stat_path(path: str, follow_symlinks: bool = True) -> StatRecord:
    """
    Stat a path without blocking the event loop.

    Raises:
        OSError: If the path cannot be stat'ed
    """
    loop = asyncio.get_running_loop()
    if follow_symlinks:
        result = await loop.run_in_executor(None, os.stat, path)
    else:
        result = await loop.run_in_executor(None, os.lstat, path)
    return StatRecord.from_stat_result(result)


async def list_directory(path: str) -> List[str]:
    """
    List the child names of a directory without blocking the event loop.

    Raises:
        OSError: If the directory cannot be listed
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, os.listdir, path)
