#!/usr/bin/env python3
"""
Directory tree watcher demo.

This example demonstrates:
1. Initial scan - the snapshot of a small tree
2. Live events - creates, updates, renames and a cascading delete
3. Filtering - a predicate that hides build output

Usage:
    python examples/watch_tree_demo.py

The demo will:
- Create a temporary directory structure
- Start a TreeWatcher on it
- Create/modify/rename/delete files and directories
- Show events being received
- Shut down and clean up
"""

import asyncio
import logging
import shutil
import sys
import tempfile
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from treewatch import ChangedEvent, RemovedEvent, TreeWatcher, WatcherConfig


def print_changed(event: ChangedEvent):
    icon = "➕" if event.is_new else "📝"
    kind = "dir " if event.stats.is_dir() else "file"
    print(f"[EVENT] {icon} {kind} {event.path}")


def print_removed(event: RemovedEvent):
    kind = "dir " if event.stats.is_dir() else "file"
    print(f"[EVENT] ❌ {kind} {event.path}")


def skip_build_output(entry):
    return not entry.path.split("/")[0] == "build"


async def step(title: str, delay: float = 0.5):
    print(f"\n[DEMO] {title}")
    await asyncio.sleep(delay)


async def main(demo_dir: Path):
    (demo_dir / "src").mkdir()
    (demo_dir / "src" / "app.py").write_text("print('hello')\n")
    (demo_dir / "README.md").write_text("# Demo\n")
    (demo_dir / "build").mkdir()
    (demo_dir / "build" / "app.pyc").write_bytes(b"\x00")

    config = WatcherConfig(root=demo_dir, filter=skip_build_output, debounce_ms=50)

    async with TreeWatcher(config=config) as watcher:
        print(f"[DEMO] Watching {watcher.root}")
        for path, stats in sorted(watcher.paths.items()):
            print(f"[SNAPSHOT] {'dir ' if stats.is_dir() else 'file'} {path}")

        watcher.on_changed(print_changed)
        watcher.on_removed(print_removed)

        # === Step 1: Create a file ===
        (demo_dir / "notes.txt").write_text("first")
        await step("Created notes.txt")

        # === Step 2: Modify it ===
        (demo_dir / "notes.txt").write_text("second")
        await step("Modified notes.txt")

        # === Step 3: Create a nested directory ===
        (demo_dir / "src" / "pkg").mkdir()
        (demo_dir / "src" / "pkg" / "__init__.py").write_text("")
        await step("Created src/pkg")

        # === Step 4: Rename a file ===
        (demo_dir / "README.md").rename(demo_dir / "README.rst")
        await step("Renamed README.md -> README.rst")

        # === Step 5: Write build output (filtered, no events expected) ===
        (demo_dir / "build" / "other.pyc").write_bytes(b"\x00")
        await step("Wrote build/other.pyc")

        # === Step 6: Delete a whole directory ===
        shutil.rmtree(demo_dir / "src")
        await step("Deleted src/")

        await watcher.wait_idle()
        print(f"\n[DEMO] {len(watcher.paths)} path(s) tracked at shutdown")

    print("[DEMO] Watcher shut down")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    demo_dir = Path(tempfile.mkdtemp(prefix="treewatch_demo_"))
    try:
        asyncio.run(main(demo_dir))
    except KeyboardInterrupt:
        print("\n[DEMO] Interrupted")
    finally:
        shutil.rmtree(demo_dir, ignore_errors=True)
