"""Tests for tables and paths modules."""

import os

import pytest

from treewatch.backend import WatchHandle
from treewatch.models import EntryKind, StatRecord
from treewatch.paths import is_nested, is_within, join, to_relative
from treewatch.tables import SnapshotTable, WatchTable

FILE = StatRecord(kind=EntryKind.FILE)
DIRECTORY = StatRecord(kind=EntryKind.DIRECTORY)


class TestPaths:
    """Tests for relative path helpers."""

    def test_to_relative(self, tmp_path):
        root = str(tmp_path)
        assert to_relative(root, root) == ""
        assert to_relative(root, join(root, "a")) == "a"
        assert to_relative(root, os.path.join(root, "a", "b")) == "a/b"

    def test_to_relative_outside_root(self, tmp_path):
        root = str(tmp_path / "root")
        with pytest.raises(ValueError):
            to_relative(root, str(tmp_path / "rootless"))
        with pytest.raises(ValueError):
            to_relative(root, str(tmp_path))

    def test_is_nested(self):
        assert is_nested("a/b", "a")
        assert is_nested("a/b/c", "a")
        assert not is_nested("a", "a")
        assert not is_nested("ab", "a")
        assert is_nested("a", "")

    def test_is_within(self):
        assert is_within("a", "a")
        assert is_within("a/b", "a")
        assert not is_within("ab", "a")


class TestSnapshotTable:
    """Tests for SnapshotTable class."""

    def test_set_get_pop(self):
        table = SnapshotTable()
        table.set("a", FILE)

        assert "a" in table
        assert table.get("a") is FILE
        assert table.pop("a") is FILE
        assert table.pop("a") is None
        assert len(table) == 0

    def test_root_is_never_recorded(self):
        table = SnapshotTable()
        with pytest.raises(ValueError):
            table.set("", DIRECTORY)

    def test_nested_under(self):
        table = SnapshotTable()
        table.set("a", DIRECTORY)
        table.set("a/b", FILE)
        table.set("a/c", DIRECTORY)
        table.set("a/c/d", FILE)
        table.set("ab", FILE)

        nested = dict(table.nested_under("a"))

        assert set(nested) == {"a/b", "a/c", "a/c/d"}
        assert len(table) == 5

    def test_pop_nested(self):
        table = SnapshotTable()
        table.set("a", DIRECTORY)
        table.set("a/b", FILE)
        table.set("ab", FILE)

        removed = table.pop_nested("a")

        assert removed == [("a/b", FILE)]
        assert set(table) == {"a", "ab"}


class TestWatchTable:
    """Tests for WatchTable class."""

    @staticmethod
    def handle(path, closed):
        return WatchHandle(path, lambda: closed.append(path))

    def test_add_and_contains(self):
        closed = []
        table = WatchTable()
        table.add("", self.handle("/r", closed))
        table.add("a", self.handle("/r/a", closed))

        assert "" in table
        assert "a" in table
        assert sorted(table.paths()) == ["", "a"]

    def test_add_replaces_stale_handle(self):
        closed = []
        table = WatchTable()
        table.add("a", self.handle("/r/a", closed))
        table.add("a", self.handle("/r/a-again", closed))

        assert closed == ["/r/a"]
        assert len(table) == 1

    def test_close_within(self):
        closed = []
        table = WatchTable()
        for path in ("", "a", "a/b", "ab"):
            table.add(path, self.handle(f"/r/{path}", closed))

        assert table.has_within("a")
        assert table.close_within("a") == 2

        assert sorted(closed) == ["/r/a", "/r/a/b"]
        assert sorted(table.paths()) == ["", "ab"]
        assert not table.has_within("a")

    def test_close_all(self):
        closed = []
        table = WatchTable()
        table.add("", self.handle("/r", closed))
        table.add("a", self.handle("/r/a", closed))

        assert table.close_all() == 2
        assert len(table) == 0
        assert len(closed) == 2


class TestWatchHandle:
    """Tests for WatchHandle class."""

    def test_close_is_idempotent(self):
        calls = []
        handle = WatchHandle("/r", lambda: calls.append(1))

        handle.close()
        handle.close()

        assert handle.closed
        assert calls == [1]
