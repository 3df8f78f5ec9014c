"""Tests for config module."""

import pytest
from pathlib import Path

from treewatch.config import WatcherConfig
from treewatch.exceptions import WatcherConfigError, WatcherError


class TestWatcherConfig:
    """Tests for WatcherConfig class."""

    def test_default_values(self, tmp_path):
        config = WatcherConfig(root=tmp_path)
        assert config.root == tmp_path
        assert config.filter is None
        assert config.watch is True
        assert config.debounce_ms == 10
        assert config.ignore_patterns == []
        assert config.follow_symlinks is True

    def test_string_root_becomes_path(self):
        config = WatcherConfig(root="/srv/data")
        assert config.root == Path("/srv/data")

    def test_custom_values(self, tmp_path):
        config = WatcherConfig(
            root=tmp_path,
            filter=lambda entry: True,
            watch=False,
            debounce_ms=250,
            ignore_patterns=["*.tmp"],
        )
        assert config.watch is False
        assert config.debounce_ms == 250
        assert config.debounce_seconds == 0.25
        assert callable(config.filter)

    def test_invalid_root(self):
        with pytest.raises(WatcherConfigError, match="root"):
            WatcherConfig(root=42)

    def test_filter_must_be_callable(self, tmp_path):
        with pytest.raises(WatcherConfigError, match="filter"):
            WatcherConfig(root=tmp_path, filter="*.py")

    def test_watch_must_be_bool(self, tmp_path):
        with pytest.raises(WatcherConfigError, match="watch"):
            WatcherConfig(root=tmp_path, watch="yes")

    def test_debounce_must_be_int(self, tmp_path):
        with pytest.raises(WatcherConfigError, match="debounce_ms"):
            WatcherConfig(root=tmp_path, debounce_ms=0.5)
        with pytest.raises(WatcherConfigError, match="debounce_ms"):
            WatcherConfig(root=tmp_path, debounce_ms=True)

    def test_debounce_must_not_be_negative(self, tmp_path):
        with pytest.raises(WatcherConfigError, match="negative"):
            WatcherConfig(root=tmp_path, debounce_ms=-1)

    def test_config_error_is_value_error(self, tmp_path):
        with pytest.raises(ValueError):
            WatcherConfig(root=tmp_path, debounce_ms=-1)
        with pytest.raises(WatcherError):
            WatcherConfig(root=tmp_path, debounce_ms=-1)


class TestShouldIgnore:
    """Tests for WatcherConfig.should_ignore."""

    def test_no_patterns(self, tmp_path):
        config = WatcherConfig(root=tmp_path)
        assert config.should_ignore("file.tmp") is False

    def test_name_pattern(self, tmp_path):
        config = WatcherConfig(root=tmp_path, ignore_patterns=["*.tmp", "*~"])
        assert config.should_ignore("file.tmp") is True
        assert config.should_ignore("deep/dir/file.tmp") is True
        assert config.should_ignore("notes~") is True
        assert config.should_ignore("file.txt") is False

    def test_directory_pattern(self, tmp_path):
        config = WatcherConfig(root=tmp_path, ignore_patterns=["node_modules", ".git/*"])
        assert config.should_ignore("node_modules") is True
        assert config.should_ignore("web/node_modules") is True
        assert config.should_ignore(".git/config") is True
        assert config.should_ignore("src/main.py") is False


class TestFromEnv:
    """Tests for WatcherConfig.from_env."""

    def test_defaults_without_env(self, tmp_path, monkeypatch):
        for name in ("DEBOUNCE_MS", "WATCH", "IGNORE", "FOLLOW_SYMLINKS"):
            monkeypatch.delenv(f"TREEWATCH_{name}", raising=False)

        config = WatcherConfig.from_env(tmp_path)

        assert config.root == tmp_path
        assert config.debounce_ms == 10
        assert config.watch is True

    def test_reads_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TREEWATCH_DEBOUNCE_MS", "75")
        monkeypatch.setenv("TREEWATCH_WATCH", "false")
        monkeypatch.setenv("TREEWATCH_IGNORE", "*.log, .git ,")
        monkeypatch.setenv("TREEWATCH_FOLLOW_SYMLINKS", "no")

        config = WatcherConfig.from_env(tmp_path)

        assert config.debounce_ms == 75
        assert config.watch is False
        assert config.ignore_patterns == ["*.log", ".git"]
        assert config.follow_symlinks is False

    def test_custom_prefix(self, tmp_path, monkeypatch):
        monkeypatch.setenv("MYAPP_DEBOUNCE_MS", "5")
        config = WatcherConfig.from_env(tmp_path, prefix="MYAPP_")
        assert config.debounce_ms == 5

    def test_invalid_values(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TREEWATCH_DEBOUNCE_MS", "soon")
        with pytest.raises(WatcherConfigError):
            WatcherConfig.from_env(tmp_path)

        monkeypatch.setenv("TREEWATCH_DEBOUNCE_MS", "5")
        monkeypatch.setenv("TREEWATCH_WATCH", "maybe")
        with pytest.raises(WatcherConfigError):
            WatcherConfig.from_env(tmp_path)
