"""
Tests for the fsembed.ingest package.

This module tests:
- Exclusion decisions
- Virtual path computation for directory and file roots
- Entry metadata and payloads
- Pruning of directories without files
- WalkError on unreadable paths
"""

import os

import pytest

from fsembed import codec
from fsembed.errors import WalkError
from fsembed.ingest import (
    DEFAULT_FILTERS,
    Entry,
    Filter,
    FilterDecision,
    is_under,
    normalize_path,
    prune_empty_dirs,
    walk,
)
from fsembed.ingest import walker


def virtual_paths(entries):
    return sorted(e.path for e in entries.values())


# =============================================================================
# Filter Tests
# =============================================================================

class TestFilter:
    """Tests for the tri-state exclusion predicate."""

    def test_keep_when_nothing_matches(self):
        """Test unmatched paths are kept."""
        rules = Filter([r"\.tmp$"])
        assert rules.check("/data/a.txt", is_dir=False) is FilterDecision.KEEP

    def test_matching_file_is_skipped(self):
        """Test a matching file is skipped on its own."""
        rules = Filter([r"\.tmp$"])
        assert rules.check("/data/a.tmp", is_dir=False) is FilterDecision.SKIP_FILE

    def test_matching_directory_skips_tree(self):
        """Test a matching directory skips its subtree."""
        rules = Filter([r"/node_modules$"])
        assert rules.check("/app/node_modules", is_dir=True) is FilterDecision.SKIP_TREE

    def test_patterns_are_searched_not_anchored(self):
        """Test patterns match anywhere in the path."""
        rules = Filter(["cache"])
        assert rules.matches("/home/me/.cache/x")

    def test_defaults_skip_sources_and_metadata(self):
        """Test the default rules."""
        rules = Filter(DEFAULT_FILTERS)

        assert rules.matches("/src/assets.py")
        assert rules.matches("/src/.DS_Store")
        assert not rules.matches("/src/logo.png")


class TestPaths:
    """Tests for path helpers."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("a.txt", "/a.txt"),
            ("sub\\b.txt", "/sub/b.txt"),
            ("./sub/c", "/sub/c"),
            ("/already", "/already"),
        ],
    )
    def test_normalize_path(self, raw, expected):
        """Test conversion to rooted forward-slash paths."""
        assert normalize_path(raw) == expected

    def test_is_under_respects_segments(self):
        """Test prefix matching stops at path segment boundaries."""
        assert is_under("/sub/b.txt", "/sub")
        assert is_under("/sub/b.txt", "/")
        assert not is_under("/subway.txt", "/sub")
        assert not is_under("/sub", "/sub")


# =============================================================================
# Walk Tests
# =============================================================================

class TestWalk:
    """Tests for walking directory and file roots."""

    def test_virtual_paths_of_directory_root(self, tree):
        """Test the root becomes / and descendants are root-relative."""
        entries = walk([str(tree)])

        assert virtual_paths(entries) == ["/", "/a.txt", "/blank.txt", "/sub", "/sub/b.txt"]

    def test_keys_are_true_paths(self, tree):
        """Test entries are keyed by absolute path on disk."""
        entries = walk([str(tree)])

        assert entries[str(tree / "sub" / "b.txt")].path == "/sub/b.txt"
        assert entries[str(tree)].path == "/"

    def test_relative_root_is_resolved(self, tree, monkeypatch):
        """Test relative roots give the same virtual paths."""
        monkeypatch.chdir(tree.parent)
        entries = walk(["site"])

        assert str(tree / "a.txt") in entries
        assert entries[str(tree / "a.txt")].path == "/a.txt"

    def test_file_root(self, tree):
        """Test a file root is placed at /<basename>."""
        entries = walk([str(tree / "sub" / "b.txt")])

        assert virtual_paths(entries) == ["/b.txt"]

    def test_file_entry_metadata(self, tree):
        """Test name, size, mtime and payload of a file."""
        os.utime(tree / "a.txt", (1_600_000_000, 1_600_000_000))
        entry = walk([str(tree)])[str(tree / "a.txt")]

        assert entry.name == "a.txt"
        assert entry.size == 5
        assert entry.mod_time == 1_600_000_000
        assert not entry.is_dir
        assert codec.decode(entry.data) == b"alpha"

    def test_empty_file_has_no_payload(self, tree):
        """Test zero-length files carry no payload."""
        entry = walk([str(tree)])[str(tree / "blank.txt")]

        assert entry.size == 0
        assert entry.data is None

    def test_directory_entry(self, tree):
        """Test directories have size 0 and no payload."""
        entry = walk([str(tree)])[str(tree / "sub")]

        assert entry.is_dir
        assert entry.size == 0
        assert entry.data is None
        assert entry.name == "sub"

    def test_multiple_roots(self, tree, tmp_path):
        """Test several roots are merged into one mapping."""
        other = tmp_path / "other"
        other.mkdir()
        (other / "c.txt").write_text("charlie", encoding="utf-8")

        entries = walk([str(tree / "a.txt"), str(other)])

        assert virtual_paths(entries) == ["/", "/a.txt", "/c.txt"]

    def test_same_root_twice_overwrites(self, tree):
        """Test duplicate true paths keep a single entry."""
        entries = walk([str(tree), str(tree)])

        assert len(entries) == len(walk([str(tree)]))


class TestExclusion:
    """Tests for exclusion during the walk."""

    def test_excluded_file_is_absent(self, tree):
        """Test a matching file never appears."""
        entries = walk([str(tree)], Filter([r"a\.txt$"]))

        assert "/a.txt" not in virtual_paths(entries)
        assert "/sub/b.txt" in virtual_paths(entries)

    def test_excluded_directory_drops_subtree(self, tree):
        """Test children of an excluded directory are skipped even if they don't match."""
        entries = walk([str(tree)], Filter([r"/sub$"]))

        assert "/sub" not in virtual_paths(entries)
        assert "/sub/b.txt" not in virtual_paths(entries)

    def test_excluded_root(self, tree):
        """Test an excluded root contributes nothing."""
        assert walk([str(tree)], Filter(["site"])) == {}

    def test_default_filters_skip_python_files(self, tree):
        """Test generated modules are not re-packed by default."""
        (tree / "assets.py").write_text("X = 1\n", encoding="utf-8")

        assert "/assets.py" not in virtual_paths(walk([str(tree)]))


# =============================================================================
# Pruning Tests
# =============================================================================

class TestPrune:
    """Tests for removal of directories without files."""

    def test_empty_subtree_is_pruned(self, tree):
        """Test directories with only empty subdirectories vanish."""
        paths = virtual_paths(walk([str(tree)]))

        assert "/empty" not in paths
        assert "/empty/deeper" not in paths

    def test_tree_without_files_is_empty(self, tmp_path):
        """Test a tree of empty directories yields nothing."""
        (tmp_path / "x" / "y" / "z").mkdir(parents=True)

        assert walk([str(tmp_path / "x")]) == {}

    def test_sibling_prefix_does_not_keep_directory(self):
        """Test /sub is pruned even though /subway.txt shares its prefix."""
        entries = {
            "/r": Entry(path="/", name="r", size=0, mod_time=0, is_dir=True),
            "/r/sub": Entry(path="/sub", name="sub", size=0, mod_time=0, is_dir=True),
            "/r/subway.txt": Entry(path="/subway.txt", name="subway.txt", size=1, mod_time=0, data="x"),
        }
        prune_empty_dirs(entries)

        assert sorted(entries) == ["/r", "/r/subway.txt"]


# =============================================================================
# Error Tests
# =============================================================================

class TestWalkErrors:
    """Tests for unreadable inputs."""

    def test_missing_root(self, tmp_path):
        """Test a missing root raises WalkError naming the path."""
        missing = tmp_path / "nope"

        with pytest.raises(WalkError) as exc_info:
            walk([str(missing)])

        assert exc_info.value.path == str(missing)
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)

    def test_unreadable_file(self, tree, monkeypatch):
        """Test a read failure aborts the walk."""

        def deny(path, *args, **kwargs):
            raise PermissionError(13, "Permission denied", path)

        monkeypatch.setattr(walker, "open", deny, raising=False)

        with pytest.raises(WalkError) as exc_info:
            walk([str(tree)])

        assert isinstance(exc_info.value.__cause__, PermissionError)

    def test_unreadable_directory(self, tree, monkeypatch):
        """Test a listing failure aborts the walk."""
        real_scandir = os.scandir

        def failing_scandir(path):
            if str(path).endswith("sub"):
                raise PermissionError(13, "Permission denied", str(path))
            return real_scandir(path)

        monkeypatch.setattr(os, "scandir", failing_scandir)

        with pytest.raises(WalkError) as exc_info:
            walk([str(tree)])

        assert exc_info.value.path.endswith("sub")
