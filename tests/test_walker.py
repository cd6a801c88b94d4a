import os
from pathlib import Path

import pytest

from missing_files.config import ErrorPolicy
from missing_files.errors import TraversalError
from missing_files.walker import scan_directory

from conftest import make_tree


def names(scan):
    return sorted(Path(p).name for p in scan.files)


def test_finds_nested_files(deep_tree):
    scan = scan_directory(deep_tree)
    assert names(scan) == ["l2.txt", "l3.txt", "l4.txt", "top.txt"]
    assert all(Path(p).is_file() for p in scan.files)
    assert scan.skipped == []


def test_paths_are_under_root(deep_tree):
    scan = scan_directory(deep_tree)
    assert all(p.startswith(str(deep_tree)) for p in scan.files)
    assert scan.root == str(deep_tree)


class TestMaxDepth:
    def test_depth_one_lists_only_direct_children(self, deep_tree):
        assert names(scan_directory(deep_tree, max_depth=1)) == ["top.txt"]

    @pytest.mark.parametrize(
        "max_depth, expected",
        [
            (2, ["l2.txt", "top.txt"]),
            (3, ["l2.txt", "l3.txt", "top.txt"]),
            (4, ["l2.txt", "l3.txt", "l4.txt", "top.txt"]),
        ],
    )
    def test_file_at_exact_depth_found_one_deeper_not(self, deep_tree, max_depth, expected):
        assert names(scan_directory(deep_tree, max_depth=max_depth)) == expected

    @pytest.mark.parametrize("max_depth", [0, -1])
    def test_exhausted_budget_lists_nothing(self, deep_tree, max_depth):
        assert scan_directory(deep_tree, max_depth=max_depth).files == []


def test_empty_directory(tmp_path):
    (tmp_path / "empty").mkdir()
    assert scan_directory(tmp_path / "empty").files == []


class TestNonRegularEntries:
    def test_symlinks_are_not_followed(self, tmp_path):
        root = make_tree(tmp_path / "root", {"real.txt": "data", "sub/inner.txt": "inner"})
        outside = make_tree(tmp_path / "outside", {"elsewhere.txt": "x"})
        os.symlink(root / "real.txt", root / "link.txt")
        os.symlink(outside, root / "linked_dir")
        os.symlink(root, root / "sub" / "cycle")
        assert names(scan_directory(root)) == ["inner.txt", "real.txt"]

    def test_fifo_is_ignored(self, tmp_path):
        root = make_tree(tmp_path / "root", {"real.txt": "data"})
        os.mkfifo(root / "pipe")
        assert names(scan_directory(root)) == ["real.txt"]


class TestErrorPolicy:
    @pytest.fixture
    def blocked(self, tmp_path, mocker):
        root = make_tree(tmp_path / "root", {"ok.txt": "ok", "locked/hidden.txt": "hidden"})
        locked = str(root / "locked")
        real_scandir = os.scandir

        def scandir(path):
            if str(path) == locked:
                raise PermissionError(13, "Permission denied", locked)
            return real_scandir(path)

        mocker.patch("missing_files.walker.os.scandir", side_effect=scandir)
        return root, locked

    def test_fail_raises_with_offending_path(self, blocked):
        root, locked = blocked
        with pytest.raises(TraversalError) as excinfo:
            scan_directory(root)
        assert excinfo.value.path == locked

    def test_skip_records_path_and_continues(self, blocked):
        root, locked = blocked
        scan = scan_directory(root, on_error=ErrorPolicy.SKIP)
        assert names(scan) == ["ok.txt"]
        assert [s.path for s in scan.skipped] == [locked]
        assert scan.skipped[0].stage == "traversal"

    def test_unlistable_root_fails(self, tmp_path):
        with pytest.raises(TraversalError):
            scan_directory(tmp_path / "does_not_exist")


def test_tree_at_default_depth_budget(tmp_path):
    # deeper than the interpreter's recursion limit allows for a recursive walk
    levels = 990
    leaf_dir = tmp_path / "deep_root" / Path(*["d"] * levels)
    leaf_dir.mkdir(parents=True)
    (leaf_dir / "leaf.txt").write_text("bottom")
    scan = scan_directory(tmp_path / "deep_root")
    assert names(scan) == ["leaf.txt"]
    assert scan_directory(tmp_path / "deep_root", max_depth=levels).files == []
    assert len(scan_directory(tmp_path / "deep_root", max_depth=levels + 1).files) == 1


class UnclassifiableEntry:
    def __init__(self, entry):
        self.path = entry.path
        self.name = entry.name

    def is_file(self, follow_symlinks=True):
        raise PermissionError(13, "Permission denied", self.path)

    def is_dir(self, follow_symlinks=True):
        raise PermissionError(13, "Permission denied", self.path)


class ListedDirectory:
    def __init__(self, entries):
        self.entries = entries

    def __enter__(self):
        return iter(self.entries)

    def __exit__(self, *exc):
        return False


class TestUnclassifiableEntry:
    @pytest.fixture
    def broken_entry(self, tmp_path, mocker):
        root = make_tree(tmp_path / "root", {"ok.txt": "ok", "odd.txt": "odd", "sub/inner.txt": "inner"})
        odd = str(root / "odd.txt")
        real_scandir = os.scandir

        def scandir(path):
            with real_scandir(path) as entries:
                children = [UnclassifiableEntry(e) if e.path == odd else e for e in entries]
            return ListedDirectory(children)

        mocker.patch("missing_files.walker.os.scandir", side_effect=scandir)
        return root, odd

    def test_fail_raises_with_entry_path(self, broken_entry):
        root, odd = broken_entry
        with pytest.raises(TraversalError, match="cannot determine file type") as excinfo:
            scan_directory(root)
        assert excinfo.value.path == odd

    def test_skip_records_entry_and_keeps_siblings(self, broken_entry):
        root, odd = broken_entry
        scan = scan_directory(root, on_error=ErrorPolicy.SKIP)
        assert names(scan) == ["inner.txt", "ok.txt"]
        assert [(s.path, s.stage) for s in scan.skipped] == [(odd, "traversal")]
