"""
单根目录遍历测试
"""
import os
from pathlib import Path

import pytest

from findf.core.path_filter import PathFilter
from findf.core.traverser import Traverser

HOME = Path("/home/u")


def walk(tree, root, names, exclude=True, **kwargs):
    path_filter = PathFilter() if exclude else PathFilter.disabled()
    traverser = Traverser(frozenset(names), path_filter=path_filter, home=HOME, tree=tree, **kwargs)
    return traverser.walk(Path(root))


class TestMatching:

    def test_exact_base_name_only(self, memory_tree):
        tree = memory_tree(files=[
            "/home/u/a.txt",
            "/home/u/docs/a.txt",
            "/home/u/A.txt",
            "/home/u/a.txt.bak",
            "/home/u/xa.txt",
        ])
        result = walk(tree, HOME, ["a.txt"])
        assert sorted(result.matches) == [Path("/home/u/a.txt"), Path("/home/u/docs/a.txt")]

    def test_directories_with_target_name_are_not_matched(self, memory_tree):
        tree = memory_tree(dirs=["/home/u/a.txt"], files=["/home/u/a.txt/inner.txt"])
        result = walk(tree, HOME, ["a.txt", "inner.txt"])
        assert result.matches == [Path("/home/u/a.txt/inner.txt")]

    def test_scanned_counts_files_and_directories(self, memory_tree):
        tree = memory_tree(files=["/home/u/docs/a.txt", "/home/u/.cache/b.txt"])
        result = walk(tree, HOME, ["a.txt", "b.txt"])
        # docs, .cache, a.txt, b.txt
        assert result.scanned == 4
        assert len(result.matches) == 2

    def test_empty_name_list_still_scans(self, memory_tree):
        tree = memory_tree(files=["/home/u/docs/a.txt"])
        result = walk(tree, HOME, [])
        assert result.matches == []
        assert result.scanned == 2

    def test_idempotent(self, memory_tree):
        tree = memory_tree(files=["/home/u/x/a.txt", "/home/u/y/a.txt", "/home/u/z/b.txt"])
        first = walk(tree, HOME, ["a.txt", "b.txt"])
        second = walk(tree, HOME, ["a.txt", "b.txt"])
        assert set(first.matches) == set(second.matches)
        assert first.scanned == second.scanned


class TestFiltering:

    def test_home_dotfiles_included(self, memory_tree):
        tree = memory_tree(files=["/home/u/docs/a.txt", "/home/u/.cache/b.txt"])
        result = walk(tree, HOME, ["a.txt", "b.txt"])
        assert set(result.matches) == {Path("/home/u/docs/a.txt"), Path("/home/u/.cache/b.txt")}

    def test_system_prefix_pruned_without_listing(self, memory_tree):
        tree = memory_tree(files=["/home/u/docs/a.txt", "/tmp/.cache/b.txt", "/usr/share/b.txt"])
        result = walk(tree, "/", ["a.txt", "b.txt"])
        assert result.matches == [Path("/home/u/docs/a.txt")]
        assert "/tmp" not in tree.listed
        assert "/usr" not in tree.listed
        assert "/usr/share" not in tree.listed

    def test_system_prefix_included_when_filtering_off(self, memory_tree):
        tree = memory_tree(files=["/home/u/docs/a.txt", "/tmp/.cache/b.txt", "/usr/share/b.txt"])
        result = walk(tree, "/", ["a.txt", "b.txt"], exclude=False)
        assert set(result.matches) == {
            Path("/home/u/docs/a.txt"),
            Path("/tmp/.cache/b.txt"),
            Path("/usr/share/b.txt"),
        }

    def test_hidden_outside_home_excluded(self, memory_tree):
        tree = memory_tree(files=["/mnt/disk/.Trashes/b.txt", "/mnt/disk/docs/b.txt"])
        result = walk(tree, "/mnt/disk", ["b.txt"])
        assert result.matches == [Path("/mnt/disk/docs/b.txt")]
        assert "/mnt/disk/.Trashes" not in tree.listed

    def test_hidden_outside_home_included_when_filtering_off(self, memory_tree):
        tree = memory_tree(files=["/mnt/disk/.Trashes/b.txt"])
        result = walk(tree, "/mnt/disk", ["b.txt"], exclude=False)
        assert result.matches == [Path("/mnt/disk/.Trashes/b.txt")]

    def test_literal_prefix_quirk(self, memory_tree):
        tree = memory_tree(files=["/usrlocal/a.txt"])
        assert walk(tree, "/", ["a.txt"]).matches == []
        assert walk(tree, "/", ["a.txt"], exclude=False).matches == [Path("/usrlocal/a.txt")]

    def test_package_contents_not_descended(self, memory_tree):
        tree = memory_tree(files=["/mnt/disk/Tool.app/Contents/a.txt", "/mnt/disk/a.txt"])
        result = walk(tree, "/mnt/disk", ["a.txt"])
        assert result.matches == [Path("/mnt/disk/a.txt")]
        assert "/mnt/disk/Tool.app" not in tree.listed

        result = walk(tree, "/mnt/disk", ["a.txt"], exclude=False)
        assert len(result.matches) == 2


class TestErrors:

    def test_unreadable_directory_skipped(self, memory_tree):
        tree = memory_tree(
            files=["/home/u/locked/a.txt", "/home/u/open/a.txt"],
            unreadable=["/home/u/locked"],
        )
        result = walk(tree, HOME, ["a.txt"])
        assert result.matches == [Path("/home/u/open/a.txt")]
        assert result.skipped == 1

    def test_unreadable_root_yields_empty_result(self, memory_tree):
        tree = memory_tree(dirs=["/home/u"], unreadable=["/home/u"])
        result = walk(tree, HOME, ["a.txt"])
        assert result.matches == []
        assert result.scanned == 0
        assert result.skipped == 1


class TestProgress:

    def test_scanned_reported_in_batches(self, memory_tree):
        tree = memory_tree(files=[f"/home/u/f{i}.txt" for i in range(10)])
        increments = []
        result = walk(tree, HOME, [], on_scanned=increments.append, batch_size=4)
        assert increments == [4, 4, 2]
        assert sum(increments) == result.scanned == 10


class TestLocalFileSystem:

    def test_walks_real_tree(self, make_tree):
        root = make_tree({"a/b/target.txt": b"1", "c/target.txt": b"2", "c/other.txt": b"3"})
        traverser = Traverser(frozenset({"target.txt"}), home=root)
        result = traverser.walk(root)
        assert sorted(result.matches) == [root / "a" / "b" / "target.txt", root / "c" / "target.txt"]
        assert result.scanned == 6

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="需要符号链接支持")
    def test_symlink_cycle_does_not_hang(self, make_tree):
        root = make_tree({"dir/target.txt": b"1"})
        os.symlink(root, root / "dir" / "loop")
        os.symlink(root / "missing", root / "dangling.txt")
        traverser = Traverser(frozenset({"target.txt", "dangling.txt"}), home=root)
        result = traverser.walk(root)
        assert result.matches == [root / "dir" / "target.txt"]
