import os
import stat

import pytest

from aclgrid.recursive import apply_recursively, walk_tree

FILE_TEXT = "u::rw-\ng::r--\no::---\n"
DIR_TEXT = "u::rwx\ng::r-x\no::---\n"


@pytest.fixture
def tree(tmp_path):
    (tmp_path / "b.txt").write_text("b")
    (tmp_path / "a.txt").write_text("a")
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "c.txt").write_text("c")
    (sub / "deeper").mkdir()
    return tmp_path


def _mode(path):
    return stat.S_IMODE(os.stat(path).st_mode)


def test_walk_tree_root_first_and_complete(tree):
    items = list(walk_tree(tree))
    assert items[0] == (str(tree), True)
    paths = {path for path, _ in items}
    assert paths == {
        str(tree),
        str(tree / "a.txt"),
        str(tree / "b.txt"),
        str(tree / "sub"),
        str(tree / "sub" / "c.txt"),
        str(tree / "sub" / "deeper"),
    }


def test_walk_tree_flags_directories(tree):
    flags = dict(walk_tree(tree))
    assert flags[str(tree / "sub")] is True
    assert flags[str(tree / "sub" / "deeper")] is True
    assert flags[str(tree / "a.txt")] is False


def test_walk_tree_does_not_follow_symlinks(tree):
    os.symlink(tree / "sub", tree / "link")
    flags = dict(walk_tree(tree))
    assert flags[str(tree / "link")] is False
    assert str(tree / "link" / "c.txt") not in flags


def test_walk_tree_missing_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        list(walk_tree(tmp_path / "absent"))


def test_apply_recursively_sets_file_modes(tree):
    apply_recursively(tree, DIR_TEXT, "", FILE_TEXT, None)
    assert _mode(tree / "a.txt") == 0o640
    assert _mode(tree / "sub" / "c.txt") == 0o640
    assert _mode(tree / "sub" / "deeper") == 0o750


def test_apply_recursively_reports_progress(tree):
    seen = []
    apply_recursively(tree, DIR_TEXT, "", FILE_TEXT, seen.append)
    assert len(seen) == len(list(walk_tree(tree)))
    assert seen == sorted(seen)
    assert seen[-1] == pytest.approx(1.0)


def test_apply_recursively_collects_failures(tree):
    failures = apply_recursively(tree, DIR_TEXT, "", "bogus", None)
    failed = {path for path, _ in failures}
    assert str(tree / "a.txt") in failed
    assert str(tree / "sub" / "c.txt") in failed
    assert all(message for _, message in failures)


def test_apply_recursively_continues_after_failures(tree):
    (tree / "a.txt").chmod(0o600)
    apply_recursively(tree, DIR_TEXT, "", "bogus", None)
    assert _mode(tree / "a.txt") == 0o600
    assert _mode(tree / "sub" / "deeper") == 0o750