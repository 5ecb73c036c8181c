import os
from pathlib import Path

import pytest

from cline_core.fsutil import remove_empty_directories, sanitize_filename, to_posix_rel, walk


def touch(p: Path, text: str = "x") -> None:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")


def test_walk_yields_files_in_lexical_depth_first_order(tmp_path: Path):
    for rel in ["b.md", "a/z.md", "a/b/c.md", "c/d.md", "a0.md"]:
        touch(tmp_path / rel)
    (tmp_path / "empty").mkdir()

    got = [p.relative_to(tmp_path).as_posix() for p in walk(tmp_path)]
    assert got == ["a/b/c.md", "a/z.md", "a0.md", "b.md", "c/d.md"]


def test_walk_is_restartable(tmp_path: Path):
    touch(tmp_path / "one.md")
    assert list(walk(tmp_path)) == list(walk(tmp_path))


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_walk_skips_symlinks(tmp_path: Path):
    touch(tmp_path / "real" / "f.md")
    try:
        os.symlink(tmp_path / "real", tmp_path / "link")
        os.symlink(tmp_path / "real" / "f.md", tmp_path / "flink.md")
    except OSError:
        pytest.skip("cannot create symlinks here")
    got = [p.relative_to(tmp_path).as_posix() for p in walk(tmp_path)]
    assert got == ["real/f.md"]


def test_walk_missing_root_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        list(walk(tmp_path / "missing"))


def test_remove_empty_directories_keeps_root_and_non_empty(tmp_path: Path):
    (tmp_path / "a" / "b" / "c").mkdir(parents=True)
    touch(tmp_path / "keep" / "f.txt")
    (tmp_path / "keep" / "gone").mkdir()

    removed = remove_empty_directories(tmp_path)

    assert removed == 4
    assert tmp_path.exists()
    assert not (tmp_path / "a").exists()
    assert (tmp_path / "keep" / "f.txt").exists()
    assert not (tmp_path / "keep" / "gone").exists()
    assert remove_empty_directories(tmp_path) == 0


def test_sanitize_filename():
    assert sanitize_filename("Weekly notes") == "Weekly notes"
    assert sanitize_filename("a/b\\c:d?") == "a-b-c-d-"
    assert sanitize_filename(" leading") == "-leading"


def test_to_posix_rel():
    assert to_posix_rel(".\\a\\\\b/c") == "a/b/c"
    assert to_posix_rel("./x") == "x"
