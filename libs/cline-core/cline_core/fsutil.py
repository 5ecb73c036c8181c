"""Filesystem primitives shared by the roster, the drafts and the reconciler."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Iterator

_UNSAFE_FILENAME_RE = re.compile(r'[<>:"/\\|?*\x00-\x1f\x7f]')


def walk(root: Path) -> Iterator[Path]:
    """Yield every regular file below ``root``, depth-first in lexical order.

    Directories are traversed but never yielded; symlinks are skipped. Each
    call starts a fresh traversal. Raises ``FileNotFoundError`` if ``root``
    does not exist.
    """
    stack: list[tuple[Path, bool]] = [(Path(root), True)]
    while stack:
        path, is_dir = stack.pop()
        if not is_dir:
            yield path
            continue
        with os.scandir(path) as it:
            entries = sorted(it, key=lambda e: e.name)
        # Reverse so the lexically smallest child is popped first.
        for entry in reversed(entries):
            if entry.is_dir(follow_symlinks=False):
                stack.append((Path(entry.path), True))
            elif entry.is_file(follow_symlinks=False):
                stack.append((Path(entry.path), False))


def remove_empty_directories(root: Path) -> int:
    """Remove empty directories below ``root`` (bottom-up); ``root`` is kept.

    Returns the number of directories removed.
    """
    removed = 0
    for dirpath, _dirnames, _filenames in os.walk(root, topdown=False):
        path = Path(dirpath)
        if path == Path(root):
            continue
        if not any(path.iterdir()):
            path.rmdir()
            removed += 1
    return removed


def atomic_write_text(path: Path, text: str) -> None:
    """Write text via a sibling temp file and an atomic replace."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(f".{path.name}.clinetmp")
    tmp.write_text(text, encoding="utf-8")
    tmp.replace(path)


def sanitize_filename(name: str) -> str:
    """Make a title usable as a file name (no extension).

    Path separators, reserved characters and control characters become ``-``;
    a leading space becomes ``-`` as well.
    """
    s = _UNSAFE_FILENAME_RE.sub("-", name or "")
    if s.startswith(" "):
        s = "-" + s[1:]
    return s


def to_posix_rel(path: str) -> str:
    """Normalize a relative path string to POSIX separators without ``./``."""
    s = path.replace("\\", "/")
    s = re.sub(r"/+", "/", s)
    while s.startswith("./"):
        s = s[2:]
    return s
