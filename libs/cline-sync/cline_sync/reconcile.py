"""Make a peer's outgoing directory match its desired entries."""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Mapping

from cline_core.fsutil import remove_empty_directories, walk
from cline_core.models import ContentSource, FileSource, InlineSource

logger = logging.getLogger(__name__)


class SyncAction(Enum):
    WRITE = "write"
    DELETE = "delete"


@dataclass
class SyncItem:
    """One file-level action taken (or planned, in dry-run) for a peer."""

    peer: str
    action: SyncAction
    path: str
    detail: str = ""


@dataclass
class PeerResult:
    peer: str
    written: int = 0
    removed: int = 0
    pruned: int = 0
    items: list[SyncItem] = field(default_factory=list)


@dataclass
class SyncSummary:
    """Aggregate outcome of a sync run."""

    peers: list[str] = field(default_factory=list)
    written: int = 0
    removed: int = 0
    items: list[SyncItem] = field(default_factory=list)
    pruned: int = 0
    dry_run: bool = False

    @property
    def no_peers(self) -> bool:
        return not self.peers

    def add(self, result: PeerResult) -> None:
        self.written += result.written
        self.removed += result.removed
        self.pruned += result.pruned
        self.items.extend(result.items)


def actual_files(outgoing: Path) -> set[str]:
    """Outgoing-relative POSIX paths of every file currently on disk."""
    if not outgoing.exists():
        return set()
    return {p.relative_to(outgoing).as_posix() for p in walk(outgoing)}


def symlinks(outgoing: Path) -> set[str]:
    """Outgoing-relative POSIX paths of every symlink (file or directory) on disk."""
    if not outgoing.exists():
        return set()
    found = set()
    for dirpath, dirnames, filenames in os.walk(outgoing):
        for name in dirnames + filenames:
            path = Path(dirpath) / name
            if path.is_symlink():
                found.add(path.relative_to(outgoing).as_posix())
    return found


def _describe(source: ContentSource) -> str:
    if isinstance(source, FileSource):
        return str(source.path)
    return "inline"


def _write(dest: Path, source: ContentSource) -> None:
    dest.parent.mkdir(parents=True, exist_ok=True)
    # Never write through a link into a tree we do not own.
    if dest.is_symlink():
        dest.unlink()
    if isinstance(source, InlineSource):
        dest.write_bytes(source.data.encode("utf-8"))
    else:
        shutil.copy2(source.path, dest)


def reconcile_peer(
    peer: str,
    outgoing: Path,
    desired: Mapping[str, ContentSource],
    *,
    dry_run: bool = False,
) -> PeerResult:
    """
    Delete files not in ``desired``, (re)write every desired file, prune empty dirs.

    Every desired entry is written on every run; there is no content comparison.
    Symlinks under ``outgoing`` are always removed, desired or not.
    """
    result = PeerResult(peer)
    if not dry_run:
        if outgoing.is_symlink():
            outgoing.unlink()
        outgoing.mkdir(parents=True, exist_ok=True)

    links = symlinks(outgoing)
    obsolete = (actual_files(outgoing) - set(desired)) | links
    for rel in sorted(obsolete):
        logger.info(f"Removing obsolete {peer}:{rel}")
        if not dry_run:
            (outgoing / rel).unlink()
        result.removed += 1
        detail = "symlink" if rel in links else ""
        result.items.append(SyncItem(peer, SyncAction.DELETE, rel, detail))

    # Empty directories may sit where a desired file must go.
    if not dry_run:
        result.pruned += remove_empty_directories(outgoing)

    for rel, source in desired.items():
        logger.info(f"Writing {peer}:{rel} ({_describe(source)})")
        if not dry_run:
            _write(outgoing / rel, source)
        result.written += 1
        result.items.append(SyncItem(peer, SyncAction.WRITE, rel, _describe(source)))

    if not dry_run:
        result.pruned += remove_empty_directories(outgoing)
    return result
