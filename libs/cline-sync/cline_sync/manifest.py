"""Desired outgoing state: which file each peer should have, and from where.

A manifest is built from scratch on every sync run by walking the entries
tree in lexical order. Any problem with any draft aborts the build; nothing
is written until the whole manifest exists.
"""

from __future__ import annotations

import logging
import os
import posixpath
import re
import stat
from collections.abc import Collection, Mapping
from pathlib import Path, PurePosixPath

from cline_core.config import DRAFT_EXTENSION, Layout
from cline_core.errors import DraftError, ResolutionError
from cline_core.fsutil import to_posix_rel, walk
from cline_core.models import ContentSource, DraftHeader, FileSource, InlineSource, ReportDraft
from cline_core.yamlio import load_report_draft

from cline_sync.collision import CollisionPolicy, handle_collision
from cline_sync.resolve import resolve_recipients

logger = logging.getLogger(__name__)

_DRIVE_RE = re.compile(r"^[A-Za-z]:")


def normalize_destination(key: str, draft: Path) -> str:
    """Return a clean outgoing-relative POSIX path or raise DraftError."""
    raw = to_posix_rel(key.strip())
    if raw.startswith("/") or _DRIVE_RE.match(raw):
        raise DraftError(f"Destination '{key}' in report draft {draft} must be a relative path.")
    norm = posixpath.normpath(raw) if raw else ""
    if norm in ("", ".") or norm == ".." or norm.startswith("../"):
        raise DraftError(
            f"Destination '{key}' in report draft {draft} must stay inside the outgoing directory."
        )
    return norm


class Manifest:
    """Per-peer mapping of destination path -> content source."""

    def __init__(self, peers: Collection[str], policy: CollisionPolicy = CollisionPolicy.LAST_WINS):
        self.policy = policy
        self._entries: dict[str, dict[str, ContentSource]] = {p: {} for p in peers}
        self._origins: dict[str, dict[str, Path]] = {p: {} for p in peers}
        # Ancestor directories of every key, per peer (file/dir clash detection).
        self._dirs: dict[str, set[str]] = {p: set() for p in peers}

    @property
    def peers(self) -> list[str]:
        return list(self._entries)

    def desired(self, peer: str) -> dict[str, ContentSource]:
        return self._entries[peer]

    def origin(self, peer: str, destination: str) -> Path | None:
        return self._origins[peer].get(destination)

    def __len__(self) -> int:
        return sum(len(v) for v in self._entries.values())

    def add(self, peer: str, destination: str, source: ContentSource, draft: Path) -> None:
        entries = self._entries[peer]
        dirs = self._dirs[peer]
        parents = [p.as_posix() for p in PurePosixPath(destination).parents if p.as_posix() != "."]

        if destination in dirs or any(p in entries for p in parents):
            raise DraftError(
                f"Destination '{destination}' for peer '{peer}' in report draft {draft} "
                "clashes with another entry (a path cannot be both a file and a directory)."
            )

        previous = self.origin(peer, destination)
        if previous is not None and previous != draft:
            handle_collision(peer, destination, previous, draft, self.policy)

        entries[destination] = source
        self._origins[peer][destination] = draft
        dirs.update(parents)


def _sources_for(
    draft: ReportDraft, header: DraftHeader, entries_root: Path
) -> list[tuple[str, ContentSource]]:
    """Return (destination, source) pairs contributed by one draft and its header."""
    source_path = header.source_path or ""
    destination = header.destination_path or ""

    if not source_path:
        key = destination or draft.path.relative_to(entries_root).as_posix()
        return [(normalize_destination(key, draft.path), InlineSource(draft.body))]

    absolute = Path(os.path.abspath(draft.path.parent / source_path))
    try:
        st = absolute.stat()
    except OSError as e:
        raise DraftError(
            f"Error accessing source path {absolute} for report draft {draft.path}"
        ) from e

    key = normalize_destination(destination or absolute.name, draft.path)
    if not stat.S_ISDIR(st.st_mode):
        return [(key, FileSource(absolute))]

    pairs = []
    for file_path in walk(absolute):
        rel = file_path.relative_to(absolute).as_posix()
        pairs.append((posixpath.join(key, rel), FileSource(file_path)))
    return pairs


def build_manifest(
    layout: Layout,
    peers: Collection[str],
    groups: Mapping[str, Collection[str]],
    *,
    policy: CollisionPolicy = CollisionPolicy.LAST_WINS,
) -> Manifest:
    """Read every draft under ``entries/`` and compute the desired state."""
    manifest = Manifest(peers, policy)
    entries_root = layout.entries
    if not entries_root.exists():
        logger.info(f"No entries directory at {entries_root}; nothing to send.")
        return manifest

    for path in walk(entries_root):
        if path.suffix != DRAFT_EXTENSION:
            continue
        draft = load_report_draft(path)
        if draft.header is None:
            logger.info(f"Skipping {path}: no front matter")
            continue

        try:
            recipients = resolve_recipients(
                draft.header.to, draft.header.except_, groups, peers
            )
        except ResolutionError as e:
            raise DraftError(f"Invalid {e.kind} '{e.name}' found in report draft {path}.") from e

        pairs = _sources_for(draft, draft.header, entries_root)
        logger.info(
            f"Draft {path.relative_to(entries_root).as_posix()}: "
            f"{len(pairs)} file(s) -> {sorted(recipients)}"
        )
        # Peer order follows the roster so collisions are reported deterministically.
        for peer in (p for p in peers if p in recipients):
            for destination, source in pairs:
                manifest.add(peer, destination, source, path)

    return manifest
