"""Report draft authoring."""

from __future__ import annotations

import logging
from pathlib import Path

from cline_core.config import DRAFT_EXTENSION, GROUP_PREFIX, Layout
from cline_core.errors import DraftError, ResolutionError
from cline_core.fsutil import sanitize_filename
from cline_core.groups import compute_groups
from cline_core.peers import list_peer_aliases
from cline_core.yamlio import render_draft

from cline_sync.resolve import expand

logger = logging.getLogger(__name__)


def available_recipients(data_root: Path) -> list[str]:
    """Recipient expressions a user can pick from: groups first, then peers."""
    groups = compute_groups(data_root)
    return [f"{GROUP_PREFIX}{g}" for g in groups] + list_peer_aliases(data_root)


def create_draft(
    data_root: Path, title: str, to: list[str], except_: list[str]
) -> Path:
    """Write a new draft under entries/ and return its path.

    Recipients are validated the same way sync validates them; empty lists are
    fine (a draft nobody receives yet).
    """
    title = (title or "").strip()
    if not title:
        raise DraftError("Title cannot be empty.")

    groups = compute_groups(data_root)
    peers = list_peer_aliases(data_root)
    for exprs in (to, except_):
        try:
            expand(exprs, groups, peers)
        except ResolutionError as e:
            raise DraftError(str(e)) from e

    layout = Layout(data_root)
    layout.entries.mkdir(parents=True, exist_ok=True)
    path = layout.entries / f"{sanitize_filename(title)}{DRAFT_EXTENSION}"
    if path.exists():
        raise DraftError(f"A draft already exists at {path}")

    path.write_text(render_draft(title, list(to), list(except_)), encoding="utf-8")
    logger.info(f"Draft created at {path}")
    return path
