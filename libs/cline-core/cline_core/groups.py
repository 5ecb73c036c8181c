"""Derived peer groups.

Groups are not stored on their own: every peer config lists the groups the
peer belongs to under the ``hinter-cline`` key, and the group view is rebuilt
from those lists on demand. The reserved group ``all`` always contains every
peer.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from cline_core.config import ALL_GROUP
from cline_core.errors import GroupError
from cline_core.peers import (
    is_valid_slug,
    list_peer_aliases,
    load_peer_config,
    save_peer_config,
)

logger = logging.getLogger(__name__)


def compute_groups(data_root: Path) -> dict[str, list[str]]:
    """Return {group alias: member aliases}, members in roster order."""
    peers = list_peer_aliases(data_root)
    groups: dict[str, list[str]] = {ALL_GROUP: list(peers)}
    for alias in peers:
        for group in load_peer_config(data_root, alias).groups:
            if group == ALL_GROUP:
                continue
            members = groups.setdefault(group, [])
            if alias not in members:
                members.append(alias)
    return groups


def _check_members(data_root: Path, members: Iterable[str]) -> list[str]:
    known = set(list_peer_aliases(data_root))
    members = list(dict.fromkeys(members))
    unknown = [m for m in members if m not in known]
    if unknown:
        raise GroupError(f"Unknown peer(s): {', '.join(unknown)}")
    return members


def _check_editable(group: str) -> None:
    if group == ALL_GROUP:
        raise GroupError(f'The group name "{ALL_GROUP}" is reserved.')


def add_to_group(data_root: Path, group: str, members: Iterable[str]) -> list[str]:
    """Add peers to a group. Returns the peers whose config changed."""
    _check_editable(group)
    if not is_valid_slug(group):
        raise GroupError("Invalid group name format.")
    changed = []
    for alias in _check_members(data_root, members):
        cfg = load_peer_config(data_root, alias)
        if group in cfg.groups:
            continue
        cfg.set_groups(cfg.groups + [group])
        save_peer_config(data_root, alias, cfg)
        changed.append(alias)
        logger.info(f"Added '{alias}' to group '{group}'")
    return changed


def remove_from_group(data_root: Path, group: str, members: Iterable[str]) -> list[str]:
    """Remove peers from a group. Returns the peers whose config changed."""
    _check_editable(group)
    changed = []
    for alias in _check_members(data_root, members):
        cfg = load_peer_config(data_root, alias)
        if group not in cfg.groups:
            continue
        cfg.set_groups([g for g in cfg.groups if g != group])
        save_peer_config(data_root, alias, cfg)
        changed.append(alias)
        logger.info(f"Removed '{alias}' from group '{group}'")
    return changed


def create_group(data_root: Path, group: str, members: Iterable[str]) -> list[str]:
    """Create a new group with at least one member."""
    _check_editable(group)
    if not is_valid_slug(group):
        raise GroupError("Invalid group name format.")
    if group in compute_groups(data_root):
        raise GroupError("A group with this name already exists.")
    members = list(members)
    if not members:
        raise GroupError("A group needs at least one peer.")
    return add_to_group(data_root, group, members)
