"""Peer roster.

Each peer is a directory under ``<data_root>/peers/<alias>`` holding a
``hinter.config.json`` (at least ``publicKey``) and the ``outgoing/`` tree the
sync engine manages. The roster is whatever directories exist there.
"""

from __future__ import annotations

import json
import logging
import re
import shutil
from pathlib import Path

from cline_core.config import Layout
from cline_core.errors import PeerError
from cline_core.fsutil import atomic_write_text
from cline_core.models import PeerConfig

logger = logging.getLogger(__name__)

SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
PUBLIC_KEY_RE = re.compile(r"^[a-f0-9]{64}$")


def is_valid_slug(value: str) -> bool:
    return bool(SLUG_RE.match(value or ""))


def is_valid_public_key(value: str) -> bool:
    return bool(PUBLIC_KEY_RE.match(value or ""))


def peer_path(data_root: Path, alias: str) -> Path:
    return Layout(data_root).peer(alias)


def peer_outgoing_path(data_root: Path, alias: str) -> Path:
    return Layout(data_root).outgoing(alias)


def list_peer_aliases(data_root: Path) -> list[str]:
    """Return peer aliases (directory names) sorted; [] if peers/ is missing."""
    peers_dir = Layout(data_root).peers
    if not peers_dir.exists():
        return []
    return sorted(p.name for p in peers_dir.iterdir() if p.is_dir())


def load_peer_config(data_root: Path, alias: str) -> PeerConfig:
    """Read a peer's config. Missing or malformed configs raise PeerError."""
    path = Layout(data_root).peer_config(alias)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        return PeerConfig.model_validate(data)
    except (OSError, ValueError) as e:
        raise PeerError(f"Cannot read config for peer '{alias}' at {path}: {e}") from e


def save_peer_config(data_root: Path, alias: str, config: PeerConfig) -> None:
    path = Layout(data_root).peer_config(alias)
    atomic_write_text(path, json.dumps(config.to_json_dict(), indent=2))


def _find_key_owner(data_root: Path, public_key: str, *, skip: str | None = None) -> str | None:
    for alias in list_peer_aliases(data_root):
        if alias == skip:
            continue
        try:
            cfg = load_peer_config(data_root, alias)
        except PeerError as e:
            logger.warning(f"Skipping peer '{alias}' in key check: {e}")
            continue
        if cfg.public_key == public_key:
            return alias
    return None


def add_peer(data_root: Path, alias: str, public_key: str) -> Path:
    """Create a peer directory with its config. Returns the peer path."""
    if not is_valid_slug(alias):
        raise PeerError(
            "Invalid alias format. Use lowercase letters, numbers, and single hyphens."
        )
    if alias in list_peer_aliases(data_root):
        raise PeerError("A peer with this alias already exists.")
    if not is_valid_public_key(public_key):
        raise PeerError("Invalid public key format.")
    owner = _find_key_owner(data_root, public_key)
    if owner:
        raise PeerError(f"This public key is already used by peer '{owner}'.")

    path = peer_path(data_root, alias)
    path.mkdir(parents=True)
    save_peer_config(data_root, alias, PeerConfig(public_key=public_key))
    logger.info(f"Added peer {alias}")
    return path


def _require_peer(data_root: Path, alias: str) -> None:
    if alias not in list_peer_aliases(data_root):
        raise PeerError(f"No peer named '{alias}'.")


def rename_peer(data_root: Path, alias: str, new_alias: str) -> Path:
    """Rename a peer directory (group memberships travel with the config)."""
    _require_peer(data_root, alias)
    if not is_valid_slug(new_alias):
        raise PeerError("Invalid alias format.")
    if new_alias in list_peer_aliases(data_root):
        raise PeerError("A peer with this alias already exists.")
    target = peer_path(data_root, new_alias)
    peer_path(data_root, alias).rename(target)
    logger.info(f"Renamed peer {alias} -> {new_alias}")
    return target


def set_public_key(data_root: Path, alias: str, public_key: str) -> None:
    _require_peer(data_root, alias)
    if not is_valid_public_key(public_key):
        raise PeerError("Invalid public key format.")
    owner = _find_key_owner(data_root, public_key, skip=alias)
    if owner:
        raise PeerError(f"This public key is already used by peer '{owner}'.")
    cfg = load_peer_config(data_root, alias)
    cfg.public_key = public_key
    save_peer_config(data_root, alias, cfg)


def delete_peer(data_root: Path, alias: str) -> None:
    """Remove a peer directory, including its outgoing tree."""
    _require_peer(data_root, alias)
    shutil.rmtree(peer_path(data_root, alias))
    logger.info(f"Deleted peer {alias}")
