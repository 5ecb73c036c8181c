"""Data-root discovery and on-disk layout constants.

The data root is the hinter-core data directory holding ``entries/`` (report
drafts) and ``peers/`` (one directory per peer). Resolution order:

  1) an explicit path (``--data-path``),
  2) the ``HINTER_CORE_DATA_PATH`` environment variable (``.env`` honored),
  3) ``./hinter-core-data``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import dotenv

DATA_PATH_ENV = "HINTER_CORE_DATA_PATH"
DEFAULT_DATA_DIR = "hinter-core-data"

ENTRIES_DIR = "entries"
PEERS_DIR = "peers"
OUTGOING_DIR = "outgoing"
PEER_CONFIG_FILE = "hinter.config.json"
STATE_DIR = ".hinter-cline"

# Key under which this tool stores its own settings inside a peer config.
NAMESPACE = "hinter-cline"
DRAFT_EXTENSION = ".md"
GROUP_PREFIX = "group:"
ALL_GROUP = "all"


def resolve_data_root(explicit: str | Path | None = None) -> Path:
    """Return the absolute data root (see module docstring for precedence)."""
    if explicit:
        return Path(explicit).expanduser().resolve()
    dotenv.load_dotenv(dotenv.find_dotenv(usecwd=True))
    env = os.environ.get(DATA_PATH_ENV)
    if env:
        return Path(env).expanduser().resolve()
    return (Path.cwd() / DEFAULT_DATA_DIR).resolve()


@dataclass(frozen=True)
class Layout:
    """Derived paths for one data root."""

    root: Path

    @property
    def entries(self) -> Path:
        return self.root / ENTRIES_DIR

    @property
    def peers(self) -> Path:
        return self.root / PEERS_DIR

    @property
    def state_dir(self) -> Path:
        return self.root / STATE_DIR

    def peer(self, alias: str) -> Path:
        return self.peers / alias

    def peer_config(self, alias: str) -> Path:
        return self.peer(alias) / PEER_CONFIG_FILE

    def outgoing(self, alias: str) -> Path:
        return self.peer(alias) / OUTGOING_DIR

    def ensure(self) -> None:
        """Create ``entries/`` and ``peers/`` if missing."""
        self.entries.mkdir(parents=True, exist_ok=True)
        self.peers.mkdir(parents=True, exist_ok=True)
