"""Cline Core - data model, front matter parsing, peer roster and groups."""

from cline_core.config import Layout, resolve_data_root
from cline_core.errors import (
    CollisionError,
    DraftError,
    GroupError,
    HinterError,
    PeerError,
    ResolutionError,
    UnknownGroupError,
    UnknownPeerError,
)
from cline_core.fsutil import remove_empty_directories, sanitize_filename, walk
from cline_core.groups import add_to_group, compute_groups, create_group, remove_from_group
from cline_core.models import (
    ContentSource,
    DraftHeader,
    FileSource,
    InlineSource,
    PeerConfig,
    ReportDraft,
)
from cline_core.peers import (
    add_peer,
    delete_peer,
    list_peer_aliases,
    load_peer_config,
    peer_outgoing_path,
    peer_path,
    rename_peer,
    save_peer_config,
    set_public_key,
)
from cline_core.yamlio import extract_frontmatter, load_report_draft, render_draft

__all__ = [
    "Layout",
    "resolve_data_root",
    # errors
    "HinterError",
    "DraftError",
    "ResolutionError",
    "UnknownPeerError",
    "UnknownGroupError",
    "CollisionError",
    "PeerError",
    "GroupError",
    # filesystem
    "walk",
    "remove_empty_directories",
    "sanitize_filename",
    # roster
    "list_peer_aliases",
    "peer_path",
    "peer_outgoing_path",
    "load_peer_config",
    "save_peer_config",
    "add_peer",
    "rename_peer",
    "set_public_key",
    "delete_peer",
    # groups
    "compute_groups",
    "create_group",
    "add_to_group",
    "remove_from_group",
    # models
    "ContentSource",
    "DraftHeader",
    "FileSource",
    "InlineSource",
    "PeerConfig",
    "ReportDraft",
    # front matter
    "extract_frontmatter",
    "load_report_draft",
    "render_draft",
]

__version__ = "0.1.0"
