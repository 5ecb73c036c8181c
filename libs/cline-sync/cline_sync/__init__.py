"""Cline Sync - recipient resolution, manifest building and outgoing reconciliation."""

from cline_sync.collision import CollisionPolicy, handle_collision
from cline_sync.drafts import available_recipients, create_draft
from cline_sync.engine import ReportSync
from cline_sync.manifest import Manifest, build_manifest
from cline_sync.reconcile import SyncAction, SyncItem, SyncSummary, reconcile_peer
from cline_sync.resolve import expand, resolve_recipients

__all__ = [
    "ReportSync",
    "SyncSummary",
    "SyncItem",
    "SyncAction",
    "reconcile_peer",
    "Manifest",
    "build_manifest",
    "CollisionPolicy",
    "handle_collision",
    "resolve_recipients",
    "expand",
    "create_draft",
    "available_recipients",
]

__version__ = "0.1.0"
