"""Report sync: resolve drafts into per-peer outgoing trees.

A run has three phases and no persisted state between runs:

1. Build the desired manifest from every draft (fails fast; nothing written).
2. Reconcile each peer's ``outgoing/`` directory, one peer at a time.
3. Report aggregate counts.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from pathlib import Path

from cline_core.config import Layout
from cline_core.groups import compute_groups
from cline_core.peers import list_peer_aliases

from cline_sync.collision import CollisionPolicy
from cline_sync.manifest import Manifest, build_manifest
from cline_sync.reconcile import SyncAction, SyncSummary, reconcile_peer

logger = logging.getLogger(__name__)


class ReportSync:
    """Sync coordinator for one data root."""

    def __init__(self, data_root: Path, policy: CollisionPolicy = CollisionPolicy.LAST_WINS):
        self.layout = Layout(Path(data_root))
        self.policy = policy
        self.summary: SyncSummary | None = None
        self.last_manifest: Manifest | None = None

    # ---- Logging / helpers -------------------------------------------------
    def _log_event(self, event: str, **payload) -> None:
        """Append a structured sync event to .hinter-cline/sync.log as JSONL."""
        try:
            log_dir = self.layout.state_dir
            log_path = log_dir / "sync.log"
            log_dir.mkdir(parents=True, exist_ok=True)
            payload = {"ts": datetime.now().strftime("%Y-%m-%d %H:%M"), "event": event, **payload}
            with open(log_path, "a", encoding="utf-8") as f:
                f.write(json.dumps(payload, ensure_ascii=False) + os.linesep)
        except Exception as e:
            logger.debug(f"Failed to write sync event log: {e}")

    def build(self) -> Manifest | None:
        """Compute the desired manifest; None when no peers are configured."""
        peers = list_peer_aliases(self.layout.root)
        if not peers:
            return None
        groups = compute_groups(self.layout.root)
        logger.info(f"Peers: {peers}; groups: {sorted(groups)}")
        self.last_manifest = build_manifest(self.layout, peers, groups, policy=self.policy)
        logger.info(f"Manifest: {len(self.last_manifest)} entries across {len(peers)} peers")
        return self.last_manifest

    def sync(self, dry_run: bool = False) -> SyncSummary:
        """Run a full sync. Raises HinterError before any write if a draft is unusable."""
        manifest = self.build()
        summary = SyncSummary(dry_run=dry_run)
        self.summary = summary
        if manifest is None:
            logger.info("No peers configured; nothing to do.")
            return summary

        summary.peers = manifest.peers
        for peer in manifest.peers:
            result = reconcile_peer(
                peer, self.layout.outgoing(peer), manifest.desired(peer), dry_run=dry_run
            )
            summary.add(result)
            if dry_run:
                continue
            for item in result.items:
                if item.action == SyncAction.DELETE:
                    self._log_event("delete", peer=peer, path=item.path)

        if not dry_run:
            self._log_event(
                "sync", written=summary.written, removed=summary.removed, pruned=summary.pruned
            )
        logger.info(f"Sync finished: {summary.written} written, {summary.removed} removed")
        return summary
