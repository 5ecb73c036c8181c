from __future__ import annotations

import pytest

from cline_core.errors import DraftError
from cline_sync import available_recipients, create_draft
from tests.framework import Sandbox, read_file


def test_create_draft_then_sync_delivers_it(tmp_path):
    with Sandbox(tmp_path) as sb:
        sb.add_peer("alice", groups=["friends"])
        sb.add_peer("bob", groups=["friends"])

        path = create_draft(sb.root, "Weekly notes", ["group:friends"], ["bob"])

        assert path == sb.layout.entries / "Weekly notes.md"
        assert read_file(path).startswith('---\nto: ["group:friends"]\nexcept: ["bob"]\n')

        sb.sync()
        assert sb.files("alice") == ["Weekly notes.md"]
        assert read_file(sb.outgoing("alice") / "Weekly notes.md") == "# Weekly notes"
        assert sb.files("bob") == []


def test_title_is_sanitized_for_file_name(tmp_path):
    with Sandbox(tmp_path) as sb:
        path = create_draft(sb.root, "Q1/Q2: plans?", [], [])
        assert path.name == "Q1-Q2- plans-.md"
        assert path.parent == sb.layout.entries


def test_empty_title_rejected(tmp_path):
    with Sandbox(tmp_path) as sb:
        with pytest.raises(DraftError, match="Title cannot be empty"):
            create_draft(sb.root, "   ", [], [])


def test_unknown_recipient_rejected(tmp_path):
    with Sandbox(tmp_path) as sb:
        sb.add_peer("alice")
        with pytest.raises(DraftError, match="Invalid peer alias 'zed'"):
            create_draft(sb.root, "T", ["alice"], ["zed"])
        with pytest.raises(DraftError, match="Invalid group name 'nope'"):
            create_draft(sb.root, "T", ["group:nope"], [])
        assert list(sb.layout.entries.iterdir()) == []


def test_existing_draft_is_not_overwritten(tmp_path):
    with Sandbox(tmp_path) as sb:
        create_draft(sb.root, "Same", [], [])
        with pytest.raises(DraftError, match="already exists"):
            create_draft(sb.root, "Same", [], [])


def test_available_recipients_lists_groups_then_peers(tmp_path):
    with Sandbox(tmp_path) as sb:
        sb.add_peer("alice", groups=["friends"])
        sb.add_peer("bob")
        assert available_recipients(sb.root) == ["group:all", "group:friends", "alice", "bob"]
