"""End-to-end CLI tests using a sandbox data root and Typer CliRunner."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from cline_cli.cli import app

runner = CliRunner()

KEY_A = "a" * 64
KEY_B = "b" * 64


def _write_file(p: Path, text: str) -> None:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")


def _read(p: Path) -> str:
    return p.read_text(encoding="utf-8")


@pytest.fixture()
def data(tmp_path: Path) -> Path:
    return tmp_path / "hinter-core-data"


def cline(data: Path, *args: str, input: str | None = None):
    return runner.invoke(app, ["--data-path", str(data), *args], input=input)


def test_full_flow_peers_group_draft_sync(data: Path):
    assert cline(data, "peer", "add", "alice", KEY_A).exit_code == 0
    assert cline(data, "peer", "add", "bob", KEY_B).exit_code == 0

    res = cline(data, "group", "create", "friends", "alice", "bob")
    assert res.exit_code == 0, res.output
    assert "Added 'bob' to group 'friends'." in res.output

    res = cline(data, "draft", "new", "Hello", "--to", "group:friends", "--except", "bob")
    assert res.exit_code == 0, res.output
    assert (data / "entries" / "Hello.md").exists()

    res = cline(data, "sync")
    assert res.exit_code == 0, res.output
    assert "Finished. Synced 1 reports and removed 0 obsolete reports." in res.output
    assert _read(data / "peers" / "alice" / "outgoing" / "Hello.md") == "# Hello"
    assert not (data / "peers" / "bob" / "outgoing" / "Hello.md").exists()

    # Include bob next time; then drop the draft entirely
    _write_file(
        data / "entries" / "Hello.md",
        '---\nto: ["group:friends"]\nexcept: []\n---\nHi all\n',
    )
    res = cline(data, "sync")
    assert "Synced 2 reports" in res.output

    (data / "entries" / "Hello.md").unlink()
    res = cline(data, "sync")
    assert "Finished. Synced 0 reports and removed 2 obsolete reports." in res.output


def test_sync_without_peers(data: Path):
    res = cline(data, "sync")
    assert res.exit_code == 0
    assert "No peers configured." in res.output
    # Data root skeleton is created on first use
    assert (data / "entries").is_dir() and (data / "peers").is_dir()


def test_sync_bad_draft_exits_2_and_names_draft(data: Path):
    cline(data, "peer", "add", "alice", KEY_A)
    _write_file(data / "entries" / "oops.md", '---\nto: ["ghost"]\nexcept: []\n---\nx\n')

    res = cline(data, "sync")

    assert res.exit_code == 2
    assert "Error:" in res.output
    assert "Invalid peer alias 'ghost'" in res.output
    assert "oops.md" in res.output
    assert not (data / "peers" / "alice" / "outgoing").exists()


def test_sync_strict_collision(data: Path):
    cline(data, "peer", "add", "alice", KEY_A)
    for name in ("a", "b"):
        _write_file(
            data / "entries" / f"{name}.md",
            f'---\nto: ["alice"]\nexcept: []\ndestinationPath: "same.md"\n---\n{name}\n',
        )
    assert cline(data, "sync", "--strict").exit_code == 2
    res = cline(data, "sync")
    assert res.exit_code == 0
    assert _read(data / "peers" / "alice" / "outgoing" / "same.md") == "b"


def test_sync_dry_run_shows_plan(data: Path):
    cline(data, "peer", "add", "alice", KEY_A)
    _write_file(data / "entries" / "r.md", '---\nto: ["alice"]\nexcept: []\n---\nR\n')

    res = cline(data, "sync", "--dry-run")

    assert res.exit_code == 0, res.output
    assert "Dry run. Would sync 1 reports and remove 0 obsolete reports." in res.output
    assert "r.md" in res.output
    assert not (data / "peers" / "alice" / "outgoing" / "r.md").exists()


def test_sync_debug_reports_pruned_directories(data: Path):
    cline(data, "peer", "add", "alice", KEY_A)
    _write_file(data / "peers" / "alice" / "outgoing" / "old" / "stale.md", "old")

    res = cline(data, "sync", "--debug")

    assert res.exit_code == 0, res.output
    assert "removed 1 obsolete reports." in res.output
    assert "Pruned 1 empty directories." in res.output
    assert not (data / "peers" / "alice" / "outgoing" / "old").exists()


def test_data_path_from_environment(tmp_path: Path, monkeypatch):
    data = tmp_path / "from-env"
    monkeypatch.setenv("HINTER_CORE_DATA_PATH", str(data))
    res = runner.invoke(app, ["peer", "add", "alice", KEY_A])
    assert res.exit_code == 0, res.output
    assert (data / "peers" / "alice" / "hinter.config.json").exists()


def test_peer_commands(data: Path):
    res = cline(data, "peer", "add", "Bad Alias", KEY_A)
    assert res.exit_code == 1
    assert "Invalid alias format" in res.output

    cline(data, "peer", "add", "alice", KEY_A)
    res = cline(data, "peer", "add", "bob", KEY_A)
    assert res.exit_code == 1
    assert "already used by peer 'alice'" in res.output

    assert cline(data, "peer", "rename", "alice", "alice-work").exit_code == 0
    assert cline(data, "peer", "set-key", "alice-work", KEY_B).exit_code == 0

    res = cline(data, "peer", "list", "--json")
    assert res.exit_code == 0
    assert json.loads(res.output) == {
        "peers": [{"alias": "alice-work", "publicKey": KEY_B, "groups": []}]
    }

    res = cline(data, "peer", "remove", "alice-work", input="n\n")
    assert res.exit_code == 1
    assert (data / "peers" / "alice-work").exists()

    res = cline(data, "peer", "remove", "alice-work", "--yes")
    assert res.exit_code == 0
    assert not (data / "peers" / "alice-work").exists()


def test_group_commands(data: Path):
    cline(data, "peer", "add", "alice", KEY_A)
    cline(data, "peer", "add", "bob", KEY_B)

    assert cline(data, "group", "create", "all", "alice").exit_code == 1
    assert cline(data, "group", "create", "team", "zed").exit_code == 1
    assert cline(data, "group", "create", "team", "alice").exit_code == 0
    assert cline(data, "group", "add", "team", "bob").exit_code == 0

    res = cline(data, "group", "list", "--json")
    assert json.loads(res.output) == {
        "groups": {"all": ["alice", "bob"], "team": ["alice", "bob"]}
    }

    res = cline(data, "group", "remove", "team", "alice")
    assert "Removed 'alice' from group 'team'." in res.output
    res = cline(data, "group", "list", "--json")
    assert json.loads(res.output)["groups"]["team"] == ["bob"]
