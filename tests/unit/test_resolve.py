import pytest

from cline_core.errors import UnknownGroupError, UnknownPeerError
from cline_sync.resolve import expand, resolve_recipients

PEERS = ["alice", "bob", "carol"]
GROUPS = {"all": PEERS, "friends": ["alice", "bob"], "work": ["carol"]}


def test_expand_mixes_groups_and_aliases():
    assert expand(["group:friends", "carol"], GROUPS, PEERS) == {"alice", "bob", "carol"}


def test_expand_empty_is_empty():
    assert expand([], GROUPS, PEERS) == set()


def test_resolve_is_to_minus_except():
    assert resolve_recipients(["group:all"], ["bob"], GROUPS, PEERS) == {"alice", "carol"}
    assert resolve_recipients(["group:friends"], ["group:friends"], GROUPS, PEERS) == set()


def test_except_only_subtracts():
    # Excluding someone who is not included is a no-op
    assert resolve_recipients(["carol"], ["alice"], GROUPS, PEERS) == {"carol"}


def test_unknown_group_raises_with_name():
    with pytest.raises(UnknownGroupError) as exc:
        resolve_recipients(["group:nope"], [], GROUPS, PEERS)
    assert exc.value.name == "nope"
    assert "Invalid group name 'nope'" in str(exc.value)


def test_unknown_alias_in_except_still_raises():
    with pytest.raises(UnknownPeerError, match="Invalid peer alias 'dave'"):
        resolve_recipients(["group:all"], ["dave"], GROUPS, PEERS)


def test_group_prefix_is_case_sensitive():
    with pytest.raises(UnknownPeerError):
        expand(["Group:friends"], GROUPS, PEERS)
