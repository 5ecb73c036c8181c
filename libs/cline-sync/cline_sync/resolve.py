"""Recipient resolution: ``to`` minus ``except`` over peers and groups."""

from __future__ import annotations

from typing import Collection, Iterable, Mapping

from cline_core.config import GROUP_PREFIX
from cline_core.errors import UnknownGroupError, UnknownPeerError


def expand(
    exprs: Iterable[str],
    groups: Mapping[str, Collection[str]],
    known_peers: Collection[str],
) -> set[str]:
    """Flatten recipient expressions into a set of peer aliases.

    ``group:<name>`` expands to the group's members; anything else must be a
    known peer alias. The first unknown name raises.
    """
    out: set[str] = set()
    for expr in exprs:
        if expr.startswith(GROUP_PREFIX):
            name = expr[len(GROUP_PREFIX) :]
            if name not in groups:
                raise UnknownGroupError(name)
            out.update(groups[name])
        else:
            if expr not in known_peers:
                raise UnknownPeerError(expr)
            out.add(expr)
    return out


def resolve_recipients(
    to: Iterable[str],
    except_: Iterable[str],
    groups: Mapping[str, Collection[str]],
    known_peers: Collection[str],
) -> set[str]:
    """Return ``expand(to) - expand(except_)``. Both sides are validated."""
    included = expand(to, groups, known_peers)
    excluded = expand(except_, groups, known_peers)
    return included - excluded
