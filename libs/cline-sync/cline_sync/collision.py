"""Handling of two drafts that target the same peer and destination."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

from cline_core.errors import CollisionError

logger = logging.getLogger(__name__)


class CollisionPolicy(Enum):
    """What to do when a later draft overwrites an earlier draft's entry."""

    LAST_WINS = "last-wins"
    ERROR = "error"


def handle_collision(
    peer: str,
    destination: str,
    previous_draft: Path,
    draft: Path,
    policy: CollisionPolicy = CollisionPolicy.LAST_WINS,
) -> None:
    """
    Apply ``policy`` to a manifest collision.

    LAST_WINS logs a warning and lets the caller overwrite the entry (drafts
    are processed in walk order, so the outcome is reproducible). ERROR raises.
    """
    message = (
        f"Destination '{destination}' for peer '{peer}' is targeted by both "
        f"{previous_draft} and {draft}"
    )
    if policy == CollisionPolicy.ERROR:
        raise CollisionError(message + ".")
    logger.warning(f"{message}; keeping {draft}.")
