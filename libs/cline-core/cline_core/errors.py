"""Exceptions raised by the hinter-cline libraries."""


class HinterError(Exception):
    """Base class for every user-facing error."""


class DraftError(HinterError):
    """A report draft cannot be used (bad YAML, missing fields, bad source path)."""


class ResolutionError(HinterError):
    """A recipient expression does not name an existing peer or group."""

    kind = "recipient"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Invalid {self.kind} '{name}' found in report draft.")


class UnknownPeerError(ResolutionError):
    kind = "peer alias"


class UnknownGroupError(ResolutionError):
    kind = "group name"


class CollisionError(HinterError):
    """Two drafts target the same peer and destination path (strict mode only)."""


class PeerError(HinterError):
    """Invalid peer roster operation."""


class GroupError(HinterError):
    """Invalid group membership operation."""
