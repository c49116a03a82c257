"""
Error taxonomy for graph commands.

Every failure is raised before the command mutates anything, so the caller's
transaction can simply be rolled back and the message shown to the user.
"""

from __future__ import annotations

from typing import Any


class HyvmindError(Exception):
    """Base class for all domain errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details


class Unauthorized(HyvmindError):
    """Caller lacks the required role or swarm access."""


class Forbidden(Unauthorized):
    """Caller is authenticated but not the owner the operation requires."""


class NotFound(HyvmindError):
    """A referenced node or record does not exist."""


class ParentNotFound(NotFound):
    """The parent a new node should hang under does not exist."""


class AlreadyExists(HyvmindError):
    """A deterministic node id is already taken."""


class AlreadyVoted(HyvmindError):
    """The caller has already voted on this node."""


class AlreadyRequested(HyvmindError):
    """The caller already has a membership record for this swarm."""


class SelfJoin(HyvmindError):
    """The swarm creator tried to request membership of their own swarm."""


class NoPendingRequest(HyvmindError):
    """There is no pending membership request to approve."""


class CurationNotVoteable(HyvmindError):
    """Curations cannot be voted on."""


class InvalidInput(HyvmindError):
    """Malformed input, e.g. bad curly-bracket syntax in location content."""
