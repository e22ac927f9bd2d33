"""SDK error types."""

from __future__ import annotations


class CanisterSDKError(RuntimeError):
    """Base SDK error."""


class UnsupportedModeError(CanisterSDKError):
    """Operation is only available against a local replica."""


class AgentUnavailableError(CanisterSDKError):
    """Agent stack or replica could not be reached."""


class IdentityError(ValueError):
    """Raised when identity material is invalid or cannot be loaded."""
