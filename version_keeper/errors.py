"""
Exception classes for version keeper.

Single-target operations (discard, promote, restore) raise these so the
caller learns exactly which step failed. Bulk inventory operations never
raise them for individual entries.
"""

from typing import Optional


class VersionKeeperError(Exception):
    """Base exception for all version keeper errors."""

    def __init__(
        self,
        message: str,
        context: Optional[str] = None,
        recovery_hint: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.context = context
        self.recovery_hint = recovery_hint

    def __str__(self) -> str:
        text = self.message
        if self.context:
            text = f"{text} ({self.context})"
        if self.recovery_hint:
            text = f"{text} Hint: {self.recovery_hint}"
        return text


class NotFound(VersionKeeperError):
    """Raised when a required source file or version does not exist."""
    pass


class AlreadyExists(VersionKeeperError):
    """Raised when a restore destination exists and overwrite was not requested."""
    pass


class ProcessError(VersionKeeperError):
    """Raised when an underlying filesystem call fails."""
    pass
