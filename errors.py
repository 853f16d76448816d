"""
Error taxonomy for the acquisition and archival engine.

Authentication and browse failures propagate typed and unmodified to callers.
Missing profile fields are never raised; they are absent on the result and
logged as extraction gaps.
"""
from __future__ import annotations

from typing import Optional


class LinkedInEngineError(Exception):
    """Base class for all engine errors."""


class NotAuthenticated(LinkedInEngineError):
    """No usable LinkedIn session for the owner; the user must reconnect."""

    def __init__(self, owner_id: str, reason: str = "LinkedIn account not connected") -> None:
        self.owner_id = owner_id
        self.reason = reason
        super().__init__(f"{reason} (owner={owner_id}). Please reconnect your LinkedIn account.")


class TransientBrowseFailure(LinkedInEngineError):
    """Navigation timed out or the browse context went away. Safe for the caller to retry."""

    def __init__(self, message: str, url: Optional[str] = None) -> None:
        self.url = url
        super().__init__(message if not url else f"{message} (url={url})")


class ArchiveConflict(LinkedInEngineError):
    """Another writer changed the same archive row between read and write."""

    def __init__(self, owner_id: str, normalized_url: str) -> None:
        self.owner_id = owner_id
        self.normalized_url = normalized_url
        super().__init__(f"Concurrent archive update for owner={owner_id} url={normalized_url}")


class InvalidSessionTransition(LinkedInEngineError):
    def __init__(self, owner_id: str, current: str, target: str) -> None:
        self.owner_id = owner_id
        self.current = current
        self.target = target
        super().__init__(f"Cannot move session for owner={owner_id} from {current} to {target}")
