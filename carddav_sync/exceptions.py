"""
Exception hierarchy for carddav_sync.

Strategies never catch these; the account reconciler is the only place a
per-collection failure is contained.
"""

from __future__ import annotations

from typing import Optional


class CardDAVSyncError(Exception):
    """Base class for all carddav_sync errors."""

    pass


class TransportError(CardDAVSyncError):
    """Raised when a request fails at the network or protocol level."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class CollectionNotFound(CardDAVSyncError):
    """Raised when a known collection is missing from the server listing."""

    pass


class IncrementalSyncUnsupported(CardDAVSyncError):
    """Raised when the server rejects sync-collection or the stored token."""

    pass
