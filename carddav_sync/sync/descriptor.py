"""
Per-call working state of a sync strategy.

A SyncDescriptor lives for exactly one sync call and is never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from carddav_sync.sync.index import ResourceIndex
from carddav_sync.sync.models import VCard


@dataclass
class SyncStats:
    """Counts from one sync call."""

    created: int = 0
    updated: int = 0
    deleted: int = 0
    unchanged: int = 0
    skipped: int = 0
    multiget_requests: int = 0

    @property
    def has_changes(self) -> bool:
        return bool(self.created or self.updated or self.deleted)

    def summary(self) -> str:
        return (
            f"{self.created} created, {self.updated} updated, "
            f"{self.deleted} deleted, {self.unchanged} unchanged"
        )


@dataclass
class SyncDescriptor:
    """
    Working state of a single sync call.

    Attributes:
        local: Index of the cards cached before the call
        remote: Absolute URLs the server reported as live cards
        urls_to_fetch: Hrefs (as the server sent them) that need full bodies
        created: Cards added during the call
        updated: Cards whose etag/body were replaced in place
        deleted: Cards removed because the server no longer lists them
    """

    local: ResourceIndex
    remote: set[str] = field(default_factory=set)
    urls_to_fetch: list[str] = field(default_factory=list)
    created: list[VCard] = field(default_factory=list)
    updated: list[VCard] = field(default_factory=list)
    deleted: list[VCard] = field(default_factory=list)
    stats: SyncStats = field(default_factory=SyncStats)

    def finish(self) -> SyncStats:
        """Fill the counters from the collected sets and return them."""
        self.stats.created = len(self.created)
        self.stats.updated = len(self.updated)
        self.stats.deleted = len(self.deleted)
        touched = {card.url for card in self.created + self.updated}
        self.stats.unchanged = len(self.remote - touched)
        return self.stats
