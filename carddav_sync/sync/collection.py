"""
Per-address-book sync entry point.

Chooses between incremental (sync-collection) and basic (ctag) sync,
falling back to basic when the server rejects incremental sync.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, Union

from carddav_sync.dav.transport import Transport
from carddav_sync.dav.webdav import fetch_ctag
from carddav_sync.exceptions import IncrementalSyncUnsupported
from carddav_sync.sync.basic import BasicSyncStrategy, FetchAll
from carddav_sync.sync.incremental import IncrementalSyncStrategy
from carddav_sync.sync.listing import list_vcards
from carddav_sync.sync.models import AddressBook, VCard

logger = logging.getLogger(__name__)


class SyncMethod(str, Enum):
    """Which strategy to use for an address book."""

    AUTO = "auto"  # webdav when the server advertises sync-collection
    BASIC = "basic"  # ctag probe + full refetch
    WEBDAV = "webdav"  # RFC 6578 sync-collection


VALID_SYNC_METHODS = {method.value for method in SyncMethod}


class CollectionSyncCoordinator:
    """
    Sync one address book with the appropriate strategy.

    Strategy failures are not caught here; they reach the caller, which
    decides what to do with the failing address book.

    Usage:
        coordinator = CollectionSyncCoordinator(transport)
        coordinator.sync(address_book)

        # Force ctag-based sync
        coordinator = CollectionSyncCoordinator(transport, sync_method="basic")
    """

    def __init__(
        self,
        transport: Transport,
        sync_method: Union[SyncMethod, str] = SyncMethod.AUTO,
        fetch_all: Optional[FetchAll] = None,
    ):
        """
        Initialize the coordinator.

        Args:
            transport: Transport shared by all strategies
            sync_method: auto, basic or webdav
            fetch_all: Full-listing callable for basic sync; defaults to an
                addressbook-query REPORT through the transport
        """
        self.transport = transport
        self.sync_method = SyncMethod(sync_method)
        self.fetch_all: FetchAll = fetch_all or self._list_vcards

    def _list_vcards(self, address_book: AddressBook) -> list[VCard]:
        return list_vcards(address_book, self.transport)

    def choose_method(self, address_book: AddressBook) -> SyncMethod:
        """Resolve AUTO against the address book's supported reports."""
        if self.sync_method is not SyncMethod.AUTO:
            return self.sync_method
        if address_book.supports_sync_collection():
            return SyncMethod.WEBDAV
        return SyncMethod.BASIC

    def sync(self, address_book: AddressBook) -> AddressBook:
        """
        Sync an address book in place.

        Returns:
            The same address book object

        Raises:
            TransportError: If a request fails
            CollectionNotFound: If the ctag probe cannot find the book
        """
        method = self.choose_method(address_book)
        logger.debug(f"Syncing {address_book.url} using {method.value} sync")

        if method is SyncMethod.WEBDAV:
            strategy = IncrementalSyncStrategy(self.transport)
            try:
                strategy.run(address_book, address_book.objects)
            except IncrementalSyncUnsupported as e:
                logger.info(f"{e}; falling back to basic sync")
                address_book.sync_token = None
            else:
                address_book.last_sync_stats = strategy.last_stats
                return address_book

        return self._basic_sync(address_book)

    def _basic_sync(self, address_book: AddressBook) -> AddressBook:
        remote_ctag = fetch_ctag(address_book, self.transport)
        strategy = BasicSyncStrategy()
        strategy.run(address_book, remote_ctag, self.fetch_all)
        address_book.last_sync_stats = strategy.last_stats
        return address_book

