"""
Basic (ctag based) address book sync.

If the remote ctag matches the cached one nothing happens. Otherwise the
full card listing is fetched and replaces the cached cards wholesale.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Optional

from carddav_sync.sync.descriptor import SyncDescriptor, SyncStats
from carddav_sync.sync.index import ResourceIndex
from carddav_sync.sync.models import AddressBook, VCard

FetchAll = Callable[[AddressBook], list[VCard]]

logger = logging.getLogger(__name__)


class BasicSyncStrategy:
    """
    Full-refetch strategy guarded by a ctag comparison.

    The ctag probe itself is done by the caller; this strategy only decides
    whether the probe result requires a refetch. Transport errors raised by
    fetch_all propagate unchanged.
    """

    def __init__(self) -> None:
        self.last_stats: Optional[SyncStats] = None

    def run(
        self,
        address_book: AddressBook,
        remote_ctag: Optional[str],
        fetch_all: FetchAll,
    ) -> AddressBook:
        """
        Bring an address book up to date if its ctag changed.

        Args:
            address_book: Address book to refresh
            remote_ctag: Ctag currently reported by the server
            fetch_all: Callable returning the complete remote card listing

        Returns:
            The same address book object, refreshed if needed
        """
        if remote_ctag is not None and remote_ctag == address_book.ctag:
            logger.debug(f"Local ctag matched remote for {address_book.url}")
            self.last_stats = SyncStats(unchanged=len(address_book.objects))
            return address_book

        logger.debug(f"ctag changed for {address_book.url}, fetching all cards")
        descriptor = SyncDescriptor(local=ResourceIndex.build(address_book.objects))

        cards = fetch_all(address_book)

        for card in cards:
            descriptor.remote.add(card.url)
            previous = descriptor.local.lookup(card.url)
            if previous is None:
                descriptor.created.append(card)
            elif previous.etag != card.etag:
                descriptor.updated.append(card)
        descriptor.deleted = [
            card for card in address_book.objects if card.url not in descriptor.remote
        ]

        address_book.objects = list(cards)
        address_book.ctag = remote_ctag

        self.last_stats = descriptor.finish()
        logger.info(
            f"Basic sync of {address_book.display_name or address_book.url}: "
            f"{self.last_stats.summary()}"
        )
        return address_book
