"""
Incremental (RFC 6578 sync-collection) address book sync.

One cycle:

1. Index the cached cards by URL.
2. Send a sync-collection REPORT with the stored sync token.
3. Keep only entries that describe live cards (see is_card_entry) and
   record their URLs as remote-present.
4. Either apply inline address-data directly, or collect the new/changed
   hrefs and fetch them all with exactly one addressbook-multiget.
5. Drop cached cards whose URL was not remote-present.
6. Adopt the new sync token, only after every change has been applied.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Optional

from carddav_sync.dav import builders, namespace
from carddav_sync.dav.multistatus import MultiStatus, ResponseEntry
from carddav_sync.dav.transport import ListingMode, Transport
from carddav_sync.dav.urls import resolve_url
from carddav_sync.exceptions import IncrementalSyncUnsupported, TransportError
from carddav_sync.sync.descriptor import SyncDescriptor, SyncStats
from carddav_sync.sync.index import ResourceIndex
from carddav_sync.sync.models import AddressBook, VCard

# Statuses a server uses to reject sync-collection or a stale sync token
UNSUPPORTED_STATUS = 501
TOKEN_REJECTED_STATUSES = (403, 409)
VALID_SYNC_TOKEN_PRECONDITION = "valid-sync-token"

logger = logging.getLogger(__name__)


def is_card_entry(entry: ResponseEntry, mode: ListingMode) -> bool:
    """
    Decide whether a delta-listing entry describes a live card.

    In the two-phase variant a live card carries an etag; in the inline
    variant it carries address-data. Anything else (the collection itself,
    removed members reported with 404, entries without content) is not a
    card: it is neither fetched nor counted as present.
    """
    if mode is ListingMode.INLINE:
        return bool(entry.props.get("address_data"))
    return bool(entry.props.get("getetag"))


def _token_rejected(error: TransportError) -> bool:
    if error.status_code == UNSUPPORTED_STATUS:
        return True
    return error.status_code in TOKEN_REJECTED_STATUSES and (
        VALID_SYNC_TOKEN_PRECONDITION in (error.body or "")
    )


class IncrementalSyncStrategy:
    """
    Token-based delta sync for one address book.

    The strategy never catches transport errors, except to turn a rejected
    sync token into IncrementalSyncUnsupported so the caller can fall back
    to basic sync.
    """

    def __init__(self, transport: Transport):
        self.transport = transport
        self.last_stats: Optional[SyncStats] = None

    @property
    def mode(self) -> ListingMode:
        return self.transport.listing_mode

    def run(
        self,
        address_book: AddressBook,
        local_resources: Optional[Iterable[VCard]] = None,
    ) -> AddressBook:
        """
        Run one incremental sync cycle.

        Args:
            address_book: Address book to update in place
            local_resources: Cached cards; defaults to address_book.objects

        Returns:
            The same address book object

        Raises:
            IncrementalSyncUnsupported: If the server rejects the report or token
            TransportError: For any other request failure
        """
        if local_resources is None:
            local_resources = address_book.objects
        descriptor = SyncDescriptor(local=ResourceIndex.build(local_resources))

        listing = self._delta_listing(address_book)

        for entry in listing:
            if not is_card_entry(entry, self.mode):
                logger.debug(f"Skipping non-card entry {entry.href}")
                descriptor.stats.skipped += 1
                continue

            card_url = resolve_url(address_book.root_url, entry.href)
            if card_url in descriptor.remote:
                logger.debug(f"Ignoring repeated entry {entry.href}")
                continue
            descriptor.remote.add(card_url)

            local = descriptor.local.lookup(card_url)
            if local is not None and local.etag == entry.props.get("getetag"):
                continue

            if self.mode is ListingMode.INLINE:
                self._apply(address_book, descriptor, entry, card_url)
            else:
                descriptor.urls_to_fetch.append(entry.href)

        if descriptor.urls_to_fetch:
            self._multiget(address_book, descriptor)

        self._remove_deleted(address_book, descriptor)

        if listing.sync_token:
            address_book.sync_token = listing.sync_token

        self.last_stats = descriptor.finish()
        logger.info(
            f"Incremental sync of {address_book.display_name or address_book.url}: "
            f"{self.last_stats.summary()}"
        )
        return address_book

    def _delta_listing(self, address_book: AddressBook) -> MultiStatus:
        props = [namespace.GETETAG]
        if self.mode is ListingMode.INLINE:
            props.append(namespace.ADDRESS_DATA)

        logger.debug(
            f"Requesting delta listing for {address_book.url} "
            f"(sync_token={bool(address_book.sync_token)}, mode={self.mode.value})"
        )
        request = builders.sync_collection(
            props=props, sync_token=address_book.sync_token
        )
        try:
            return self.transport.send(request, address_book.url)
        except TransportError as e:
            if _token_rejected(e):
                raise IncrementalSyncUnsupported(
                    f"Server rejected sync-collection for {address_book.url}: {e}"
                ) from e
            raise

    def _multiget(self, address_book: AddressBook, descriptor: SyncDescriptor) -> None:
        logger.debug(
            f"Fetching {len(descriptor.urls_to_fetch)} cards from {address_book.url}"
        )
        request = builders.addressbook_multiget(
            props=[namespace.GETETAG, namespace.ADDRESS_DATA],
            hrefs=descriptor.urls_to_fetch,
        )
        result = self.transport.send(request, address_book.url)
        descriptor.stats.multiget_requests += 1

        for entry in result:
            if not entry.props.get("address_data"):
                logger.debug(f"Multiget entry {entry.href} is not a card")
                continue
            card_url = resolve_url(address_book.root_url, entry.href)
            self._apply(address_book, descriptor, entry, card_url)

    def _apply(
        self,
        address_book: AddressBook,
        descriptor: SyncDescriptor,
        entry: ResponseEntry,
        card_url: str,
    ) -> None:
        """Store a card's remote etag and body; the remote always wins."""
        etag = entry.props.get("getetag")
        address_data = entry.props.get("address_data")

        local = descriptor.local.lookup(card_url)
        if local is not None:
            local.etag = etag
            local.address_data = address_data
            local.data = entry
            descriptor.updated.append(local)
            return

        card = VCard(
            url=card_url,
            etag=etag,
            address_data=address_data,
            address_book=address_book,
            data=entry,
        )
        address_book.objects.append(card)
        descriptor.local.insert(card)
        descriptor.created.append(card)

    def _remove_deleted(
        self, address_book: AddressBook, descriptor: SyncDescriptor
    ) -> None:
        kept: list[VCard] = []
        for card in address_book.objects:
            if card.url in descriptor.remote:
                kept.append(card)
            else:
                descriptor.deleted.append(card)
        address_book.objects[:] = kept
