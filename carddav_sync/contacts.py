"""
High-level CardDAV contacts API.

Thin functions over the sync engine and WebDAV helpers for callers that
just want to list, write or sync cards:

    transport = make_transport(credentials=account.credentials)
    account = sync_carddav_account(account, transport)
    create_card(account.address_books[0], "jane.vcf", vcard_text, transport)
"""

from __future__ import annotations

import logging
from typing import Optional, Union

import requests

from carddav_sync.dav import webdav
from carddav_sync.dav.transport import Transport
from carddav_sync.dav.urls import resolve_url
from carddav_sync.sync.account import (
    DEFAULT_MAX_WORKERS,
    AccountReconciler,
    AccountSyncReport,
    EvictionHook,
)
from carddav_sync.sync.collection import CollectionSyncCoordinator, SyncMethod
from carddav_sync.sync.listing import list_address_books, list_vcards
from carddav_sync.sync.models import Account, AddressBook, VCard

logger = logging.getLogger(__name__)

__all__ = [
    "create_card",
    "delete_card",
    "list_address_books",
    "list_vcards",
    "reconcile_carddav_account",
    "sync_address_book",
    "sync_carddav_account",
    "update_card",
]


def create_card(
    address_book: AddressBook, filename: str, data: str, transport: Transport
) -> requests.Response:
    """
    Upload a new card into an address book.

    The local cache is not touched; the next sync picks the card up.

    Args:
        address_book: Target address book
        filename: Name of the .vcf resource, relative to the book URL
        data: vCard text
        transport: Transport used for the PUT

    Raises:
        TransportError: If the server refuses the card (e.g. it already exists)
    """
    object_url = resolve_url(address_book.url, filename)
    return webdav.create_object(object_url, data, transport)


def update_card(card: VCard, transport: Transport) -> requests.Response:
    """Upload a card's current address_data, conditional on its etag."""
    return webdav.update_object(card.url, card.address_data or "", card.etag, transport)


def delete_card(card: VCard, transport: Transport) -> requests.Response:
    """Delete a card on the server, conditional on its etag."""
    return webdav.delete_object(card.url, card.etag, transport)


def sync_address_book(
    address_book: AddressBook,
    transport: Transport,
    sync_method: Union[SyncMethod, str] = SyncMethod.AUTO,
) -> AddressBook:
    """
    Sync one address book.

    With sync_method "auto", RFC 6578 sync is used when the server
    advertises it and basic ctag sync otherwise.
    """
    coordinator = CollectionSyncCoordinator(transport, sync_method=sync_method)
    return coordinator.sync(address_book)


def reconcile_carddav_account(
    account: Account,
    transport: Transport,
    sync_method: Union[SyncMethod, str] = SyncMethod.AUTO,
    max_workers: int = DEFAULT_MAX_WORKERS,
    on_evict: Optional[EvictionHook] = None,
) -> AccountSyncReport:
    """Sync every address book of an account and report the outcome."""
    reconciler = AccountReconciler(
        transport,
        coordinator=CollectionSyncCoordinator(transport, sync_method=sync_method),
        max_workers=max_workers,
        on_evict=on_evict,
    )
    return reconciler.reconcile(account)


def sync_carddav_account(
    account: Account,
    transport: Transport,
    sync_method: Union[SyncMethod, str] = SyncMethod.AUTO,
    max_workers: int = DEFAULT_MAX_WORKERS,
    on_evict: Optional[EvictionHook] = None,
) -> Account:
    """
    Sync every address book of an account.

    Address books whose sync fails are removed from the account rather than
    raising. Pass on_evict to be told about them.
    """
    return reconcile_carddav_account(
        account,
        transport,
        sync_method=sync_method,
        max_workers=max_workers,
        on_evict=on_evict,
    ).account
