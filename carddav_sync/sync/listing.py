"""
Server-side listings used by the sync engine.

- list_address_books: discover the address books under an account's home
- list_vcards: fetch every card of an address book (basic sync's fetch-all)
"""

from __future__ import annotations

import logging

from carddav_sync.dav import builders, namespace
from carddav_sync.dav.transport import Transport
from carddav_sync.dav.urls import resolve_url
from carddav_sync.dav.webdav import supported_report_set
from carddav_sync.sync.models import Account, AddressBook, VCard

ADDRESSBOOK_RESOURCETYPE = "addressbook"

logger = logging.getLogger(__name__)


def _is_address_book(props: dict) -> bool:
    resourcetype = props.get("resourcetype")
    if resourcetype is not None:
        return ADDRESSBOOK_RESOURCETYPE in resourcetype
    return isinstance(props.get("displayname"), str)


def list_address_books(account: Account, transport: Transport) -> list[AddressBook]:
    """
    Discover the address books in an account's home set.

    Each returned book has its supported REPORT set filled in. Discovered
    books start without a ctag or sync token so their first sync is a full
    one.

    Args:
        account: Account whose home URL is listed
        transport: Transport used for the PROPFINDs

    Returns:
        Newly built AddressBook objects in server order

    Raises:
        TransportError: If any request fails
    """
    logger.debug(f"Fetching address books from home url {account.home_url}")
    request = builders.propfind(
        props=[namespace.DISPLAYNAME, namespace.GETCTAG, namespace.RESOURCETYPE],
        depth=1,
    )
    responses = transport.send(request, account.home_url)

    address_books = []
    for response in responses:
        if not _is_address_book(response.props):
            continue
        logger.debug(f"Found address book named {response.props.get('displayname')}")
        address_books.append(
            AddressBook(
                url=resolve_url(account.root_url, response.href),
                display_name=response.props.get("displayname"),
                resourcetype=list(response.props.get("resourcetype", [])),
                account=account,
                data=response,
            )
        )

    for address_book in address_books:
        address_book.reports = supported_report_set(address_book, transport)

    return address_books


def list_vcards(address_book: AddressBook, transport: Transport) -> list[VCard]:
    """
    Fetch every card in an address book with one addressbook-query REPORT.

    Responses without address-data are not cards and are skipped.
    """
    logger.debug(f"Doing REPORT on address book {address_book.url}")
    request = builders.addressbook_query(
        props=[namespace.GETETAG, namespace.ADDRESS_DATA], depth=1
    )
    responses = transport.send(request, address_book.url)

    cards = []
    for response in responses:
        address_data = response.props.get("address_data")
        if not address_data:
            continue
        cards.append(
            VCard(
                url=resolve_url(address_book.root_url, response.href),
                etag=response.props.get("getetag"),
                address_data=address_data,
                address_book=address_book,
                data=response,
            )
        )
    logger.debug(f"Found {len(cards)} cards in {address_book.url}")
    return cards
