"""
WebDAV operations used by the sync engine and card helpers.

- fetch_ctag: cheap collection change-tag probe
- supported_report_set: which REPORTs a collection accepts
- create_object / update_object / delete_object: single-resource writes
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from carddav_sync.dav import builders, namespace
from carddav_sync.dav.urls import fuzzy_url_equals
from carddav_sync.exceptions import CollectionNotFound

if TYPE_CHECKING:
    import requests

    from carddav_sync.dav.transport import Transport
    from carddav_sync.sync.models import AddressBook

VCARD_CONTENT_TYPE = "text/vcard; charset=utf-8"

logger = logging.getLogger(__name__)


def fetch_ctag(address_book: AddressBook, transport: Transport) -> Optional[str]:
    """
    Read the current CS:getctag of an address book from the server.

    Args:
        address_book: Address book to probe
        transport: Transport used to send the PROPFIND

    Returns:
        The remote ctag, or None if the server does not report one

    Raises:
        CollectionNotFound: If the reply has no entry for the collection
        TransportError: If the request fails
    """
    logger.debug(f"Fetching remote getctag for {address_book.url}")
    request = builders.propfind(props=[namespace.GETCTAG], depth=0)
    responses = transport.send(request, address_book.url)

    for response in responses:
        if fuzzy_url_equals(address_book.url, response.href):
            return response.props.get("getctag")

    raise CollectionNotFound(
        f"Could not find {address_book.url} on remote. Was it deleted?"
    )


def supported_report_set(address_book: AddressBook, transport: Transport) -> set[str]:
    """
    List the REPORT names an address book supports.

    Returns:
        Set of report local names, e.g. {"addressbook-query", "sync-collection"}
    """
    logger.debug(f"Checking supported REPORT set for {address_book.url}")
    request = builders.propfind(props=[namespace.SUPPORTED_REPORT_SET], depth=0)
    responses = transport.send(request, address_book.url)

    reports: set[str] = set()
    for response in responses:
        reports.update(response.props.get("supported_report_set", []))
    return reports


def create_object(
    object_url: str, data: str, transport: Transport
) -> requests.Response:
    """PUT a new resource, refusing to overwrite an existing one."""
    logger.debug(f"Creating object at {object_url}")
    request = builders.DavRequest(
        method="PUT",
        body=data,
        headers={"Content-Type": VCARD_CONTENT_TYPE, "If-None-Match": "*"},
    )
    return transport.request(request, object_url)


def update_object(
    object_url: str, data: str, etag: Optional[str], transport: Transport
) -> requests.Response:
    """PUT new content over a resource, conditional on its etag when known."""
    logger.debug(f"Updating object at {object_url}")
    headers = {"Content-Type": VCARD_CONTENT_TYPE}
    if etag:
        headers["If-Match"] = etag
    request = builders.DavRequest(method="PUT", body=data, headers=headers)
    return transport.request(request, object_url)


def delete_object(
    object_url: str, etag: Optional[str], transport: Transport
) -> requests.Response:
    """DELETE a resource, conditional on its etag when known."""
    logger.debug(f"Deleting object at {object_url}")
    headers: dict[str, str] = {}
    if etag:
        headers["If-Match"] = etag
    request = builders.DavRequest(method="DELETE", headers=headers)
    return transport.request(request, object_url)
