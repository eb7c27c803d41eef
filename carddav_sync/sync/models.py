"""
Data model for CardDAV synchronization.

An Account owns its AddressBooks; an AddressBook owns the VCards cached
from the server. VCards keep a non-owning back-reference to their book.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from carddav_sync.sync.descriptor import SyncStats


@dataclass
class Credentials:
    """Username/password pair applied as HTTP basic auth."""

    username: str
    password: str = field(default="", repr=False)


@dataclass(eq=False)
class VCard:
    """
    A single contact card cached from the server.

    Attributes:
        url: Absolute URL of the card, unique within its address book
        etag: Opaque version stamp; the only change-detection signal
        address_data: Raw vCard text as returned by the server
        address_book: Owning address book (not owned)
        data: The response entry the card was built from, if any

    Cards compare by identity. Two VCard objects with equal fields are still
    different cache entries.
    """

    url: str
    etag: Optional[str] = None
    address_data: Optional[str] = None
    address_book: Optional["AddressBook"] = field(default=None, repr=False)
    data: Any = field(default=None, repr=False)


@dataclass(eq=False)
class AddressBook:
    """
    A CardDAV address book (collection).

    Attributes:
        url: Canonical absolute URL of the collection
        display_name: Human readable name from DAV:displayname
        ctag: Collection change tag (CS:getctag); None if never synced
        sync_token: RFC 6578 cursor for incremental sync; None if unknown
        objects: Cached cards; order is irrelevant
        reports: Supported REPORT names (e.g. "sync-collection")
        resourcetype: Local names from DAV:resourcetype
        account: Owning account (not owned)
        last_sync_stats: Counts from the most recent sync call
    """

    url: str
    display_name: Optional[str] = None
    ctag: Optional[str] = None
    sync_token: Optional[str] = None
    objects: list[VCard] = field(default_factory=list)
    reports: set[str] = field(default_factory=set)
    resourcetype: list[str] = field(default_factory=list)
    account: Optional["Account"] = field(default=None, repr=False)
    data: Any = field(default=None, repr=False)
    last_sync_stats: Optional["SyncStats"] = field(default=None, repr=False)

    def supports_sync_collection(self) -> bool:
        """Check whether the server advertises RFC 6578 sync for this book."""
        return "sync-collection" in self.reports

    @property
    def root_url(self) -> str:
        """Base URL that response hrefs are resolved against."""
        if self.account is not None and self.account.root_url:
            return self.account.root_url
        return self.url


@dataclass(eq=False)
class Account:
    """
    A CardDAV account.

    Attributes:
        root_url: Server root; response hrefs resolve against it
        home_url: Address book home set URL
        credentials: Optional basic-auth credentials
        address_books: Known address books, in discovery order
    """

    root_url: str
    home_url: str
    credentials: Optional[Credentials] = None
    address_books: list[AddressBook] = field(default_factory=list)
