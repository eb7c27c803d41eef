"""
carddav_sync.dav - WebDAV/CardDAV protocol helpers

Request builders, multi-status parsing, the transport abstraction and the
small set of WebDAV operations the sync engine depends on.
"""

from carddav_sync.dav.multistatus import MultiStatus, ResponseEntry, parse_multistatus
from carddav_sync.dav.transport import (
    FactoryTransport,
    ListingMode,
    SessionTransport,
    Transport,
    make_transport,
)
from carddav_sync.dav.urls import fuzzy_url_equals, resolve_url

__all__ = [
    "FactoryTransport",
    "ListingMode",
    "MultiStatus",
    "ResponseEntry",
    "SessionTransport",
    "Transport",
    "fuzzy_url_equals",
    "make_transport",
    "parse_multistatus",
    "resolve_url",
]
