"""
Request builders for the WebDAV/CardDAV requests used during sync.

Each builder returns a DavRequest describing the HTTP method, the Depth
header and the XML body. Sending is the transport's job.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Optional

from carddav_sync.dav.namespace import CARDDAV, DAV, PREFIXES, Prop

XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>\n'

for _uri, _prefix in PREFIXES.items():
    ET.register_namespace(_prefix, _uri)


@dataclass
class DavRequest:
    """
    A request ready to be sent by a transport.

    Attributes:
        method: HTTP method (PROPFIND, REPORT, PUT, DELETE)
        body: Request body, or None
        headers: Extra HTTP headers (Depth, Content-Type, If-Match, ...)
    """

    method: str
    body: Optional[str] = None
    headers: dict[str, str] = field(default_factory=dict)


def _qname(namespace: str, name: str) -> str:
    return f"{{{namespace}}}{name}"


def _prop_element(parent: ET.Element, props: Iterable[Prop]) -> ET.Element:
    prop = ET.SubElement(parent, _qname(DAV, "prop"))
    for p in props:
        ET.SubElement(prop, p.clark)
    return prop


def _xml_request(method: str, root: ET.Element, depth: int | str) -> DavRequest:
    body = XML_DECLARATION + ET.tostring(root, encoding="unicode")
    return DavRequest(
        method=method,
        body=body,
        headers={
            "Depth": str(depth),
            "Content-Type": "application/xml; charset=utf-8",
        },
    )


def propfind(props: Sequence[Prop], depth: int | str = 0) -> DavRequest:
    """Build a PROPFIND asking for the given properties."""
    root = ET.Element(_qname(DAV, "propfind"))
    _prop_element(root, props)
    return _xml_request("PROPFIND", root, depth)


def sync_collection(
    props: Sequence[Prop], sync_token: Optional[str], sync_level: int = 1
) -> DavRequest:
    """
    Build an RFC 6578 sync-collection REPORT.

    An empty or missing sync token asks the server for the full membership
    together with a fresh token.
    """
    root = ET.Element(_qname(DAV, "sync-collection"))
    token = ET.SubElement(root, _qname(DAV, "sync-token"))
    token.text = sync_token or ""
    level = ET.SubElement(root, _qname(DAV, "sync-level"))
    level.text = str(sync_level)
    _prop_element(root, props)
    return _xml_request("REPORT", root, 0)


def addressbook_query(props: Sequence[Prop], depth: int = 1) -> DavRequest:
    """Build an addressbook-query REPORT matching every card."""
    root = ET.Element(_qname(CARDDAV, "addressbook-query"))
    _prop_element(root, props)
    return _xml_request("REPORT", root, depth)


def addressbook_multiget(props: Sequence[Prop], hrefs: Sequence[str]) -> DavRequest:
    """Build one addressbook-multiget REPORT naming every href to fetch."""
    root = ET.Element(_qname(CARDDAV, "addressbook-multiget"))
    _prop_element(root, props)
    for href in hrefs:
        element = ET.SubElement(root, _qname(DAV, "href"))
        element.text = href
    return _xml_request("REPORT", root, 1)
