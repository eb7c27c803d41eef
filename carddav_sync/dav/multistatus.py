"""
Multi-status (207) response parsing.

Turns a DAV:multistatus document into an ordered list of ResponseEntry
objects with properties keyed by snake_case local name, e.g.::

    ResponseEntry(
        href="/addressbooks/user/default/a.vcf",
        props={"getetag": '"e1"', "address_data": "BEGIN:VCARD..."},
    )

Server order is preserved.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, Optional

from carddav_sync.dav.namespace import DAV
from carddav_sync.exceptions import TransportError

logger = logging.getLogger(__name__)

_STATUS_RE = re.compile(r"^\s*HTTP/\d(?:\.\d)?\s+(\d{3})")


@dataclass
class ResponseEntry:
    """One DAV:response element."""

    href: str
    props: dict[str, Any] = field(default_factory=dict)
    status: Optional[int] = None


@dataclass
class MultiStatus:
    """
    Parsed multi-status body.

    Iterating a MultiStatus yields its entries in server order. sync_token is
    the top-level DAV:sync-token of a sync-collection report, if any.
    """

    entries: list[ResponseEntry] = field(default_factory=list)
    sync_token: Optional[str] = None

    def __iter__(self) -> Iterator[ResponseEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, index: int) -> ResponseEntry:
        return self.entries[index]


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _prop_key(tag: str) -> str:
    return _local_name(tag).replace("-", "_")


def parse_status(text: Optional[str]) -> Optional[int]:
    """Extract the numeric code from an 'HTTP/1.1 200 OK' status line."""
    if not text:
        return None
    match = _STATUS_RE.match(text)
    return int(match.group(1)) if match else None


def _prop_value(element: ET.Element) -> Any:
    name = _local_name(element.tag)
    if name == "resourcetype":
        return [_local_name(child.tag) for child in element]
    if name == "supported-report-set":
        reports = []
        for report in element.iter(f"{{{DAV}}}report"):
            reports.extend(_local_name(child.tag) for child in report)
        return reports
    return element.text if element.text is not None else ""


def _parse_response(element: ET.Element) -> Optional[ResponseEntry]:
    href = element.findtext(f"{{{DAV}}}href")
    if href is None:
        return None

    entry = ResponseEntry(
        href=href.strip(), status=parse_status(element.findtext(f"{{{DAV}}}status"))
    )

    for propstat in element.findall(f"{{{DAV}}}propstat"):
        status = parse_status(propstat.findtext(f"{{{DAV}}}status"))
        if status is not None and not 200 <= status < 300:
            continue
        prop = propstat.find(f"{{{DAV}}}prop")
        if prop is None:
            continue
        for child in prop:
            entry.props[_prop_key(child.tag)] = _prop_value(child)

    return entry


def parse_multistatus(body: str | bytes) -> MultiStatus:
    """
    Parse a multistatus document.

    Args:
        body: Raw response body

    Returns:
        MultiStatus with entries in document order

    Raises:
        TransportError: If the body is not well-formed XML or not a multistatus
    """
    try:
        root = ET.fromstring(body)
    except ET.ParseError as e:
        raise TransportError(f"Malformed multistatus response: {e}") from e

    if root.tag != f"{{{DAV}}}multistatus":
        raise TransportError(f"Expected DAV:multistatus, got {root.tag}")

    result = MultiStatus(sync_token=root.findtext(f"{{{DAV}}}sync-token"))
    for element in root.findall(f"{{{DAV}}}response"):
        entry = _parse_response(element)
        if entry is None:
            logger.debug("Skipping multistatus response without href")
            continue
        result.entries.append(entry)

    return result
