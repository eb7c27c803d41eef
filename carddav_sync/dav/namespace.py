"""XML namespaces used by WebDAV, CardDAV and CalendarServer extensions."""

from __future__ import annotations

from typing import NamedTuple

DAV = "DAV:"
CARDDAV = "urn:ietf:params:xml:ns:carddav"
CALDAV = "urn:ietf:params:xml:ns:caldav"
CALENDAR_SERVER = "http://calendarserver.org/ns/"

# Prefixes written into request bodies
PREFIXES = {
    DAV: "d",
    CARDDAV: "card",
    CALDAV: "c",
    CALENDAR_SERVER: "cs",
}


class Prop(NamedTuple):
    """A WebDAV property name qualified by its namespace."""

    name: str
    namespace: str = DAV

    @property
    def clark(self) -> str:
        """ElementTree's {namespace}name notation."""
        return f"{{{self.namespace}}}{self.name}"


GETETAG = Prop("getetag", DAV)
GETCTAG = Prop("getctag", CALENDAR_SERVER)
DISPLAYNAME = Prop("displayname", DAV)
RESOURCETYPE = Prop("resourcetype", DAV)
SYNC_TOKEN = Prop("sync-token", DAV)
SUPPORTED_REPORT_SET = Prop("supported-report-set", DAV)
ADDRESS_DATA = Prop("address-data", CARDDAV)
