"""
carddav_sync - CardDAV address book synchronization

Keeps a local in-memory copy of a CardDAV account's address books in step
with the server using ctag probes or RFC 6578 sync-collection reports.
"""

__version__ = "0.1.0"
