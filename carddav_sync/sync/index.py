"""
In-memory index of cached cards keyed by absolute URL.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Optional

from carddav_sync.sync.models import VCard


@dataclass
class IndexEntry:
    """A cached card and its position in the address book's object list."""

    resource: VCard
    ordinal: int


class ResourceIndex:
    """
    Mapping from card URL to the cached card.

    Usage:
        index = ResourceIndex.build(address_book.objects)
        card = index.lookup("https://dav.example.com/books/a.vcf")
    """

    def __init__(self) -> None:
        self._entries: dict[str, IndexEntry] = {}

    @classmethod
    def build(cls, resources: Optional[Iterable[VCard]]) -> ResourceIndex:
        """Index resources by URL. None or an empty iterable gives an empty index."""
        index = cls()
        for ordinal, resource in enumerate(resources or ()):
            index._entries[resource.url] = IndexEntry(resource, ordinal)
        return index

    def lookup(self, url: str) -> Optional[VCard]:
        entry = self._entries.get(url)
        return entry.resource if entry is not None else None

    def get(self, url: str) -> Optional[IndexEntry]:
        return self._entries.get(url)

    def insert(self, resource: VCard) -> None:
        self._entries[resource.url] = IndexEntry(resource, len(self._entries))

    def remove(self, url: str) -> Optional[VCard]:
        entry = self._entries.pop(url, None)
        return entry.resource if entry is not None else None

    def urls(self) -> set[str]:
        return set(self._entries)

    def __contains__(self, url: object) -> bool:
        return url in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[VCard]:
        return (entry.resource for entry in self._entries.values())
