"""
Unit tests for the basic (ctag) strategy.
"""

from unittest.mock import MagicMock

import pytest
from helpers import add_card, card_url

from carddav_sync.exceptions import TransportError
from carddav_sync.sync.basic import BasicSyncStrategy
from carddav_sync.sync.models import VCard


@pytest.fixture
def strategy():
    return BasicSyncStrategy()


class TestBasicSyncShortCircuit:
    """Matching ctags skip the listing entirely."""

    def test_matching_ctag_is_noop(self, strategy, address_book):
        card = add_card(address_book, "a.vcf", "e1")
        fetch_all = MagicMock()

        result = strategy.run(address_book, "ctag-1", fetch_all)

        assert result is address_book
        assert address_book.objects == [card]
        fetch_all.assert_not_called()
        assert not strategy.last_stats.has_changes

    def test_never_synced_book_always_fetches(self, strategy, address_book):
        """A book with no ctag yet is fetched even if the server has none."""
        address_book.ctag = None
        fetch_all = MagicMock(return_value=[])

        strategy.run(address_book, None, fetch_all)

        fetch_all.assert_called_once_with(address_book)


class TestBasicSyncRefetch:
    """A changed ctag replaces the cached cards wholesale."""

    def test_changed_ctag_replaces_objects(self, strategy, address_book):
        add_card(address_book, "a.vcf", "e1")
        add_card(address_book, "b.vcf", "e1")
        fresh = [
            VCard(url=card_url("a.vcf"), etag="e2", address_data="A2"),
            VCard(url=card_url("c.vcf"), etag="e1", address_data="C"),
        ]
        fetch_all = MagicMock(return_value=fresh)

        result = strategy.run(address_book, "ctag-2", fetch_all)

        assert result is address_book
        assert address_book.objects == fresh
        assert address_book.ctag == "ctag-2"
        assert strategy.last_stats.created == 1
        assert strategy.last_stats.updated == 1
        assert strategy.last_stats.deleted == 1

    def test_transport_error_propagates(self, strategy, address_book):
        card = add_card(address_book, "a.vcf", "e1")
        fetch_all = MagicMock(side_effect=TransportError("boom"))

        with pytest.raises(TransportError):
            strategy.run(address_book, "ctag-2", fetch_all)

        assert address_book.objects == [card]
        assert address_book.ctag == "ctag-1"
