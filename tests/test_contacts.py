"""
Unit tests for the high-level contacts API.
"""

from unittest.mock import MagicMock, patch

from helpers import add_card, card_url, mock_transport

from carddav_sync import contacts
from carddav_sync.sync.account import AccountSyncReport
from carddav_sync.sync.collection import SyncMethod


class TestCardWrites:
    def test_create_card_resolves_filename(self, address_book):
        transport = mock_transport()

        contacts.create_card(address_book, "new.vcf", "BEGIN:VCARD", transport)

        request, url = transport.request.call_args.args
        assert url == card_url("new.vcf")
        assert request.headers["If-None-Match"] == "*"

    def test_update_card_sends_cached_body(self, address_book):
        card = add_card(address_book, "a.vcf", '"e1"', body="BEGIN:VCARD\nFN:A")
        transport = mock_transport()

        contacts.update_card(card, transport)

        request, url = transport.request.call_args.args
        assert url == card.url
        assert request.body == "BEGIN:VCARD\nFN:A"
        assert request.headers["If-Match"] == '"e1"'

    def test_delete_card(self, address_book):
        card = add_card(address_book, "a.vcf", '"e1"')
        transport = mock_transport()

        contacts.delete_card(card, transport)

        request, url = transport.request.call_args.args
        assert request.method == "DELETE"
        assert url == card.url


class TestSyncFacade:
    def test_sync_address_book_uses_method(self, address_book):
        transport = mock_transport()
        with patch(
            "carddav_sync.contacts.CollectionSyncCoordinator"
        ) as coordinator_cls:
            coordinator_cls.return_value.sync.return_value = address_book

            result = contacts.sync_address_book(address_book, transport, "basic")

        assert result is address_book
        coordinator_cls.assert_called_once_with(transport, sync_method="basic")

    def test_sync_carddav_account_returns_account(self, account):
        transport = mock_transport()
        report = AccountSyncReport(account=account)
        with patch("carddav_sync.contacts.AccountReconciler") as reconciler_cls:
            reconciler_cls.return_value.reconcile.return_value = report

            result = contacts.sync_carddav_account(account, transport, max_workers=2)

        assert result is account
        kwargs = reconciler_cls.call_args.kwargs
        assert kwargs["max_workers"] == 2
        assert kwargs["coordinator"].sync_method == SyncMethod.AUTO

    def test_reconcile_passes_eviction_hook(self, account):
        transport = mock_transport()
        hook = MagicMock()
        with patch("carddav_sync.contacts.AccountReconciler") as reconciler_cls:
            contacts.reconcile_carddav_account(account, transport, on_evict=hook)

        assert reconciler_cls.call_args.kwargs["on_evict"] is hook
