"""
Unit tests for address book discovery and full card listings.
"""

import pytest
from helpers import (
    BOOK_HREF,
    BOOK_URL,
    HOME_URL,
    card_href,
    card_url,
    mock_transport,
    multistatus,
    vcard_body,
)

from carddav_sync.exceptions import TransportError
from carddav_sync.sync.listing import list_address_books, list_vcards


class TestListAddressBooks:
    """Tests for list_address_books."""

    def test_keeps_address_book_collections(self, account):
        transport = mock_transport(
            responses=[
                multistatus(
                    ("/addressbooks/jane/", {"resourcetype": ["collection"]}),
                    (
                        BOOK_HREF,
                        {
                            "displayname": "Contacts",
                            "getctag": "ctag-5",
                            "resourcetype": ["collection", "addressbook"],
                        },
                    ),
                    (
                        "/addressbooks/jane/inbox/",
                        {"displayname": "Inbox", "resourcetype": ["collection"]},
                    ),
                ),
                multistatus((BOOK_HREF, {"supported_report_set": ["sync-collection"]})),
            ]
        )

        books = list_address_books(account, transport)

        assert len(books) == 1
        book = books[0]
        assert book.url == BOOK_URL
        assert book.display_name == "Contacts"
        assert book.account is account
        assert book.reports == {"sync-collection"}
        assert book.supports_sync_collection()

        request, url = transport.send.call_args_list[0].args
        assert request.method == "PROPFIND"
        assert request.headers["Depth"] == "1"
        assert url == HOME_URL

    def test_discovered_books_start_unsynced(self, account):
        transport = mock_transport(
            responses=[
                multistatus(
                    (
                        BOOK_HREF,
                        {"getctag": "ctag-5", "resourcetype": ["addressbook"]},
                    ),
                ),
                multistatus((BOOK_HREF, {})),
            ]
        )

        book = list_address_books(account, transport)[0]

        assert book.ctag is None
        assert book.sync_token is None
        assert book.objects == []

    def test_displayname_fallback_without_resourcetype(self, account):
        transport = mock_transport(
            responses=[
                multistatus(
                    (BOOK_HREF, {"displayname": "Contacts"}),
                    ("/addressbooks/jane/x/", {}),
                ),
                multistatus((BOOK_HREF, {})),
            ]
        )

        books = list_address_books(account, transport)

        assert [book.url for book in books] == [BOOK_URL]

    def test_failure_propagates(self, account):
        transport = mock_transport(responses=[TransportError("down")])

        with pytest.raises(TransportError):
            list_address_books(account, transport)


class TestListVcards:
    """Tests for list_vcards."""

    def test_builds_cards(self, address_book):
        transport = mock_transport(
            responses=[
                multistatus(
                    (BOOK_HREF, {}),
                    (
                        card_href("a.vcf"),
                        {"getetag": '"e1"', "address_data": vcard_body("A")},
                    ),
                    (
                        card_href("b.vcf"),
                        {"getetag": '"e2"', "address_data": vcard_body("B")},
                    ),
                )
            ]
        )

        cards = list_vcards(address_book, transport)

        assert [card.url for card in cards] == [card_url("a.vcf"), card_url("b.vcf")]
        assert cards[0].etag == '"e1"'
        assert cards[0].address_data == vcard_body("A")
        assert cards[0].address_book is address_book

        request, url = transport.send.call_args.args
        assert request.method == "REPORT"
        assert b"addressbook-query" in request.body.encode("utf-8")
        assert url == BOOK_URL
