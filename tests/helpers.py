"""Builders shared by the carddav_sync tests."""

from unittest.mock import MagicMock

from carddav_sync.dav.multistatus import MultiStatus, ResponseEntry
from carddav_sync.dav.transport import ListingMode, Transport
from carddav_sync.sync.models import VCard

ROOT_URL = "https://dav.example.com/"
HOME_URL = "https://dav.example.com/addressbooks/jane/"
BOOK_URL = "https://dav.example.com/addressbooks/jane/contacts/"
BOOK_HREF = "/addressbooks/jane/contacts/"


def card_href(name):
    """Server-relative href of a card in the default test book."""
    return f"{BOOK_HREF}{name}"


def card_url(name):
    """Absolute URL of a card in the default test book."""
    return f"{BOOK_URL}{name}"


def vcard_body(name):
    return f"BEGIN:VCARD\nVERSION:3.0\nFN:{name}\nEND:VCARD"


def multistatus(*entries, sync_token=None):
    """Build a MultiStatus from (href, props) pairs."""
    return MultiStatus(
        entries=[
            ResponseEntry(href=href, props=dict(props)) for href, props in entries
        ],
        sync_token=sync_token,
    )


def mock_transport(mode=ListingMode.TWO_PHASE, responses=()):
    """Create a mock Transport returning the given responses in order."""
    transport = MagicMock(spec=Transport)
    transport.listing_mode = mode
    transport.send.side_effect = list(responses)
    return transport


def add_card(address_book, name, etag, body=None):
    """Append a cached card to an address book and return it."""
    card = VCard(
        url=card_url(name),
        etag=etag,
        address_data=body or vcard_body(name),
        address_book=address_book,
    )
    address_book.objects.append(card)
    return card
