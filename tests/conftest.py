"""Shared fixtures for carddav_sync tests."""

import pytest
from helpers import BOOK_URL, HOME_URL, ROOT_URL

from carddav_sync.sync.models import Account, AddressBook


@pytest.fixture
def account():
    """Create an empty account."""
    return Account(root_url=ROOT_URL, home_url=HOME_URL)


@pytest.fixture
def address_book(account):
    """Create an address book attached to the account."""
    book = AddressBook(
        url=BOOK_URL,
        display_name="Contacts",
        ctag="ctag-1",
        sync_token="token-1",
        reports={"addressbook-query", "addressbook-multiget", "sync-collection"},
        account=account,
    )
    account.address_books.append(book)
    return book
