"""
Account-level reconciliation.

Discovers the account's address books, adds the ones not already known,
then syncs every known book concurrently. A book whose sync fails is
evicted from the account; the other books still complete and no error
reaches the caller.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Optional

from carddav_sync.dav.transport import Transport
from carddav_sync.dav.urls import fuzzy_url_equals
from carddav_sync.sync.collection import CollectionSyncCoordinator
from carddav_sync.sync.listing import list_address_books
from carddav_sync.sync.models import Account, AddressBook

# Default number of address books synced in parallel
DEFAULT_MAX_WORKERS = 4

Discover = Callable[[Account], list[AddressBook]]
EvictionHook = Callable[[AddressBook, Exception], None]
UrlEquivalence = Callable[[str, str], bool]

logger = logging.getLogger(__name__)


@dataclass
class AccountSyncReport:
    """
    Outcome of one reconciliation pass.

    Attributes:
        account: The reconciled account
        discovered: Address books added by this pass
        synced: Address books that synced successfully
        evicted: (address book, error) pairs removed from the account
    """

    account: Account
    discovered: list[AddressBook] = field(default_factory=list)
    synced: list[AddressBook] = field(default_factory=list)
    evicted: list[tuple[AddressBook, Exception]] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        return bool(self.evicted)


class AccountReconciler:
    """
    Drive discovery and per-address-book sync for a whole account.

    The account's address book list is only touched while holding a lock,
    and only to append discovered books or remove evicted ones.

    Usage:
        reconciler = AccountReconciler(transport)
        account = reconciler.sync(account)

        # With a hook to observe evictions
        reconciler = AccountReconciler(transport, on_evict=report_failure)
        report = reconciler.reconcile(account)
    """

    def __init__(
        self,
        transport: Transport,
        coordinator: Optional[CollectionSyncCoordinator] = None,
        discover: Optional[Discover] = None,
        equivalent: UrlEquivalence = fuzzy_url_equals,
        max_workers: int = DEFAULT_MAX_WORKERS,
        on_evict: Optional[EvictionHook] = None,
    ):
        """
        Initialize the reconciler.

        Args:
            transport: Transport for discovery and the default coordinator
            coordinator: Per-book sync driver; built from transport if None
            discover: Callable listing the account's remote address books
            equivalent: URL equivalence used to match discovered books
            max_workers: Maximum address books synced at the same time
            on_evict: Called with (address_book, error) for each eviction
        """
        self.transport = transport
        self.coordinator = coordinator or CollectionSyncCoordinator(transport)
        self.discover: Discover = discover or self._list_address_books
        self.equivalent = equivalent
        self.max_workers = max_workers
        self.on_evict = on_evict
        self._lock = threading.Lock()

    def _list_address_books(self, account: Account) -> list[AddressBook]:
        return list_address_books(account, self.transport)

    def sync(self, account: Account) -> Account:
        """Reconcile an account in place and return it."""
        return self.reconcile(account).account

    def reconcile(self, account: Account) -> AccountSyncReport:
        """
        Reconcile an account and report what happened.

        Raises:
            TransportError: If discovery itself fails. Per-book failures
                never raise; they evict the book instead.
        """
        report = AccountSyncReport(account=account)

        discovered = self.discover(account)
        with self._lock:
            for address_book in discovered:
                if self._is_known(account, address_book):
                    continue
                logger.debug(f"Adding newly discovered {address_book.url}")
                address_book.account = account
                account.address_books.append(address_book)
                report.discovered.append(address_book)
            address_books = list(account.address_books)

        if not address_books:
            logger.info(f"No address books to sync for {account.home_url}")
            return report

        workers = max(1, min(self.max_workers, len(address_books)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(self.coordinator.sync, address_book): address_book
                for address_book in address_books
            }
            for future in as_completed(futures):
                address_book = futures[future]
                try:
                    future.result()
                except Exception as e:
                    self._evict(account, address_book, e, report)
                else:
                    report.synced.append(address_book)

        logger.info(
            f"Synced {len(report.synced)} address books for {account.home_url}, "
            f"evicted {len(report.evicted)}"
        )
        return report

    def _is_known(self, account: Account, candidate: AddressBook) -> bool:
        return any(
            self.equivalent(known.url, candidate.url)
            for known in account.address_books
        )

    def _evict(
        self,
        account: Account,
        address_book: AddressBook,
        error: Exception,
        report: AccountSyncReport,
    ) -> None:
        name = address_book.display_name or address_book.url
        logger.warning(f"Syncing {name} failed with {error}; removing it")
        logger.debug("Sync failure details", exc_info=error)

        with self._lock:
            account.address_books[:] = [
                book for book in account.address_books if book is not address_book
            ]
            report.evicted.append((address_book, error))

        if self.on_evict is None:
            return
        try:
            self.on_evict(address_book, error)
        except Exception:
            logger.exception(f"Eviction hook failed for {name}")
