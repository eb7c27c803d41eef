"""
carddav_sync.sync - Collection synchronization engine

Contains the data model, the basic and incremental sync strategies, the
per-address-book coordinator and the account-level reconciler.
"""

from carddav_sync.sync.account import AccountReconciler, AccountSyncReport
from carddav_sync.sync.basic import BasicSyncStrategy
from carddav_sync.sync.collection import CollectionSyncCoordinator, SyncMethod
from carddav_sync.sync.descriptor import SyncDescriptor, SyncStats
from carddav_sync.sync.incremental import IncrementalSyncStrategy, is_card_entry
from carddav_sync.sync.index import ResourceIndex
from carddav_sync.sync.models import Account, AddressBook, Credentials, VCard

__all__ = [
    "Account",
    "AccountReconciler",
    "AccountSyncReport",
    "AddressBook",
    "BasicSyncStrategy",
    "CollectionSyncCoordinator",
    "Credentials",
    "IncrementalSyncStrategy",
    "ResourceIndex",
    "SyncDescriptor",
    "SyncMethod",
    "SyncStats",
    "VCard",
    "is_card_entry",
]
