"""
Storage Services Package

Provides the key-value storage interface, concrete backends, and the
repositories that keep profiles and transactions in it.
"""

from finance_tracker.services.storage.interface import (
    DuplicateError,
    KeyValueStore,
    NotFoundError,
    StorageError,
)
from finance_tracker.services.storage.json_file import JsonFileKeyValueStore
from finance_tracker.services.storage.memory import InMemoryKeyValueStore
from finance_tracker.services.storage.repositories import (
    PROFILES_KEY,
    TRANSACTIONS_KEY,
    ProfileRepository,
    TransactionRepository,
    transactions_key,
)

__all__ = [
    # Interfaces
    "KeyValueStore",
    # Exceptions
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    # Backends
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    # Repositories
    "PROFILES_KEY",
    "TRANSACTIONS_KEY",
    "ProfileRepository",
    "TransactionRepository",
    "transactions_key",
]
