"""Services package."""

from finance_tracker.services.currency import CurrencyService
from finance_tracker.services.entitlement import (
    FREE_PROFILE_LIMIT,
    FREE_TRANSACTION_LIMIT,
    EntitlementService,
)
from finance_tracker.services.export import ExportService
from finance_tracker.services.storage import (
    DuplicateError,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    NotFoundError,
    ProfileRepository,
    StorageError,
    TransactionRepository,
)

__all__ = [
    # Currency
    "CurrencyService",
    # Entitlements
    "EntitlementService",
    "FREE_PROFILE_LIMIT",
    "FREE_TRANSACTION_LIMIT",
    # Export
    "ExportService",
    # Storage services
    "DuplicateError",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "NotFoundError",
    "ProfileRepository",
    "StorageError",
    "TransactionRepository",
]
