"""
Profile and Transaction Repositories

Profiles and transactions are stored as JSON-encoded arrays under fixed
keys of a KeyValueStore:

    SavedUsers                      -> [UserProfile, ...]
    SavedTransactions_<profile id>  -> [Transaction, ...]
    SavedTransactions               -> [Transaction, ...] (no profile selected)

Amounts are always serialized in USD.
"""

from typing import Optional
from uuid import UUID

import structlog
from pydantic import TypeAdapter, ValidationError

from finance_tracker.models.transaction import Transaction, UserProfile
from finance_tracker.services.storage.interface import (
    DuplicateError,
    KeyValueStore,
    NotFoundError,
)


PROFILES_KEY = "SavedUsers"
TRANSACTIONS_KEY = "SavedTransactions"

_profiles_adapter = TypeAdapter(list[UserProfile])
_transactions_adapter = TypeAdapter(list[Transaction])

logger = structlog.get_logger(__name__)


def transactions_key(profile_id: Optional[UUID]) -> str:
    """Storage key for a profile's transaction list."""
    if profile_id is None:
        return TRANSACTIONS_KEY
    return f"{TRANSACTIONS_KEY}_{str(profile_id).upper()}"


class ProfileRepository:
    """Reads and writes the list of user profiles."""

    def __init__(self, store: KeyValueStore):
        self._store = store

    def list_profiles(self) -> list[UserProfile]:
        raw = self._store.get_data(PROFILES_KEY)
        if raw is None:
            return []
        try:
            return _profiles_adapter.validate_json(raw)
        except ValidationError as e:
            logger.warning("profiles_decode_failed", key=PROFILES_KEY, error=str(e))
            return []

    def save_all(self, profiles: list[UserProfile]) -> None:
        self._store.set_data(
            PROFILES_KEY,
            _profiles_adapter.dump_json(profiles).decode("utf-8"),
        )
        logger.info("profiles_saved", count=len(profiles))

    def get(self, profile_id: UUID) -> Optional[UserProfile]:
        for profile in self.list_profiles():
            if profile.id == profile_id:
                return profile
        return None

    def count(self) -> int:
        return len(self.list_profiles())

    def add(self, profile: UserProfile) -> UserProfile:
        profiles = self.list_profiles()
        if any(p.id == profile.id for p in profiles):
            raise DuplicateError(f"Profile {profile.id} already exists")
        profiles.append(profile)
        self.save_all(profiles)
        return profile

    def remove(self, profile_id: UUID) -> UserProfile:
        profiles = self.list_profiles()
        remaining = [p for p in profiles if p.id != profile_id]
        if len(remaining) == len(profiles):
            raise NotFoundError(f"Profile {profile_id} not found")
        removed = next(p for p in profiles if p.id == profile_id)
        self.save_all(remaining)
        return removed


class TransactionRepository:
    """Reads and writes per-profile transaction lists."""

    def __init__(self, store: KeyValueStore):
        self._store = store

    def list_transactions(self, profile_id: Optional[UUID] = None) -> list[Transaction]:
        key = transactions_key(profile_id)
        raw = self._store.get_data(key)
        if raw is None:
            return []
        try:
            return _transactions_adapter.validate_json(raw)
        except ValidationError as e:
            logger.warning("transactions_decode_failed", key=key, error=str(e))
            return []

    def save_all(
        self,
        transactions: list[Transaction],
        profile_id: Optional[UUID] = None,
    ) -> None:
        key = transactions_key(profile_id)
        self._store.set_data(
            key,
            _transactions_adapter.dump_json(transactions).decode("utf-8"),
        )
        logger.info("transactions_saved", key=key, count=len(transactions))

    def count(self, profile_id: Optional[UUID] = None) -> int:
        return len(self.list_transactions(profile_id))

    def get(
        self,
        transaction_id: UUID,
        profile_id: Optional[UUID] = None,
    ) -> Optional[Transaction]:
        for transaction in self.list_transactions(profile_id):
            if transaction.id == transaction_id:
                return transaction
        return None

    def add(
        self,
        transaction: Transaction,
        profile_id: Optional[UUID] = None,
    ) -> Transaction:
        transactions = self.list_transactions(profile_id)
        if any(t.id == transaction.id for t in transactions):
            raise DuplicateError(f"Transaction {transaction.id} already exists")
        transactions.append(transaction)
        self.save_all(transactions, profile_id)
        return transaction

    def update(
        self,
        transaction: Transaction,
        profile_id: Optional[UUID] = None,
    ) -> Transaction:
        transactions = self.list_transactions(profile_id)
        for index, existing in enumerate(transactions):
            if existing.id == transaction.id:
                transactions[index] = transaction
                self.save_all(transactions, profile_id)
                return transaction
        raise NotFoundError(f"Transaction {transaction.id} not found")

    def remove(
        self,
        transaction_id: UUID,
        profile_id: Optional[UUID] = None,
    ) -> Transaction:
        transactions = self.list_transactions(profile_id)
        remaining = [t for t in transactions if t.id != transaction_id]
        if len(remaining) == len(transactions):
            raise NotFoundError(f"Transaction {transaction_id} not found")
        removed = next(t for t in transactions if t.id == transaction_id)
        self.save_all(remaining, profile_id)
        return removed

    def clear(self, profile_id: Optional[UUID] = None) -> None:
        self._store.remove(transactions_key(profile_id))
