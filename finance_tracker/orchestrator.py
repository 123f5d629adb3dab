"""
Finance Tracker Orchestrator

This module ties together the services and defines the application-level
actions the UI layer calls:
1. Profiles (list, add, remove)
2. Transactions (list, add, edit, delete)
3. Reports and export
4. Upgrade / restore of the Pro version

DESIGN DECISION: The orchestrator enforces the boundaries:
- Add-actions are gated by the EntitlementService
- Amounts typed in the display currency are converted to USD before saving
- Every change is audited

FinanceTracker is constructed once at application start (see
`FinanceTracker.from_settings`) and passed by reference to consumers.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Optional, TypeVar, Union
from uuid import UUID

import structlog

from finance_tracker.audit import AuditLogger, InMemoryAuditStorage, configure_logging
from finance_tracker.config import Settings, get_settings
from finance_tracker.models.audit import AuditEventBuilder
from finance_tracker.models.transaction import (
    BalanceSummary,
    ExpenseShare,
    MonthlySummary,
    Transaction,
    UserProfile,
)
from finance_tracker.reports import (
    calculate_balance,
    expense_shares,
    filter_by_month,
    monthly_breakdown,
    summarize,
)
from finance_tracker.services.currency import Amount, CurrencyService
from finance_tracker.services.entitlement import (
    FREE_PROFILE_LIMIT,
    FREE_TRANSACTION_LIMIT,
    EntitlementService,
)
from finance_tracker.services.export import ExportService
from finance_tracker.services.storage import (
    PROFILES_KEY,
    DuplicateError,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    NotFoundError,
    ProfileRepository,
    StorageError,
    TransactionRepository,
    transactions_key,
)


logger = structlog.get_logger(__name__)

Month = Union[date, datetime]
T = TypeVar("T")


class FinanceTrackerError(Exception):
    """Base exception for tracker actions."""
    pass


class LimitReachedError(FinanceTrackerError):
    """A Free-tier limit blocks the action. The message is the upgrade prompt."""

    def __init__(self, resource: str, limit: int, message: str):
        self.resource = resource
        self.limit = limit
        super().__init__(message)


class ProfileNotFoundError(FinanceTrackerError):
    """No profile with the given id."""
    pass


class TransactionNotFoundError(FinanceTrackerError):
    """No transaction with the given id in the profile."""
    pass


class FinanceTracker:
    """
    Application facade over profiles, transactions and entitlements.

    A `profile_id` of None addresses the shared transaction list used
    before any profile is selected.
    """

    def __init__(
        self,
        store: KeyValueStore,
        currency: Optional[CurrencyService] = None,
        entitlements: Optional[EntitlementService] = None,
        exporter: Optional[ExportService] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._audit_logger = audit_logger
        self._currency = currency or CurrencyService(locale=get_settings().locale.language)
        self._entitlements = entitlements or EntitlementService(store, audit_logger=audit_logger)
        self._exporter = exporter or ExportService()
        self._profiles = ProfileRepository(store)
        self._transactions = TransactionRepository(store)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "FinanceTracker":
        """
        Factory to create the tracker with its default wiring.

        Picks the storage backend from settings and keeps the audit trail
        in memory for the lifetime of the process.
        """
        settings = settings or get_settings()
        app_settings = settings.app
        storage_settings = settings.storage

        configure_logging(debug=app_settings.debug_mode)

        if storage_settings.backend == "memory":
            store: KeyValueStore = InMemoryKeyValueStore()
        else:
            store = JsonFileKeyValueStore(storage_settings.path)

        audit_logger = AuditLogger(InMemoryAuditStorage())

        logger.info(
            "finance_tracker_started",
            environment=app_settings.app_environment,
            storage=storage_settings.backend,
        )

        return cls(
            store=store,
            currency=CurrencyService(locale=settings.locale.language),
            entitlements=EntitlementService(
                store,
                settings=settings.store,
                audit_logger=audit_logger,
            ),
            audit_logger=audit_logger,
        )

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def currency(self) -> CurrencyService:
        return self._currency

    @property
    def entitlements(self) -> EntitlementService:
        return self._entitlements

    @property
    def is_pro(self) -> bool:
        return self._entitlements.is_pro

    async def _audit(self, event) -> None:
        if self._audit_logger:
            await self._audit_logger.log(event)

    async def _write(self, operation: str, key: str, write: Callable[[], T]) -> T:
        """
        Run a repository write, auditing backend failures before re-raising.

        NotFoundError and DuplicateError are caller errors and pass through
        unaudited.
        """
        try:
            return write()
        except (NotFoundError, DuplicateError):
            raise
        except StorageError as e:
            logger.error("storage_write_failed", operation=operation, key=key, error=str(e))
            await self._audit(AuditEventBuilder.storage_error(operation, key, str(e)))
            raise

    # -------------------------------------------------------------------------
    # Profiles
    # -------------------------------------------------------------------------

    def list_profiles(self) -> list[UserProfile]:
        return self._profiles.list_profiles()

    def get_profile(self, profile_id: UUID) -> UserProfile:
        profile = self._profiles.get(profile_id)
        if profile is None:
            raise ProfileNotFoundError(f"Profile {profile_id} not found")
        return profile

    def can_add_profile(self) -> bool:
        return self._entitlements.can_add_profile(self._profiles.count())

    async def add_profile(
        self,
        name: str,
        emoji: str = "👤",
        photo_data: Optional[bytes] = None,
    ) -> UserProfile:
        """
        Create a profile.

        Raises:
            LimitReachedError: Free tier already has its one profile
        """
        count = self._profiles.count()
        if not self._entitlements.can_add_profile(count):
            await self._audit(AuditEventBuilder.limit_reached("profile", count, FREE_PROFILE_LIMIT))
            raise LimitReachedError(
                "profile",
                FREE_PROFILE_LIMIT,
                self._entitlements.get_profile_limit_message(),
            )

        new_profile = UserProfile(name=name, emoji=emoji, photo_data=photo_data)
        profile = await self._write(
            "add_profile", PROFILES_KEY, lambda: self._profiles.add(new_profile)
        )
        await self._audit(AuditEventBuilder.profile_added(profile.id, profile.name))
        return profile

    async def remove_profile(self, profile_id: UUID) -> UserProfile:
        """Delete a profile together with its transactions."""
        try:
            removed = await self._write(
                "remove_profile", PROFILES_KEY, lambda: self._profiles.remove(profile_id)
            )
        except NotFoundError as e:
            raise ProfileNotFoundError(str(e))

        transaction_count = self._transactions.count(profile_id)
        await self._write(
            "clear_transactions",
            transactions_key(profile_id),
            lambda: self._transactions.clear(profile_id),
        )

        await self._audit(AuditEventBuilder.profile_removed(profile_id, transaction_count))
        return removed

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    def _check_profile(self, profile_id: Optional[UUID]) -> None:
        if profile_id is not None:
            self.get_profile(profile_id)

    def list_transactions(
        self,
        profile_id: Optional[UUID] = None,
        month: Optional[Month] = None,
    ) -> list[Transaction]:
        """Transactions newest first, optionally restricted to one month."""
        transactions = self._transactions.list_transactions(profile_id)
        if month is not None:
            return filter_by_month(transactions, month)
        return sorted(transactions, key=lambda t: t.date, reverse=True)

    def can_add_transaction(self, profile_id: Optional[UUID] = None) -> bool:
        return self._entitlements.can_add_transaction(self._transactions.count(profile_id))

    async def add_transaction(
        self,
        profile_id: Optional[UUID],
        title: str,
        amount: Amount,
        is_income: bool = False,
        date: Optional[datetime] = None,
        locale: Optional[str] = None,
    ) -> Transaction:
        """
        Record a transaction entered in the display currency.

        The amount is converted to USD before it is stored.

        Raises:
            LimitReachedError: Free tier already has five transactions
            ProfileNotFoundError: Unknown profile
        """
        self._check_profile(profile_id)

        count = self._transactions.count(profile_id)
        if not self._entitlements.can_add_transaction(count):
            await self._audit(
                AuditEventBuilder.limit_reached("transaction", count, FREE_TRANSACTION_LIMIT)
            )
            raise LimitReachedError(
                "transaction",
                FREE_TRANSACTION_LIMIT,
                self._entitlements.get_transaction_limit_message(),
            )

        fields = {
            "title": title,
            "amount_usd": self._currency.convert_to_usd(amount, locale),
            "is_income": is_income,
        }
        if date is not None:
            fields["date"] = date

        new_transaction = Transaction(**fields)
        transaction = await self._write(
            "add_transaction",
            transactions_key(profile_id),
            lambda: self._transactions.add(new_transaction, profile_id),
        )

        await self._audit(
            AuditEventBuilder.transaction_added(
                transaction.id, profile_id, f"{transaction.amount_usd:.2f}"
            )
        )
        return transaction

    async def update_transaction(
        self,
        profile_id: Optional[UUID],
        transaction_id: UUID,
        title: Optional[str] = None,
        amount: Optional[Amount] = None,
        is_income: Optional[bool] = None,
        date: Optional[datetime] = None,
        locale: Optional[str] = None,
    ) -> Transaction:
        """Edit a transaction. `amount`, when given, is in the display currency."""
        existing = self._transactions.get(transaction_id, profile_id)
        if existing is None:
            raise TransactionNotFoundError(f"Transaction {transaction_id} not found")

        changes: dict = {}
        if title is not None:
            changes["title"] = title
        if amount is not None:
            changes["amount_usd"] = self._currency.convert_to_usd(amount, locale)
        if is_income is not None:
            changes["is_income"] = is_income
        if date is not None:
            changes["date"] = date

        # model_copy skips validation
        updated = Transaction.model_validate({**existing.model_dump(), **changes})
        await self._write(
            "update_transaction",
            transactions_key(profile_id),
            lambda: self._transactions.update(updated, profile_id),
        )

        await self._audit(AuditEventBuilder.transaction_updated(transaction_id, profile_id))
        return updated

    async def delete_transaction(
        self,
        profile_id: Optional[UUID],
        transaction_id: UUID,
    ) -> Transaction:
        try:
            removed = await self._write(
                "delete_transaction",
                transactions_key(profile_id),
                lambda: self._transactions.remove(transaction_id, profile_id),
            )
        except NotFoundError as e:
            raise TransactionNotFoundError(str(e))

        await self._audit(AuditEventBuilder.transaction_deleted(transaction_id, profile_id))
        return removed

    # -------------------------------------------------------------------------
    # Presentation helpers
    # -------------------------------------------------------------------------

    def local_amount(self, transaction: Transaction, locale: Optional[str] = None) -> Decimal:
        return self._currency.convert_from_usd(transaction.amount_usd, locale)

    def display_amount(self, transaction: Transaction, locale: Optional[str] = None) -> str:
        return self._currency.format(self.local_amount(transaction, locale), locale)

    # -------------------------------------------------------------------------
    # Reports
    # -------------------------------------------------------------------------

    def balance(
        self,
        profile_id: Optional[UUID] = None,
        month: Optional[Month] = None,
    ) -> Decimal:
        """Balance in USD for all months, or for one month."""
        return calculate_balance(self.list_transactions(profile_id, month))

    def display_balance(
        self,
        profile_id: Optional[UUID] = None,
        month: Optional[Month] = None,
        locale: Optional[str] = None,
    ) -> str:
        return self._currency.format_usd_amount(self.balance(profile_id, month), locale)

    def summary(
        self,
        profile_id: Optional[UUID] = None,
        month: Optional[Month] = None,
    ) -> BalanceSummary:
        return summarize(self.list_transactions(profile_id, month))

    def monthly_report(self, profile_id: Optional[UUID] = None) -> list[MonthlySummary]:
        return monthly_breakdown(self.list_transactions(profile_id))

    def expense_report(self, profile_id: Optional[UUID] = None) -> list[ExpenseShare]:
        return expense_shares(self.list_transactions(profile_id))

    async def export_csv(self, profile_id: Optional[UUID] = None) -> str:
        transactions = self.list_transactions(profile_id)
        csv_text = self._exporter.export_to_csv(transactions)
        await self._audit(AuditEventBuilder.export_generated(profile_id, len(transactions)))
        return csv_text

    # -------------------------------------------------------------------------
    # Entitlements
    # -------------------------------------------------------------------------

    async def upgrade(self) -> bool:
        """Run the simulated Pro purchase and wait for it to complete."""
        return await self._entitlements.buy_pro_version()

    async def restore(self) -> bool:
        is_pro = self._entitlements.restore_purchases()
        await self._audit(AuditEventBuilder.purchases_restored(is_pro))
        return is_pro
