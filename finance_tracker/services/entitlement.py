"""
Entitlement Service (Free / Pro)

Gates two countable resources behind a single Pro flag:
- Free: 1 user profile, 5 transactions
- Pro: unlimited

The flag is persisted through an injected KeyValueStore and read back
on construction. The purchase is simulated locally: a fixed delay, then
the flag flips to True. There is no failure path and no downgrade.

DESIGN DECISION: Storage failures never break gating. A failed read is
treated as "not Pro"; a failed write keeps the in-memory value and is
logged. Listener failures are logged and never interrupt a purchase.
"""

import asyncio
from typing import Callable, Optional

import structlog

from finance_tracker.audit import AuditLogger
from finance_tracker.config import StoreSettings, get_settings
from finance_tracker.models.audit import AuditEventBuilder
from finance_tracker.services.storage import KeyValueStore, StorageError


FREE_PROFILE_LIMIT = 1
FREE_TRANSACTION_LIMIT = 5

PROFILE_LIMIT_MESSAGE = (
    f"Free version allows {FREE_PROFILE_LIMIT} user profile. "
    "Upgrade to Pro for unlimited profiles!"
)
TRANSACTION_LIMIT_MESSAGE = (
    f"Free version allows {FREE_TRANSACTION_LIMIT} transactions. "
    "Upgrade to Pro for unlimited transactions!"
)

ProListener = Callable[[bool], None]

logger = structlog.get_logger(__name__)


class EntitlementService:
    """
    Tracks the Pro flag and answers "may the user add another X?".

    Lifecycle: construct once at application start with the app's store,
    pass the instance to whatever needs gating. Tests build a fresh
    instance over an in-memory store.
    """

    def __init__(
        self,
        store: KeyValueStore,
        settings: Optional[StoreSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._settings = settings or get_settings().store
        self._audit_logger = audit_logger
        self._listeners: list[ProListener] = []
        self._is_pro = self._read_persisted()

    # -------------------------------------------------------------------------
    # Pro flag
    # -------------------------------------------------------------------------

    @property
    def flag_key(self) -> str:
        return self._settings.pro_flag_key

    @property
    def is_pro(self) -> bool:
        return self._is_pro

    @is_pro.setter
    def is_pro(self, value: bool) -> None:
        value = bool(value)
        # Written before listeners run
        self._persist(value)
        self._assign(value)

    def subscribe(self, listener: ProListener) -> None:
        """Call `listener(is_pro)` whenever the flag changes."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: ProListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _assign(self, value: bool) -> None:
        changed = value != self._is_pro
        self._is_pro = value
        if changed:
            logger.info("pro_status_changed", is_pro=value)
            for listener in list(self._listeners):
                try:
                    listener(value)
                except Exception as e:
                    # Log failure but don't raise
                    logger.error("pro_listener_failed", listener=repr(listener), error=str(e))

    def _read_persisted(self) -> bool:
        try:
            value = self._store.get_bool(self.flag_key)
        except StorageError as e:
            logger.error("pro_flag_read_failed", key=self.flag_key, error=str(e))
            return False
        return bool(value) if value is not None else False

    def _persist(self, value: bool) -> None:
        try:
            self._store.set_bool(self.flag_key, value)
        except StorageError as e:
            logger.error("pro_flag_write_failed", key=self.flag_key, error=str(e))

    # -------------------------------------------------------------------------
    # Gates
    # -------------------------------------------------------------------------

    def can_add_profile(self, current_profile_count: int) -> bool:
        if self._is_pro:
            return True
        return current_profile_count < FREE_PROFILE_LIMIT

    def can_add_transaction(self, current_transaction_count: int) -> bool:
        if self._is_pro:
            return True
        return current_transaction_count < FREE_TRANSACTION_LIMIT

    def get_profile_limit_message(self) -> str:
        return PROFILE_LIMIT_MESSAGE

    def get_transaction_limit_message(self) -> str:
        return TRANSACTION_LIMIT_MESSAGE

    # -------------------------------------------------------------------------
    # Purchase
    # -------------------------------------------------------------------------

    async def buy_pro_version(self) -> bool:
        """
        Simulate purchasing Pro.

        Waits the configured delay, then sets and persists the flag.
        Single-shot: it cannot fail and is not meant to be cancelled.

        Returns:
            The Pro flag after completion (always True)
        """
        if self._audit_logger:
            await self._audit_logger.log(AuditEventBuilder.pro_purchase_started())

        await asyncio.sleep(self._settings.purchase_delay_seconds)

        self.is_pro = True
        logger.info("pro_version_purchased")

        if self._audit_logger:
            await self._audit_logger.log(AuditEventBuilder.pro_purchased())

        return self._is_pro

    def restore_purchases(self) -> bool:
        """
        Re-read the persisted flag into `is_pro`.

        Only ever promotes: a Pro user stays Pro even if the store has
        no flag, and the flag is written again in that case.
        Idempotent. Returns the restored flag.
        """
        if self._read_persisted():
            self._assign(True)
        elif self._is_pro:
            self._persist(True)
        logger.info("purchases_restored", is_pro=self._is_pro)
        return self._is_pro
