"""Shared fixtures for Finance Tracker tests."""

import pytest

from finance_tracker.audit import AuditLogger, InMemoryAuditStorage
from finance_tracker.config import StoreSettings
from finance_tracker.orchestrator import FinanceTracker
from finance_tracker.services.currency import CurrencyService
from finance_tracker.services.entitlement import EntitlementService
from finance_tracker.services.storage import InMemoryKeyValueStore


@pytest.fixture
def store():
    """Fresh in-memory store for each test."""
    return InMemoryKeyValueStore()


@pytest.fixture
def store_settings():
    """Store settings with no simulated purchase delay."""
    return StoreSettings(purchase_delay_seconds=0)


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage()


@pytest.fixture
def audit_logger(audit_storage):
    return AuditLogger(audit_storage)


@pytest.fixture
def entitlements(store, store_settings):
    return EntitlementService(store, settings=store_settings)


@pytest.fixture
def currency():
    return CurrencyService(locale="en")


@pytest.fixture
def tracker(store, store_settings, audit_logger, currency):
    return FinanceTracker(
        store=store,
        currency=currency,
        entitlements=EntitlementService(
            store,
            settings=store_settings,
            audit_logger=audit_logger,
        ),
        audit_logger=audit_logger,
    )
