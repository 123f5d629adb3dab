"""
Tests for the audit logger and in-memory audit storage
"""

import asyncio

from finance_tracker.audit import AuditLogger, AuditStorageInterface, InMemoryAuditStorage
from finance_tracker.models.audit import AuditEventBuilder, AuditEventType


class FailingAuditStorage(AuditStorageInterface):
    """Audit backend that always fails."""

    async def append_event(self, event):
        raise RuntimeError("audit backend down")

    async def get_recent_events(self, limit=100):
        return []


class TestAuditLogger:
    """Tests for AuditLogger."""

    def test_logs_without_storage(self):
        logger = AuditLogger()
        assert logger.storage is None
        assert asyncio.run(logger.log(AuditEventBuilder.pro_purchased())) is True

    def test_persists_to_storage(self, audit_logger, audit_storage):
        asyncio.run(audit_logger.log(AuditEventBuilder.pro_purchase_started()))
        asyncio.run(audit_logger.log(AuditEventBuilder.pro_purchased()))

        assert [e.event_type for e in audit_storage.events] == [
            AuditEventType.PRO_PURCHASE_STARTED,
            AuditEventType.PRO_PURCHASED,
        ]

    def test_storage_failure_does_not_raise(self):
        logger = AuditLogger(FailingAuditStorage())
        assert asyncio.run(logger.log(AuditEventBuilder.pro_purchased())) is False


class TestInMemoryAuditStorage:
    """Tests for the append-only in-memory log."""

    def test_recent_events_newest_first(self):
        storage = InMemoryAuditStorage()
        for count in range(3):
            asyncio.run(storage.append_event(
                AuditEventBuilder.export_generated(None, count)
            ))

        recent = asyncio.run(storage.get_recent_events(limit=2))

        assert [e.details["row_count"] for e in recent] == [2, 1]

    def test_events_is_a_copy(self):
        storage = InMemoryAuditStorage()
        asyncio.run(storage.append_event(AuditEventBuilder.pro_purchased()))

        storage.events.clear()

        assert len(storage.events) == 1
