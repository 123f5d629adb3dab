"""
Audit Models for Finance Tracker

Significant user actions are logged for traceability:
1. Purchases and restores of the Pro version
2. Limit hits that triggered an upgrade prompt
3. Profile and transaction changes
4. Exports

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Entitlements
    PRO_PURCHASE_STARTED = "pro_purchase_started"
    PRO_PURCHASED = "pro_purchased"
    PURCHASES_RESTORED = "purchases_restored"
    PROFILE_LIMIT_REACHED = "profile_limit_reached"
    TRANSACTION_LIMIT_REACHED = "transaction_limit_reached"

    # Profiles
    PROFILE_ADDED = "profile_added"
    PROFILE_REMOVED = "profile_removed"

    # Transactions
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"

    # Export
    EXPORT_GENERATED = "export_generated"

    # System events
    STORAGE_ERROR = "storage_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.now,
        description="When the event occurred"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'profile', 'transaction')"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.pro_purchased()
        event = AuditEventBuilder.transaction_added(transaction_id, profile_id, "12.50")
    """

    @staticmethod
    def pro_purchase_started() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PRO_PURCHASE_STARTED,
            entity_type="entitlement",
            description="Pro version purchase started",
            is_user_action=True,
        )

    @staticmethod
    def pro_purchased() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PRO_PURCHASED,
            entity_type="entitlement",
            description="Pro version purchased",
            details={"is_pro": True},
        )

    @staticmethod
    def purchases_restored(is_pro: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PURCHASES_RESTORED,
            entity_type="entitlement",
            description=f"Purchases restored (pro: {is_pro})",
            details={"is_pro": is_pro},
            is_user_action=True,
        )

    @staticmethod
    def limit_reached(resource: str, current_count: int, limit: int) -> AuditEvent:
        event_type = (
            AuditEventType.PROFILE_LIMIT_REACHED
            if resource == "profile"
            else AuditEventType.TRANSACTION_LIMIT_REACHED
        )
        return AuditEvent(
            event_type=event_type,
            severity=AuditSeverity.WARNING,
            entity_type="entitlement",
            description=f"Free {resource} limit of {limit} reached",
            details={
                "resource": resource,
                "current_count": current_count,
                "limit": limit,
            },
            is_user_action=True,
        )

    @staticmethod
    def profile_added(profile_id: UUID, name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROFILE_ADDED,
            entity_type="profile",
            entity_id=profile_id,
            description=f"Profile added: {name}",
            details={"name": name},
            is_user_action=True,
        )

    @staticmethod
    def profile_removed(profile_id: UUID, transaction_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROFILE_REMOVED,
            entity_type="profile",
            entity_id=profile_id,
            description=f"Profile removed with {transaction_count} transactions",
            details={"transaction_count": transaction_count},
            is_user_action=True,
        )

    @staticmethod
    def transaction_added(
        transaction_id: UUID,
        profile_id: Optional[UUID],
        amount_usd: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction added: ${amount_usd}",
            details={
                "profile_id": str(profile_id) if profile_id else None,
                "amount_usd": amount_usd,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_updated(transaction_id: UUID, profile_id: Optional[UUID]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_UPDATED,
            entity_type="transaction",
            entity_id=transaction_id,
            description="Transaction updated",
            details={"profile_id": str(profile_id) if profile_id else None},
            is_user_action=True,
        )

    @staticmethod
    def transaction_deleted(transaction_id: UUID, profile_id: Optional[UUID]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            entity_type="transaction",
            entity_id=transaction_id,
            description="Transaction deleted",
            details={"profile_id": str(profile_id) if profile_id else None},
            is_user_action=True,
        )

    @staticmethod
    def export_generated(profile_id: Optional[UUID], row_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_GENERATED,
            entity_type="export",
            entity_id=profile_id,
            description=f"CSV export generated with {row_count} rows",
            details={"row_count": row_count},
            is_user_action=True,
        )

    @staticmethod
    def storage_error(operation: str, key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            entity_type="storage",
            description=f"Storage error during {operation}",
            error_message=error_message,
            details={"operation": operation, "key": key},
        )
