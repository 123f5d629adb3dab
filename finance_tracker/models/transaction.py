"""
Core Data Models for Finance Tracker

These models define the schemas for everything the tracker stores or reports:
1. Transactions and user profiles (persisted as JSON arrays)
2. Report rows derived from transactions (never persisted)

DESIGN DECISION: Every amount is stored in USD, the canonical currency.
Conversion to the display currency happens only at presentation time,
through the CurrencyService. No model carries a local-currency amount.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# CORE MODELS
# =============================================================================

class Transaction(BaseModel):
    """
    A single income or expense entry.

    Transactions are immutable: editing one produces a copy with the
    same id (see `model_copy(update=...)`).
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique transaction ID"
    )
    title: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Free-text label"
    )
    amount_usd: Decimal = Field(
        ...,
        ge=0,
        description="Amount in USD (always canonical, never display currency)"
    )
    is_income: bool = Field(
        default=False,
        description="True for income, False for expense"
    )
    date: datetime = Field(
        default_factory=datetime.now,
        description="When the transaction happened"
    )

    @property
    def signed_amount_usd(self) -> Decimal:
        """Positive for income, negative for expenses."""
        return self.amount_usd if self.is_income else -self.amount_usd

    @property
    def type_label(self) -> str:
        return "Income" if self.is_income else "Expense"


class UserProfile(BaseModel):
    """
    A locally stored user profile.

    Each profile owns its own list of transactions.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        frozen=True,
        ser_json_bytes="base64",
        val_json_bytes="base64",
    )

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique profile ID"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Display name"
    )
    emoji: str = Field(
        default="👤",
        max_length=16,
        description="Avatar emoji shown when there is no photo"
    )
    photo_data: Optional[bytes] = Field(
        default=None,
        description="Raw profile photo bytes"
    )


# =============================================================================
# REPORT MODELS
# =============================================================================

class BalanceSummary(BaseModel):
    """Income, expense and net totals in USD."""

    total_income: Decimal = Field(default=Decimal("0"))
    total_expenses: Decimal = Field(default=Decimal("0"))
    balance: Decimal = Field(default=Decimal("0"))

    @property
    def is_positive(self) -> bool:
        return self.balance >= 0


class MonthlySummary(BaseModel):
    """Totals for one calendar month."""

    month: date = Field(
        ...,
        description="First day of the month"
    )
    income: Decimal = Field(default=Decimal("0"))
    expenses: Decimal = Field(default=Decimal("0"))

    @property
    def net(self) -> Decimal:
        return self.income - self.expenses


class ExpenseShare(BaseModel):
    """One expense and its share of total expenses."""

    transaction_id: UUID
    title: str
    amount_usd: Decimal
    percentage: Decimal = Field(
        ...,
        ge=0,
        le=100,
        description="Share of total expenses, 0-100"
    )
