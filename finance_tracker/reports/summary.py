"""
Transaction Reports

DESIGN DECISION: Reports are DETERMINISTIC functions of the stored
transactions. Everything is computed in USD; callers convert the results
to the display currency with the CurrencyService when presenting them.
"""

from collections import defaultdict
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Union

from finance_tracker.models.transaction import (
    BalanceSummary,
    ExpenseShare,
    MonthlySummary,
    Transaction,
)


ZERO = Decimal("0")
PERCENT_QUANTUM = Decimal("0.01")


def start_of_month(value: Union[date, datetime]) -> date:
    """First calendar day of the month containing `value`."""
    return date(value.year, value.month, 1)


def calculate_balance(transactions: Iterable[Transaction]) -> Decimal:
    """Income minus expenses."""
    return sum((t.signed_amount_usd for t in transactions), ZERO)


def summarize(transactions: Iterable[Transaction]) -> BalanceSummary:
    income = ZERO
    expenses = ZERO
    for transaction in transactions:
        if transaction.is_income:
            income += transaction.amount_usd
        else:
            expenses += transaction.amount_usd
    return BalanceSummary(
        total_income=income,
        total_expenses=expenses,
        balance=income - expenses,
    )


def available_months(transactions: Iterable[Transaction]) -> list[date]:
    """Distinct months that have at least one transaction, newest first."""
    return sorted({start_of_month(t.date) for t in transactions}, reverse=True)


def filter_by_month(
    transactions: Iterable[Transaction],
    month: Union[date, datetime],
) -> list[Transaction]:
    """Transactions in the same calendar month as `month`, newest first."""
    target = start_of_month(month)
    matching = [t for t in transactions if start_of_month(t.date) == target]
    return sorted(matching, key=lambda t: t.date, reverse=True)


def monthly_breakdown(transactions: Iterable[Transaction]) -> list[MonthlySummary]:
    """Income and expense totals per month, newest month first."""
    income: dict[date, Decimal] = defaultdict(lambda: ZERO)
    expenses: dict[date, Decimal] = defaultdict(lambda: ZERO)
    months: set[date] = set()

    for transaction in transactions:
        month = start_of_month(transaction.date)
        months.add(month)
        if transaction.is_income:
            income[month] += transaction.amount_usd
        else:
            expenses[month] += transaction.amount_usd

    return [
        MonthlySummary(month=month, income=income[month], expenses=expenses[month])
        for month in sorted(months, reverse=True)
    ]


def expense_shares(transactions: Iterable[Transaction]) -> list[ExpenseShare]:
    """
    Each expense as a percentage of total expenses, largest first.

    Returns an empty list when there are no expenses (or they sum to zero).
    """
    expenses = [t for t in transactions if not t.is_income]
    total = sum((t.amount_usd for t in expenses), ZERO)
    if total == 0:
        return []

    shares = [
        ExpenseShare(
            transaction_id=t.id,
            title=t.title,
            amount_usd=t.amount_usd,
            percentage=(t.amount_usd / total * 100).quantize(
                PERCENT_QUANTUM, rounding=ROUND_HALF_UP
            ),
        )
        for t in expenses
    ]
    return sorted(shares, key=lambda s: s.amount_usd, reverse=True)
