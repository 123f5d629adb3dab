"""Reports package."""

from finance_tracker.reports.summary import (
    available_months,
    calculate_balance,
    expense_shares,
    filter_by_month,
    monthly_breakdown,
    start_of_month,
    summarize,
)

__all__ = [
    "available_months",
    "calculate_balance",
    "expense_shares",
    "filter_by_month",
    "monthly_breakdown",
    "start_of_month",
    "summarize",
]
