"""
Tests for balance/monthly reports and CSV export
"""

from datetime import date, datetime
from decimal import Decimal

from finance_tracker.models.transaction import Transaction
from finance_tracker.reports import (
    available_months,
    calculate_balance,
    expense_shares,
    filter_by_month,
    monthly_breakdown,
    start_of_month,
    summarize,
)
from finance_tracker.services.export import ExportService


def make(title, amount, is_income=False, when=datetime(2025, 3, 7, 12, 0)):
    return Transaction(
        title=title,
        amount_usd=Decimal(amount),
        is_income=is_income,
        date=when,
    )


class TestBalance:
    """Tests for balance calculation."""

    def test_income_only(self):
        transactions = [make("Salary", "1000", True), make("Bonus", "500", True)]
        assert calculate_balance(transactions) == Decimal("1500")

    def test_expenses_only(self):
        transactions = [make("Groceries", "100"), make("Gas", "50")]
        assert calculate_balance(transactions) == Decimal("-150")

    def test_mixed(self):
        transactions = [make("Salary", "1000", True), make("Groceries", "100")]
        assert calculate_balance(transactions) == Decimal("900")

    def test_empty(self):
        assert calculate_balance([]) == Decimal("0")

    def test_summary(self):
        summary = summarize([make("Salary", "1000", True), make("Rent", "1200")])

        assert summary.total_income == Decimal("1000")
        assert summary.total_expenses == Decimal("1200")
        assert summary.balance == Decimal("-200")
        assert summary.is_positive is False


class TestMonths:
    """Tests for month grouping and filtering."""

    def setup_method(self):
        self.transactions = [
            make("Salary", "2000", True, datetime(2025, 1, 31, 9, 0)),
            make("Rent", "1200", False, datetime(2025, 1, 1, 8, 0)),
            make("Gas", "40", False, datetime(2025, 3, 15, 18, 30)),
            make("Refund", "15", True, datetime(2024, 12, 24, 10, 0)),
        ]

    def test_start_of_month(self):
        assert start_of_month(datetime(2025, 3, 15, 18, 30)) == date(2025, 3, 1)
        assert start_of_month(date(2024, 12, 31)) == date(2024, 12, 1)

    def test_available_months_newest_first(self):
        assert available_months(self.transactions) == [
            date(2025, 3, 1),
            date(2025, 1, 1),
            date(2024, 12, 1),
        ]

    def test_filter_by_month(self):
        january = filter_by_month(self.transactions, date(2025, 1, 20))
        assert [t.title for t in january] == ["Salary", "Rent"]

    def test_filter_by_month_without_matches(self):
        assert filter_by_month(self.transactions, date(2025, 2, 1)) == []

    def test_monthly_breakdown(self):
        months = monthly_breakdown(self.transactions)

        assert [m.month for m in months] == [
            date(2025, 3, 1),
            date(2025, 1, 1),
            date(2024, 12, 1),
        ]
        january = months[1]
        assert january.income == Decimal("2000")
        assert january.expenses == Decimal("1200")
        assert january.net == Decimal("800")
        assert months[0].income == Decimal("0")

    def test_monthly_breakdown_empty(self):
        assert monthly_breakdown([]) == []


class TestExpenseShares:
    """Tests for the expense chart data."""

    def test_shares(self):
        shares = expense_shares([
            make("Salary", "5000", True),
            make("Gas", "25"),
            make("Rent", "75"),
        ])

        assert [s.title for s in shares] == ["Rent", "Gas"]
        assert shares[0].percentage == Decimal("75.00")
        assert shares[1].percentage == Decimal("25.00")

    def test_shares_rounded(self):
        shares = expense_shares([make("A", "1"), make("B", "1"), make("C", "1")])
        assert all(s.percentage == Decimal("33.33") for s in shares)

    def test_no_expenses(self):
        assert expense_shares([make("Salary", "5000", True)]) == []
        assert expense_shares([make("Free", "0")]) == []


class TestCSVExport:
    """Tests for CSV export."""

    def test_empty_export_has_header(self):
        csv_text = ExportService().export_to_csv([])

        assert csv_text
        lines = csv_text.split("\n")
        assert lines[0] == "Title,Amount,Type,Date"

    def test_rows(self):
        csv_text = ExportService().export_to_csv([
            make("Groceries", "50"),
            make("Salary", "2000.5", True, datetime(2025, 11, 24, 9, 0)),
        ])

        assert csv_text == (
            "Title,Amount,Type,Date\n"
            "Groceries,50.00,Expense,3/7/25\n"
            "Salary,2000.50,Income,11/24/25\n"
        )

    def test_title_with_comma_is_quoted(self):
        csv_text = ExportService().export_to_csv([make("Rent, March", "1200")])
        assert '"Rent, March",1200.00,Expense,3/7/25' in csv_text

    def test_amounts_are_usd_with_two_decimals(self):
        csv_text = ExportService().export_to_csv([make("Coffee", "3.456")])
        assert "Coffee,3.46,Expense" in csv_text
