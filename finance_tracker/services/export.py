"""
CSV Export

Exports transactions as CSV text with columns Title, Amount, Type, Date.
Amounts are exported in USD (the stored currency) with two decimals.
"""

import csv
import io
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from finance_tracker.models.transaction import Transaction


CSV_HEADER = ["Title", "Amount", "Type", "Date"]


def short_date(value: datetime) -> str:
    """US short date style: 3/7/25."""
    return f"{value.month}/{value.day}/{value.year % 100:02d}"


class ExportService:
    """Builds CSV exports of transactions."""

    def export_to_csv(self, transactions: Iterable[Transaction]) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADER)

        for transaction in transactions:
            amount = transaction.amount_usd.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
            writer.writerow([
                transaction.title,
                f"{amount:.2f}",
                transaction.type_label,
                short_date(transaction.date),
            ])

        return buffer.getvalue()
