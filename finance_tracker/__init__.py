"""
Finance Tracker - Source Package

Core of a personal finance tracker: transactions stored in USD, display
in the user's local currency, and a Free/Pro entitlement gate on profiles
and transactions.

DESIGN PRINCIPLES:
1. Amounts are persisted in USD only
2. Locale is an explicit input, never ambient state
3. Services are constructed once and injected, never global
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Finance Tracker Team"
