"""Core utility functions for Ledger Entry."""

from datetime import date
from decimal import Decimal

CENT = Decimal("0.01")


def format_ledger_date(value: date) -> str:
    """Format a date as ``YYYY/MM/DD`` (zero-padded, slash separated)."""
    return f"{value.year:04d}/{value.month:02d}/{value.day:02d}"
