"""Render a resolved transaction as canonical ledger text."""

from __future__ import annotations

from decimal import Decimal

from ledger_entry.core.exceptions import BalanceInvariantError
from ledger_entry.core.types import ResolvedTransaction
from ledger_entry.core.utils import CENT, format_ledger_date
from ledger_entry.temporal.clock import Clock, SystemClock

ACCOUNT_COLUMN_WIDTH = 40


def format_posting(account: str, amount: Decimal, currency: str) -> str:
    return f"    {account.ljust(ACCOUNT_COLUMN_WIDTH)} {amount:.2f} {currency}"


def describe(resolved: ResolvedTransaction) -> str:
    """Merchant name, else the comma-joined item names."""
    if resolved.merchant:
        return resolved.merchant
    return ", ".join(line.source_item_name for line in resolved.debit_lines)


def check_balance(resolved: ResolvedTransaction) -> None:
    """Raise ``BalanceInvariantError`` if debits and the credit disagree."""
    debit_total = resolved.debit_total
    credit_total = abs(resolved.credit_amount)
    if abs(debit_total - credit_total) > CENT:
        raise BalanceInvariantError(debit_total, credit_total)


def format_entry(
    resolved: ResolvedTransaction,
    date: str | None = None,
    clock: Clock | None = None,
) -> str:
    """Format a resolved transaction.

    Example output::

        2025/09/15 Starbucks
            Personal:Expenses:Food:Coffee            10.00 USD
            Personal:Assets:Bank:Checking            -10.00 USD

    Raises:
        BalanceInvariantError: If the rendered postings would not balance.
    """
    if date is None:
        date = format_ledger_date((clock or SystemClock()).today())
    else:
        date = date.replace("-", "/")

    check_balance(resolved)

    lines = [f"{date} {describe(resolved)}"]
    for debit in resolved.debit_lines:
        lines.append(format_posting(debit.account, debit.amount, debit.currency))
    lines.append(
        format_posting(resolved.credit_account, resolved.credit_amount, resolved.currency)
    )
    if resolved.memo:
        lines.append(f"    ; {resolved.memo}")
    return "\n".join(lines)
