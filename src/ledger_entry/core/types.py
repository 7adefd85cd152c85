"""Core data types shared across the parser, engine and journal layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any


@dataclass
class ParsedItem:
    """One purchased item from an ``add`` command."""

    name: str
    amount: Decimal
    currency: str | None = None


@dataclass
class ParsedAddCommand:
    """Structured form of a free-text ``add`` command.

    Always holds at least one item with a positive amount.
    """

    items: list[ParsedItem] = field(default_factory=list)
    merchant: str | None = None
    payment: str | None = None
    entity: str | None = None
    date: str | None = None  # YYYY/MM/DD
    memo: str | None = None
    currency: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging and command results."""
        result: dict[str, Any] = {
            "items": [
                {
                    "name": item.name,
                    "amount": str(item.amount),
                    "currency": item.currency,
                }
                for item in self.items
            ],
        }
        for key in ("merchant", "payment", "entity", "date", "memo", "currency"):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        return result


@dataclass
class DebitLine:
    """A resolved debit posting."""

    account: str
    amount: Decimal
    currency: str
    source_item_name: str


@dataclass
class ResolvedTransaction:
    """Output of rule resolution, ready to be formatted."""

    debit_lines: list[DebitLine]
    credit_account: str
    currency: str
    entity: str
    merchant: str | None = None
    memo: str | None = None

    @property
    def debit_total(self) -> Decimal:
        return sum((line.amount for line in self.debit_lines), Decimal("0"))

    @property
    def credit_amount(self) -> Decimal:
        """The credit posting amount (always the negated debit total)."""
        return -self.debit_total


@dataclass
class ParsedLedgerEntry:
    """A ledger entry recognized in raw input."""

    date: str  # YYYY/MM/DD
    description: str
    year_month: str  # YYYY-MM
    full_content: str


@dataclass
class Posting:
    """An indented account line inside a ledger entry."""

    account: str
    amount: Decimal
    currency: str | None = None
