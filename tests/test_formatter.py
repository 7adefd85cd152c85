"""Tests for ledger entry formatting."""

from __future__ import annotations

from decimal import Decimal

import pytest

from ledger_entry.core.exceptions import BalanceInvariantError
from ledger_entry.core.types import DebitLine, ResolvedTransaction
from ledger_entry.ledger.formatter import ACCOUNT_COLUMN_WIDTH, describe, format_entry, format_posting
from ledger_entry.ledger.intent import parse_ledger_entry
from ledger_entry.ledger.validator import EntryValidator

from tests.sample_rules import COFFEE_ENTRY


def _resolved(*lines: tuple[str, str, str], merchant=None, memo=None) -> ResolvedTransaction:
    return ResolvedTransaction(
        debit_lines=[
            DebitLine(account=account, amount=Decimal(amount), currency="USD", source_item_name=name)
            for name, account, amount in lines
        ],
        credit_account="Personal:Assets:Bank:Checking",
        currency="USD",
        entity="Personal",
        merchant=merchant,
        memo=memo,
    )


class TestFormatPosting:
    def test_account_padded_to_column(self):
        line = format_posting("Assets:Cash", Decimal("5"), "USD")
        assert line == "    " + "Assets:Cash".ljust(ACCOUNT_COLUMN_WIDTH) + " 5.00 USD"

    def test_long_account_not_truncated(self):
        account = "Personal:Expenses:" + "X" * 40
        assert f"{account} -1.50 EUR" in format_posting(account, Decimal("-1.5"), "EUR")


class TestFormatEntry:
    def test_coffee_entry(self):
        resolved = _resolved(("coffee", "Personal:Expenses:Food:Coffee", "10"), merchant="Starbucks")
        text = format_entry(resolved, date="2025/09/15")

        assert text.splitlines() == [
            "2025/09/15 Starbucks",
            "    Personal:Expenses:Food:Coffee            10.00 USD",
            "    Personal:Assets:Bank:Checking            -10.00 USD",
        ]
        assert not text.endswith("\n")

    def test_default_date_from_clock(self, fake_clock):
        text = format_entry(_resolved(("tea", "Personal:Expenses:Tea", "3")), clock=fake_clock)
        assert text.startswith("2025/09/15 tea\n")

    def test_dash_date_normalized(self):
        text = format_entry(_resolved(("tea", "A:B", "3")), date="2025-08-01")
        assert text.startswith("2025/08/01 ")

    def test_description_joins_items_without_merchant(self):
        resolved = _resolved(("coffee", "A:Coffee", "10"), ("croissant", "A:Bakery", "5"))
        assert describe(resolved) == "coffee, croissant"

    def test_memo_is_a_comment_line(self):
        text = format_entry(_resolved(("tea", "A:B", "3"), memo="with friends"), date="2025/09/15")
        assert text.splitlines()[-1] == "    ; with friends"

    def test_credit_line_balances_all_items(self):
        resolved = _resolved(("a", "A:A", "1.10"), ("b", "A:B", "2.25"))
        text = format_entry(resolved, date="2025/09/15")
        assert text.splitlines()[-1].endswith(" -3.35 USD")

    def test_output_passes_validation(self, fake_clock):
        resolved = _resolved(
            ("coffee", "Personal:Expenses:Food:Coffee", "10"),
            ("croissant", "Personal:Expenses:Food:Bakery", "5.50"),
            merchant="Starbucks",
            memo="breakfast",
        )
        entry = parse_ledger_entry(format_entry(resolved, clock=fake_clock))

        assert entry is not None
        assert EntryValidator(fake_clock).validate(entry).is_valid

    def test_sample_entry_matches_format(self):
        resolved = _resolved(("coffee", "Personal:Expenses:Food:Coffee", "10"), merchant="Starbucks")
        assert format_entry(resolved, date="2025/09/15") == COFFEE_ENTRY


class TestBalanceInvariant:
    def test_unbalanced_resolution_raises(self, monkeypatch):
        resolved = _resolved(("tea", "A:B", "3"))
        monkeypatch.setattr(
            ResolvedTransaction, "credit_amount", property(lambda self: Decimal("-2.50"))
        )
        with pytest.raises(BalanceInvariantError) as exc_info:
            format_entry(resolved, date="2025/09/15")
        assert exc_info.value.debit_total == Decimal("3")
