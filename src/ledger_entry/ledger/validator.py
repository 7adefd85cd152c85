"""Validation of submitted ledger entries before they are appended."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum

from ledger_entry.core.exceptions import EntryValidationError
from ledger_entry.core.types import ParsedLedgerEntry
from ledger_entry.core.utils import CENT
from ledger_entry.ledger.postings import POSTING_RE, is_indented, parse_postings
from ledger_entry.temporal.clock import Clock, SystemClock

_STRICT_DATE_RE = re.compile(r"^(\d{4})/(\d{2})/(\d{2})$")

YEAR_WARNING_SPAN = 2


class IssueType(str, Enum):
    INVALID_DATE = "invalid-date"
    MISSING_AMOUNT = "missing-amount"
    UNBALANCED = "unbalanced"
    INVALID_STRUCTURE = "invalid-structure"
    DATE_RANGE = "date-range"
    FUTURE_DATE = "future-date"


@dataclass
class ValidationIssue:
    type: IssueType
    message: str
    field: str | None = None
    suggestion: str | None = None


@dataclass
class EntryValidation:
    """Outcome of validating one entry. Errors block the append, warnings do not."""

    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def error_messages(self) -> list[str]:
        return [issue.message for issue in self.errors]

    def extend(self, other: "EntryValidation") -> None:
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)


class EntryValidator:
    """Check date, posting structure and balance of a ledger entry."""

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or SystemClock()

    def validate(self, entry: ParsedLedgerEntry) -> EntryValidation:
        result = EntryValidation()
        result.extend(self.validate_date(entry.date))
        result.extend(self.validate_structure(entry.full_content))
        result.extend(self.validate_balance(entry.full_content))
        return result

    def check(self, entry: ParsedLedgerEntry) -> EntryValidation:
        """Validate, raising on errors. The returned result carries warnings only.

        Raises:
            EntryValidationError: If the entry has any validation error.
        """
        result = self.validate(entry)
        if not result.is_valid:
            raise EntryValidationError(result.error_messages())
        return result

    def validate_date(self, value: str) -> EntryValidation:
        result = EntryValidation()
        match = _STRICT_DATE_RE.match(value)
        if not match:
            result.errors.append(ValidationIssue(
                IssueType.INVALID_DATE,
                "Invalid date format. Expected YYYY/MM/DD with zero-padding",
                field="date",
                suggestion="Use format like 2025/09/15 (not 2025/9/15 or 2025/09/5)",
            ))
            return result

        year, month, day = (int(part) for part in match.groups())
        if not 1900 <= year <= 2100:
            result.errors.append(ValidationIssue(
                IssueType.INVALID_DATE, "Year must be between 1900 and 2100", field="date",
            ))
            return result
        if not 1 <= month <= 12:
            result.errors.append(ValidationIssue(
                IssueType.INVALID_DATE,
                f"Invalid month: {month}. Month must be between 01 and 12",
                field="date",
                suggestion="Use months 01-12 (January = 01, December = 12)",
            ))
            return result

        try:
            entry_date = date(year, month, day)
        except ValueError:
            result.errors.append(ValidationIssue(
                IssueType.INVALID_DATE,
                f"Invalid date: {value} does not exist",
                field="date",
                suggestion="Check that the day exists for the given month (e.g., no Feb 30)",
            ))
            return result

        today = self._clock.today()
        difference = abs(year - today.year)
        if difference > YEAR_WARNING_SPAN:
            direction = "before" if year < today.year else "after"
            result.warnings.append(ValidationIssue(
                IssueType.DATE_RANGE,
                f"Date is {difference} years {direction} current year ({today.year})",
                field="date",
            ))

        if today.month == 12:
            next_month = date(today.year + 1, 1, 1)
        else:
            next_month = date(today.year, today.month + 1, 1)
        if entry_date > next_month:
            result.warnings.append(ValidationIssue(
                IssueType.FUTURE_DATE,
                "Date is more than one month in the future",
                field="date",
            ))
        return result

    def validate_structure(self, content: str) -> EntryValidation:
        result = EntryValidation()
        lines = content.strip().split("\n")
        if len(lines) < 2:
            result.errors.append(ValidationIssue(
                IssueType.INVALID_STRUCTURE,
                "Transaction must have at least a date line and one account line",
                field="structure",
            ))
            return result

        for number, line in enumerate(lines[1:], 1):
            text = line.strip()
            if not text or text.startswith(";"):
                continue
            if not is_indented(line):
                result.errors.append(ValidationIssue(
                    IssueType.INVALID_STRUCTURE,
                    f"Account line {number} must be indented with 4 spaces or a tab",
                    field="structure",
                    suggestion="Indent account lines with spaces: '    Account:Name    Amount'",
                ))
                continue
            if not POSTING_RE.match(text):
                result.errors.append(ValidationIssue(
                    IssueType.INVALID_STRUCTURE,
                    f'Invalid account line format: "{text}"',
                    field="structure",
                    suggestion="Format: 'Account:Name    Amount [Currency]'",
                ))
        return result

    def validate_balance(self, content: str) -> EntryValidation:
        result = EntryValidation()
        postings = parse_postings(content)
        if len(postings) < 2:
            result.errors.append(ValidationIssue(
                IssueType.UNBALANCED,
                "Transaction must have at least 2 account lines",
                field="balance",
                suggestion="Add at least one debit and one credit line",
            ))
            return result

        debits = sum((p.amount for p in postings if p.amount > 0), Decimal("0"))
        credits = sum((-p.amount for p in postings if p.amount <= 0), Decimal("0"))
        difference = abs(debits - credits)
        if difference > CENT:
            result.errors.append(ValidationIssue(
                IssueType.UNBALANCED,
                f"Transaction is unbalanced: Debits ({debits:.2f}) != Credits ({credits:.2f})",
                field="balance",
                suggestion=f"Adjust amounts so debits equal credits. Difference: {difference:.2f}",
            ))
        return result
