"""Posting line parsing shared by validation, balances and learning."""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation

from ledger_entry.core.types import Posting

# "Account:Name    -12.50 USD", optional "$" and trailing currency code.
POSTING_RE = re.compile(r"^(.+?)\s+([+-]?\$?\d+\.?\d*)\s*([A-Z]{3})?\s*$")


def is_indented(line: str) -> bool:
    return line.startswith("    ") or line.startswith("\t")


def parse_posting_line(line: str) -> Posting | None:
    """Parse one posting line (already stripped). Comments return None."""
    text = line.strip()
    if not text or text.startswith(";"):
        return None
    match = POSTING_RE.match(text)
    if not match:
        return None
    account, amount_text, currency = match.groups()
    try:
        amount = Decimal(amount_text.replace("$", "").replace(",", ""))
    except InvalidOperation:
        return None
    return Posting(account=account.strip(), amount=amount, currency=currency)


def parse_postings(entry: str) -> list[Posting]:
    """Parse the posting lines of a single entry (the first line is skipped)."""
    postings: list[Posting] = []
    for line in entry.strip().splitlines()[1:]:
        posting = parse_posting_line(line)
        if posting is not None:
            postings.append(posting)
    return postings


def parse_journal_postings(content: str) -> list[Posting]:
    """Parse every indented posting line in a journal file."""
    postings: list[Posting] = []
    for line in content.splitlines():
        if not is_indented(line):
            continue
        posting = parse_posting_line(line)
        if posting is not None:
            postings.append(posting)
    return postings


def split_entries(content: str) -> list[str]:
    """Split journal content into entries: a flush-left dated line plus its postings."""
    entries: list[list[str]] = []
    current: list[str] | None = None
    for line in content.splitlines():
        if line[:1].isdigit():
            current = [line]
            entries.append(current)
        elif current is not None and line.strip() and is_indented(line):
            current.append(line)
        else:
            current = None
    return ["\n".join(lines) for lines in entries]
