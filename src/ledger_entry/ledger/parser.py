"""Free-text ``add`` command parser.

Parses input like ``add coffee 10, croissant 5 @ Starbucks with kbank``.
Clauses are extracted in a fixed order, each removed from the remaining
text once matched:

    memo "..."  ->  on <date>  ->  for <entity>  ->  with <payment>  ->  @|at <merchant>

Whatever is left is split on commas into ``<name> <amount> [CUR]`` items.
"""

from __future__ import annotations

import logging
import re
from datetime import timedelta
from decimal import Decimal, InvalidOperation

from ledger_entry.core.exceptions import ParseError
from ledger_entry.core.types import ParsedAddCommand, ParsedItem
from ledger_entry.core.utils import format_ledger_date
from ledger_entry.temporal.clock import Clock, SystemClock

logger = logging.getLogger(__name__)

SUGGESTION = "Try: add coffee 10 @ Starbucks"

_MEMO_RE = re.compile(r"\bmemo\s+[\"']([^\"']+)[\"']", re.IGNORECASE)
_DATE_RE = re.compile(
    r"\bon\s+(today|yesterday|tomorrow|\d{4}[/-]\d{2}[/-]\d{2})", re.IGNORECASE
)
_ENTITY_RE = re.compile(r"\bfor\s+([a-zA-Z0-9_]+)", re.IGNORECASE)
_PAYMENT_RE = re.compile(r"\bwith\s+([a-zA-Z0-9_]+)", re.IGNORECASE)
_MERCHANT_RE = re.compile(
    r"(?:@|\bat\b)\s*([^,]+?)(?=\s+with\b|\s+for\b|\s+on\b|\s+memo\b|$)",
    re.IGNORECASE,
)
_ITEM_RE = re.compile(r"^([a-zA-Z0-9_\s]+?)\s+(\d+(?:\.\d{1,2})?)\s*([A-Z]{3})?$")


def _cut(text: str, match: re.Match[str]) -> str:
    """Remove a matched clause from the text."""
    return (text[:match.start()] + " " + text[match.end():]).strip()


def normalize_date(value: str, clock: Clock) -> str:
    """Resolve ``today|yesterday|tomorrow``; otherwise normalize separators to ``/``."""
    today = clock.today()
    word = value.lower()
    if word == "today":
        return format_ledger_date(today)
    if word == "yesterday":
        return format_ledger_date(today - timedelta(days=1))
    if word == "tomorrow":
        return format_ledger_date(today + timedelta(days=1))
    return value.replace("-", "/")


def parse_item(segment: str) -> ParsedItem | None:
    """Parse ``coffee 10`` / ``coffee 10.50 THB``. None when it does not fit."""
    match = _ITEM_RE.match(segment.strip())
    if not match:
        return None
    name, amount_text, currency = match.groups()
    try:
        amount = Decimal(amount_text)
    except InvalidOperation:
        return None
    if amount <= 0:
        return None
    return ParsedItem(name=name.strip(), amount=amount, currency=currency or None)


def parse_items(text: str) -> list[ParsedItem]:
    items = []
    for segment in text.split(","):
        if not segment.strip():
            continue
        item = parse_item(segment)
        if item is None:
            logger.debug("Dropping unparsable item segment %r", segment)
            continue
        items.append(item)
    return items


def parse_add_command(text: str, clock: Clock | None = None) -> ParsedAddCommand:
    """Parse an ``add`` command into a ``ParsedAddCommand``.

    Args:
        text: The full input, including the leading ``add``.
        clock: Source of "today" for relative date words.

    Raises:
        ParseError: If the text is not an ``add`` command or has no valid items.
    """
    clock = clock or SystemClock()
    trimmed = text.strip()
    words = trimmed.split(None, 1)
    if not words or words[0].lower() != "add":
        raise ParseError("Command must start with 'add'", suggestion=SUGGESTION)

    remaining = words[1].strip() if len(words) > 1 else ""
    if not remaining:
        raise ParseError("No items specified after 'add'", suggestion="Try: add coffee 10")

    result = ParsedAddCommand()

    match = _MEMO_RE.search(remaining)
    if match:
        result.memo = match.group(1)
        remaining = _cut(remaining, match)

    match = _DATE_RE.search(remaining)
    if match:
        result.date = normalize_date(match.group(1), clock)
        remaining = _cut(remaining, match)

    match = _ENTITY_RE.search(remaining)
    if match:
        result.entity = match.group(1)
        remaining = _cut(remaining, match)

    match = _PAYMENT_RE.search(remaining)
    if match:
        result.payment = match.group(1)
        remaining = _cut(remaining, match)

    match = _MERCHANT_RE.search(remaining)
    if match and match.group(1).strip():
        result.merchant = match.group(1).strip()
        remaining = _cut(remaining, match)

    items = parse_items(remaining)
    if not items:
        raise ParseError(
            "No valid items found. Each item must include a name and amount "
            f'(e.g., "coffee 10" or "coffee 10 THB"). Remaining text: "{remaining}"',
            suggestion=SUGGESTION,
            remainder=remaining,
        )
    result.items = items
    result.currency = next((item.currency for item in items if item.currency), None)
    return result
