"""Intent classification: command, ledger entry, or neither."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from ledger_entry.core.types import ParsedLedgerEntry
from ledger_entry.ledger.postings import is_indented

DEFAULT_COMMAND_NAMES: frozenset[str] = frozenset({
    "help",
    "clear",
    "validate",
    "balance",
    "bal",
    "accounts",
    "files",
    "journals",
    "rules",
    "load",
    "save",
    "add",
})

# Month and day must be zero-padded; "2025/9/5" is not an entry date.
_ENTRY_DATE_RE = re.compile(r"^(\d{4})[/-](\d{2})[/-](\d{2})")
_DIGIT_RE = re.compile(r"\d")


class IntentKind(str, Enum):
    COMMAND = "command"
    LEDGER_ENTRY = "ledger_entry"
    UNRECOGNIZED = "unrecognized"


@dataclass
class Intent:
    """Classification result. ``entry`` is set only for ledger entries.

    ``raw_args`` is the text after the command name with its spacing intact.
    """

    kind: IntentKind
    command_name: str | None = None
    args: list[str] | None = None
    raw_args: str = ""
    entry: ParsedLedgerEntry | None = None

    @property
    def is_command(self) -> bool:
        return self.kind is IntentKind.COMMAND

    @property
    def is_ledger_entry(self) -> bool:
        return self.kind is IntentKind.LEDGER_ENTRY


def parse_ledger_entry(text: str) -> ParsedLedgerEntry | None:
    """Recognize a ledger entry. Returns None when the text is not one."""
    content = text.strip()
    lines = content.split("\n")
    if len(lines) < 2:
        return None

    first_line = lines[0].strip()
    match = _ENTRY_DATE_RE.match(first_line)
    if not match:
        return None

    year, month, day = match.groups()
    if not 1900 <= int(year) <= 2100:
        return None
    if not 1 <= int(month) <= 12:
        return None
    if not 1 <= int(day) <= 31:
        return None

    has_posting = any(
        line.strip() and is_indented(line) and _DIGIT_RE.search(line)
        for line in lines[1:]
    )
    if not has_posting:
        return None

    return ParsedLedgerEntry(
        date=f"{year}/{month}/{day}",
        description=first_line[match.end():].strip(),
        year_month=f"{year}-{month}",
        full_content=content,
    )


class IntentClassifier:
    """Classify raw input against a set of known command names."""

    def __init__(self, command_names: Iterable[str] | None = None) -> None:
        names = DEFAULT_COMMAND_NAMES if command_names is None else command_names
        self._command_names = frozenset(name.lower() for name in names)

    @property
    def command_names(self) -> frozenset[str]:
        return self._command_names

    def classify(self, text: str) -> Intent:
        stripped = text.strip()
        if not stripped:
            return Intent(kind=IntentKind.UNRECOGNIZED)

        words = stripped.split()
        name = words[0].lower()
        if name in self._command_names:
            return Intent(
                kind=IntentKind.COMMAND,
                command_name=name,
                args=words[1:],
                raw_args=stripped[len(words[0]):].strip(),
            )

        entry = parse_ledger_entry(stripped)
        if entry is not None:
            return Intent(kind=IntentKind.LEDGER_ENTRY, entry=entry)

        return Intent(kind=IntentKind.UNRECOGNIZED)


def classify(text: str) -> Intent:
    """Classify with the default command set."""
    return IntentClassifier().classify(text)
