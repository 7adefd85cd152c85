"""Ledger entry recognition, parsing, formatting, validation and journaling."""

from ledger_entry.ledger.intent import (
    DEFAULT_COMMAND_NAMES,
    Intent,
    IntentClassifier,
    IntentKind,
    classify,
    parse_ledger_entry,
)
from ledger_entry.ledger.parser import parse_add_command
from ledger_entry.ledger.formatter import format_entry
from ledger_entry.ledger.validator import EntryValidation, EntryValidator, ValidationIssue
from ledger_entry.ledger.journal import (
    AppendResult,
    JournalAppender,
    find_journal_file,
    journal_path_for,
)
from ledger_entry.ledger.postings import parse_postings

__all__ = [
    "DEFAULT_COMMAND_NAMES",
    "Intent",
    "IntentClassifier",
    "IntentKind",
    "classify",
    "parse_ledger_entry",
    "parse_add_command",
    "format_entry",
    "EntryValidation",
    "EntryValidator",
    "ValidationIssue",
    "AppendResult",
    "JournalAppender",
    "find_journal_file",
    "journal_path_for",
    "parse_postings",
]
