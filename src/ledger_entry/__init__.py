"""Ledger Entry - natural-language transactions into plain-text double-entry journals.

Ledger Entry turns a line like ``add coffee 10 @ Starbucks with kbank``
into a balanced ledger transaction, picks accounts from layered pattern
rules stored alongside the ledger, learns from the corrections you make,
and appends the result to the right monthly journal file.

Example:
    >>> from ledger_entry import Session, LocalFileStore
    >>>
    >>> session = Session(LocalFileStore("./my-ledger"))
    >>> result = await session.handle("add coffee 10 @ Starbucks")
    >>> print(result.data["generated_entry"])
    >>> await session.handle(result.data["generated_entry"])
"""

from ledger_entry.core.types import (
    DebitLine,
    ParsedAddCommand,
    ParsedItem,
    ParsedLedgerEntry,
    Posting,
    ResolvedTransaction,
)
from ledger_entry.core.protocols import FileStore
from ledger_entry.core.exceptions import (
    BalanceInvariantError,
    EntryValidationError,
    FileNotFoundInStore,
    LearningError,
    LedgerEntryError,
    ParseError,
    StoreError,
    StoreUnavailableError,
)
from ledger_entry.config import AppConfig, GitHubConfig
from ledger_entry.temporal.clock import Clock, FakeClock, SystemClock
from ledger_entry.rules import (
    RuleCache,
    RuleEngine,
    RuleLearner,
    RuleStoreLoader,
    RuleTier,
)
from ledger_entry.ledger import (
    IntentClassifier,
    JournalAppender,
    classify,
    format_entry,
    parse_add_command,
    parse_ledger_entry,
)
from ledger_entry.commands import CommandRegistry, EventLog, create_default_registry
from ledger_entry.store import GitHubFileStore, InMemoryFileStore, LocalFileStore
from ledger_entry.session import Session

__version__ = "0.1.0"

__all__ = [
    # Session
    "Session",
    # Types
    "DebitLine",
    "ParsedAddCommand",
    "ParsedItem",
    "ParsedLedgerEntry",
    "Posting",
    "ResolvedTransaction",
    # Stores
    "FileStore",
    "GitHubFileStore",
    "InMemoryFileStore",
    "LocalFileStore",
    # Rules
    "RuleCache",
    "RuleEngine",
    "RuleLearner",
    "RuleStoreLoader",
    "RuleTier",
    # Ledger
    "IntentClassifier",
    "JournalAppender",
    "classify",
    "format_entry",
    "parse_add_command",
    "parse_ledger_entry",
    # Commands
    "CommandRegistry",
    "EventLog",
    "create_default_registry",
    # Config
    "AppConfig",
    "GitHubConfig",
    # Temporal
    "Clock",
    "FakeClock",
    "SystemClock",
    # Exceptions
    "BalanceInvariantError",
    "EntryValidationError",
    "FileNotFoundInStore",
    "LearningError",
    "LedgerEntryError",
    "ParseError",
    "StoreError",
    "StoreUnavailableError",
]
