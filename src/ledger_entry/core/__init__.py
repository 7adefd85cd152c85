"""Core types and protocols for Ledger Entry."""

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

__all__ = [
    # Types
    "DebitLine",
    "ParsedAddCommand",
    "ParsedItem",
    "ParsedLedgerEntry",
    "Posting",
    "ResolvedTransaction",
    # Protocols
    "FileStore",
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
