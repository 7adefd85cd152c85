"""Custom exceptions for Ledger Entry."""


class LedgerEntryError(Exception):
    """Base exception for ledger entry operations."""

    pass


class ParseError(LedgerEntryError):
    """Raised when free-text ``add`` input cannot be parsed."""

    def __init__(
        self,
        message: str,
        suggestion: str | None = None,
        remainder: str | None = None,
    ):
        self.suggestion = suggestion
        self.remainder = remainder
        super().__init__(message)


class StoreError(LedgerEntryError):
    """Raised when a file store operation fails."""

    def __init__(self, path: str, message: str = ""):
        self.path = path
        super().__init__(message or f"Store operation failed for {path}")


class FileNotFoundInStore(StoreError):
    """Raised when a path does not exist in the store."""

    def __init__(self, path: str):
        super().__init__(path, f"File not found: {path}")


class StoreUnavailableError(StoreError):
    """Raised when the store cannot be reached at all."""

    def __init__(self, path: str, reason: str = ""):
        self.reason = reason
        message = f"Store unavailable while accessing {path}"
        if reason:
            message += f": {reason}"
        super().__init__(path, message)


class BalanceInvariantError(LedgerEntryError):
    """Raised when a generated entry does not balance.

    Generated entries are balanced by construction, so this signals a
    bug in resolution arithmetic rather than bad input.
    """

    def __init__(self, debit_total: object, credit_total: object):
        self.debit_total = debit_total
        self.credit_total = credit_total
        super().__init__(
            f"Generated entry is unbalanced: debits {debit_total} "
            f"!= credits {credit_total}"
        )


class EntryValidationError(LedgerEntryError):
    """Raised when a submitted ledger entry fails validation."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("; ".join(errors) or "Ledger entry is invalid")


class LearningError(LedgerEntryError):
    """Raised when a learned rule cannot be persisted."""

    pass
