"""FileStore implementations."""

from ledger_entry.store.memory import Commit, InMemoryFileStore
from ledger_entry.store.local import LocalFileStore
from ledger_entry.store.github import GitHubFileStore

__all__ = [
    "Commit",
    "GitHubFileStore",
    "InMemoryFileStore",
    "LocalFileStore",
]
