"""Protocol definitions for external collaborators.

The engine only ever talks to storage through ``FileStore``; concrete
implementations live in ``ledger_entry.store``.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class FileStore(Protocol):
    """A versioned plain-text file store (e.g. a git repository)."""

    @property
    def identity(self) -> str:
        """Stable identifier of the repository, used as a cache key."""
        ...

    async def read_file(self, path: str) -> str:
        """Return the file content.

        Raises:
            FileNotFoundInStore: If the path does not exist.
            StoreUnavailableError: If the store cannot be reached.
        """
        ...

    async def write_file(self, path: str, content: str, commit_message: str) -> None:
        """Create or overwrite a file, recording ``commit_message``."""
        ...

    async def list_files(self, prefix: str = "") -> list[str]:
        """List file paths, optionally restricted to ``prefix``."""
        ...
