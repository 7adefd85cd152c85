"""In-memory file store."""

from __future__ import annotations

from dataclasses import dataclass

from ledger_entry.core.exceptions import FileNotFoundInStore


@dataclass
class Commit:
    path: str
    message: str
    content: str


class InMemoryFileStore:
    """Dictionary-backed ``FileStore`` that records every write as a commit.

    Example:
        >>> store = InMemoryFileStore({"main.journal": ""})
        >>> await store.write_file("journals/2025-09.journal", "...", "entry: ...")
        >>> store.commits[-1].message
        'entry: ...'
    """

    def __init__(
        self,
        files: dict[str, str] | None = None,
        identity: str = "memory",
    ) -> None:
        self.files: dict[str, str] = dict(files or {})
        self.commits: list[Commit] = []
        self._identity = identity

    @property
    def identity(self) -> str:
        return self._identity

    async def read_file(self, path: str) -> str:
        try:
            return self.files[path]
        except KeyError:
            raise FileNotFoundInStore(path) from None

    async def write_file(self, path: str, content: str, commit_message: str) -> None:
        self.files[path] = content
        self.commits.append(Commit(path=path, message=commit_message, content=content))

    async def list_files(self, prefix: str = "") -> list[str]:
        return sorted(path for path in self.files if path.startswith(prefix))
