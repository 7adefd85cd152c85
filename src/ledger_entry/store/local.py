"""File store over a local directory."""

from __future__ import annotations

import logging
from pathlib import Path

from ledger_entry.core.exceptions import FileNotFoundInStore, StoreError

logger = logging.getLogger(__name__)


class LocalFileStore:
    """``FileStore`` backed by a directory on disk.

    Commit messages are logged only; there is no version history. Paths
    are relative to ``root`` and may not escape it. Hidden files and
    directories are not listed.
    """

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root).resolve()

    @property
    def identity(self) -> str:
        return f"local:{self._root}"

    @property
    def root(self) -> Path:
        return self._root

    def _resolve(self, path: str) -> Path:
        target = (self._root / path).resolve()
        if target != self._root and self._root not in target.parents:
            raise StoreError(path, f"Path escapes store root: {path}")
        return target

    async def read_file(self, path: str) -> str:
        target = self._resolve(path)
        try:
            return target.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise FileNotFoundInStore(path) from None
        except OSError as e:
            raise StoreError(path, f"Failed to read {path}: {e}") from e

    async def write_file(self, path: str, content: str, commit_message: str) -> None:
        target = self._resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        except OSError as e:
            raise StoreError(path, f"Failed to write {path}: {e}") from e
        logger.info("Wrote %s (%s)", path, commit_message)

    async def list_files(self, prefix: str = "") -> list[str]:
        if not self._root.exists():
            return []
        paths = []
        for candidate in self._root.rglob("*"):
            relative = candidate.relative_to(self._root)
            if not candidate.is_file() or any(part.startswith(".") for part in relative.parts):
                continue
            path = relative.as_posix()
            if path.startswith(prefix):
                paths.append(path)
        return sorted(paths)
