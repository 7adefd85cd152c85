"""Journal append engine: monthly files plus the ``main.journal`` manifest.

Entries are appended to ``journals/YYYY-MM.journal`` chosen from the
entry's own date. A newly created journal is added to the manifest's
``!include`` list.

Writes are read-then-write with no version check; two sessions appending
to the same monthly file at the same moment can overwrite each other.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date

from ledger_entry.core.exceptions import FileNotFoundInStore, StoreError
from ledger_entry.core.protocols import FileStore
from ledger_entry.core.types import ParsedLedgerEntry
from ledger_entry.temporal.clock import Clock, SystemClock

logger = logging.getLogger(__name__)

JOURNALS_DIR = "journals"
MANIFEST_PATH = "main.journal"
INCLUDE_DIRECTIVE = "!include"

_JOURNAL_NAME_RE = re.compile(r"^(\d{4})-(\d{2})\.journal$")
_YEAR_MONTH_RE = re.compile(r"^(\d{4})-(\d{1,2})$")

MONTH_NAMES = (
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
)
MONTH_ABBREVIATIONS = tuple(name[:3] for name in MONTH_NAMES)


@dataclass
class AppendResult:
    """Where an entry went and what else happened along the way."""

    journal_path: str
    created: bool
    manifest_updated: bool = False
    warnings: list[str] = field(default_factory=list)


def journal_path_for(year_month: str) -> str:
    return f"{JOURNALS_DIR}/{year_month}.journal"


def journal_header(year_month: str, generated_on: date) -> str:
    return (
        f"; Ledger Entry — transactions for {year_month}\n"
        f"; Generated on {generated_on.isoformat()}\n"
        "\n"
    )


def add_include(manifest: str, path: str) -> str | None:
    """Return the manifest with ``!include <path>`` added, or None if already present.

    The new line goes right after the last existing include, or at the end.
    """
    include_line = f"{INCLUDE_DIRECTIVE} {path}"
    lines = manifest.split("\n")
    if any(line.strip() == include_line for line in lines):
        return None

    insert_at = len(lines)
    for index in range(len(lines) - 1, -1, -1):
        if lines[index].strip().startswith(INCLUDE_DIRECTIVE):
            insert_at = index + 1
            break
    lines.insert(insert_at, include_line)
    return "\n".join(lines)


# ========== Journal file lookup ==========


def parse_month_name(value: str) -> int | None:
    lowered = value.lower()
    if lowered in MONTH_NAMES:
        return MONTH_NAMES.index(lowered) + 1
    if lowered in MONTH_ABBREVIATIONS:
        return MONTH_ABBREVIATIONS.index(lowered) + 1
    return None


def journal_month(path: str) -> tuple[int, int] | None:
    """``(year, month)`` for a ``journals/YYYY-MM.journal`` path, else None."""
    match = _JOURNAL_NAME_RE.match(path.rsplit("/", 1)[-1])
    if not match:
        return None
    year, month = int(match.group(1)), int(match.group(2))
    if not 1900 <= year <= 2100 or not 1 <= month <= 12:
        return None
    return year, month


def journal_files(paths: list[str]) -> list[str]:
    return [
        path for path in paths
        if path.startswith(f"{JOURNALS_DIR}/") and path.endswith(".journal")
    ]


def is_journal_criteria(criteria: str) -> bool:
    """Whether ``criteria`` is a syntactically valid ``load -j`` specifier."""
    return (
        criteria in ("current", "latest")
        or parse_month_name(criteria) is not None
        or re.fullmatch(r"\d{1,2}", criteria) is not None
        or _YEAR_MONTH_RE.match(criteria) is not None
    )


def find_journal_file(paths: list[str], criteria: str, today: date) -> str | None:
    """Resolve a journal shortcut to a store path.

    ``criteria`` is one of ``current``, ``latest``, a month number (1-12),
    a month name or abbreviation, or ``YYYY-MM``. A bare month prefers the
    current year and otherwise falls back to the most recent year that has
    that month.
    """
    dated: list[tuple[tuple[int, int], str]] = []
    for path in journal_files(paths):
        year_month = journal_month(path)
        if year_month is not None:
            dated.append((year_month, path))
    if not dated:
        return None

    def find(year: int, month: int) -> str | None:
        return next((path for ym, path in dated if ym == (year, month)), None)

    lowered = criteria.lower()
    if lowered == "current":
        return find(today.year, today.month)
    if lowered == "latest":
        return max(dated)[1]

    month = parse_month_name(criteria)
    if month is None and re.fullmatch(r"\d{1,2}", criteria):
        month = int(criteria)
        if not 1 <= month <= 12:
            return None
    if month is not None:
        found = find(today.year, month)
        if found:
            return found
        same_month = [entry for entry in dated if entry[0][1] == month]
        return max(same_month)[1] if same_month else None

    match = _YEAR_MONTH_RE.match(criteria)
    if match:
        return find(int(match.group(1)), int(match.group(2)))
    return None


# ========== Appending ==========


class JournalAppender:
    """Append validated ledger entries to monthly journal files."""

    def __init__(self, store: FileStore, clock: Clock | None = None) -> None:
        self._store = store
        self._clock = clock or SystemClock()

    async def append(self, entry: ParsedLedgerEntry) -> AppendResult:
        """Append an entry to its month's journal.

        Raises:
            StoreError: If the journal file cannot be written.
        """
        path = journal_path_for(entry.year_month)

        try:
            existing = await self._store.read_file(path)
            created = False
        except FileNotFoundInStore:
            existing = None
            created = True
        except StoreError as e:
            logger.warning("Could not load %s, starting a new file: %s", path, e)
            existing = None
            created = True

        if existing is None:
            content = journal_header(entry.year_month, self._clock.today()) + entry.full_content
        else:
            separator = "\n\n" if existing.strip() and not existing.endswith("\n") else ""
            content = existing + separator + entry.full_content

        commit_message = f"entry: {entry.date} {entry.description} — {entry.year_month}"
        await self._store.write_file(path, content, commit_message)
        logger.info("Appended entry %s %s to %s", entry.date, entry.description, path)

        result = AppendResult(journal_path=path, created=created)
        if created:
            try:
                result.manifest_updated = await self.update_manifest(path)
            except StoreError as e:
                logger.warning("Failed to update %s: %s", MANIFEST_PATH, e)
                result.warnings.append(f"Failed to update {MANIFEST_PATH}: {e}")
        return result

    async def update_manifest(self, path: str) -> bool:
        """Add ``!include <path>`` to the manifest. Returns False if already present."""
        try:
            manifest = await self._store.read_file(MANIFEST_PATH)
        except FileNotFoundInStore:
            manifest = ""

        updated = add_include(manifest, path)
        if updated is None:
            logger.debug("%s already includes %s", MANIFEST_PATH, path)
            return False

        await self._store.write_file(
            MANIFEST_PATH, updated, f"main: add {path} to includes"
        )
        return True
