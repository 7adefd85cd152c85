"""Tests for journal appending and journal file lookup."""

from __future__ import annotations

from datetime import date
from unittest.mock import AsyncMock

import pytest

from ledger_entry.core.exceptions import StoreError
from ledger_entry.core.types import ParsedLedgerEntry
from ledger_entry.ledger.journal import (
    JournalAppender,
    add_include,
    find_journal_file,
    is_journal_criteria,
    journal_header,
    journal_month,
)
from ledger_entry.ledger.postings import parse_journal_postings, split_entries
from ledger_entry.store.memory import InMemoryFileStore

from tests.sample_rules import COFFEE_ENTRY


def _entry(content: str = COFFEE_ENTRY, year_month: str = "2025-09") -> ParsedLedgerEntry:
    first = content.splitlines()[0]
    entry_date, _, description = first.partition(" ")
    return ParsedLedgerEntry(entry_date, description, year_month, content)


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------


class TestAddInclude:
    def test_inserted_after_last_include(self):
        manifest = "; Main\n!include accounts.journal\n!include journals/2025-08.journal\n\n; end\n"
        updated = add_include(manifest, "journals/2025-09.journal")

        assert updated.split("\n")[:4] == [
            "; Main",
            "!include accounts.journal",
            "!include journals/2025-08.journal",
            "!include journals/2025-09.journal",
        ]
        assert updated.endswith("; end\n")

    def test_appended_when_no_includes(self):
        assert add_include("; Main", "journals/2025-09.journal") == "; Main\n!include journals/2025-09.journal"

    def test_already_present(self):
        manifest = "!include journals/2025-09.journal\n"
        assert add_include(manifest, "journals/2025-09.journal") is None


# ---------------------------------------------------------------------------
# Appending
# ---------------------------------------------------------------------------


class TestJournalAppender:
    @pytest.mark.asyncio
    async def test_new_month_file_gets_header_and_manifest_include(self, store, fake_clock):
        result = await JournalAppender(store, fake_clock).append(_entry())

        assert result.journal_path == "journals/2025-09.journal"
        assert result.created is True
        assert result.manifest_updated is True
        assert store.files["journals/2025-09.journal"] == journal_header("2025-09", date(2025, 9, 15)) + COFFEE_ENTRY
        assert "!include journals/2025-09.journal" in store.files["main.journal"]
        assert [c.path for c in store.commits] == ["journals/2025-09.journal", "main.journal"]
        assert store.commits[0].message == "entry: 2025/09/15 Starbucks — 2025-09"
        assert store.commits[1].message == "main: add journals/2025-09.journal to includes"

    @pytest.mark.asyncio
    async def test_second_append_keeps_first_entry(self, store, fake_clock):
        appender = JournalAppender(store, fake_clock)
        await appender.append(_entry())
        second = COFFEE_ENTRY.replace("Starbucks", "Blue Bottle")
        result = await appender.append(_entry(second))

        content = store.files["journals/2025-09.journal"]
        assert result.created is False
        assert result.manifest_updated is False
        assert content.index("Starbucks") < content.index("Blue Bottle")
        assert COFFEE_ENTRY + "\n\n" + second in content
        assert len(split_entries(content)) == 2
        assert store.files["main.journal"].count("journals/2025-09.journal") == 1

    @pytest.mark.asyncio
    async def test_no_separator_after_trailing_newline(self, fake_clock):
        store = InMemoryFileStore({"journals/2025-09.journal": "; header\n"})
        await JournalAppender(store, fake_clock).append(_entry())
        assert store.files["journals/2025-09.journal"] == "; header\n" + COFFEE_ENTRY

    @pytest.mark.asyncio
    async def test_month_comes_from_entry_not_clock(self, store, fake_clock):
        entry = _entry(COFFEE_ENTRY.replace("2025/09/15", "2024/12/31"), year_month="2024-12")
        result = await JournalAppender(store, fake_clock).append(entry)
        assert result.journal_path == "journals/2024-12.journal"

    @pytest.mark.asyncio
    async def test_manifest_failure_is_a_warning(self, store, fake_clock):
        appender = JournalAppender(store, fake_clock)
        appender.update_manifest = AsyncMock(side_effect=StoreError("main.journal", "denied"))

        result = await appender.append(_entry())

        assert "journals/2025-09.journal" in store.files
        assert result.manifest_updated is False
        assert result.warnings == ["Failed to update main.journal: denied"]

    @pytest.mark.asyncio
    async def test_journal_write_failure_propagates(self, store, fake_clock):
        store.write_file = AsyncMock(side_effect=StoreError("journals/2025-09.journal", "denied"))
        with pytest.raises(StoreError):
            await JournalAppender(store, fake_clock).append(_entry())

    @pytest.mark.asyncio
    async def test_missing_manifest_is_created(self, empty_store, fake_clock):
        await JournalAppender(empty_store, fake_clock).append(_entry())
        assert empty_store.files["main.journal"] == "\n!include journals/2025-09.journal"


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------

PATHS = [
    "accounts.journal",
    "journals/2024-03.journal",
    "journals/2024-11.journal",
    "journals/2025-03.journal",
    "journals/2025-09.journal",
    "journals/notes.journal",
    "rules/00-base.json",
]
TODAY = date(2025, 9, 15)


class TestFindJournalFile:
    @pytest.mark.parametrize("criteria,expected", [
        ("current", "journals/2025-09.journal"),
        ("latest", "journals/2025-09.journal"),
        ("march", "journals/2025-03.journal"),
        ("Mar", "journals/2025-03.journal"),
        ("3", "journals/2025-03.journal"),
        ("03", "journals/2025-03.journal"),
        ("nov", "journals/2024-11.journal"),
        ("2024-03", "journals/2024-03.journal"),
        ("2024-3", "journals/2024-03.journal"),
    ])
    def test_resolves(self, criteria, expected):
        assert find_journal_file(PATHS, criteria, TODAY) == expected

    @pytest.mark.parametrize("criteria", ["13", "january", "2023-01", "someday"])
    def test_not_found(self, criteria):
        assert find_journal_file(PATHS, criteria, TODAY) is None

    def test_current_missing(self):
        assert find_journal_file(PATHS, "current", date(2025, 10, 1)) is None

    def test_no_journals(self):
        assert find_journal_file(["main.journal"], "latest", TODAY) is None

    def test_criteria_syntax(self):
        assert is_journal_criteria("latest")
        assert is_journal_criteria("sep")
        assert is_journal_criteria("2025-09")
        assert not is_journal_criteria("last week")

    def test_journal_month(self):
        assert journal_month("journals/2025-09.journal") == (2025, 9)
        assert journal_month("journals/2025-13.journal") is None


class TestPostings:
    def test_split_and_parse_journal(self):
        content = journal_header("2025-09", TODAY) + COFFEE_ENTRY + "\n\n" + COFFEE_ENTRY + "\n"
        assert len(split_entries(content)) == 2

        postings = parse_journal_postings(content)
        assert len(postings) == 4
        assert postings[1].account == "Personal:Assets:Bank:Checking"
        assert str(postings[1].amount) == "-10.00"
        assert postings[1].currency == "USD"
