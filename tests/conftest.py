"""Pytest fixtures for ledger-entry tests.

Provides fixtures for:
- Fake clock pinned to 2025-09-15
- In-memory stores pre-populated with rule documents
- Rule cache and loader wired to those stores
"""

from __future__ import annotations

import json
from datetime import datetime

import pytest

from ledger_entry.rules.cache import RuleCache
from ledger_entry.rules.loader import RuleStoreLoader
from ledger_entry.store.memory import InMemoryFileStore
from ledger_entry.temporal.clock import FakeClock

from tests.sample_rules import ACCOUNTS_JOURNAL, BASE_RULES, TEMPLATE_RULES


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def fake_clock() -> FakeClock:
    """Create a fake clock for testing."""
    return FakeClock(datetime(2025, 9, 15, 12, 0, 0))


@pytest.fixture
def empty_store() -> InMemoryFileStore:
    return InMemoryFileStore(identity="memory:empty")


@pytest.fixture
def store() -> InMemoryFileStore:
    """A ledger repository with base and template rules and an accounts file."""
    files = {
        "rules/00-base.json": json.dumps(BASE_RULES, indent=2),
        "rules/10-templates.json": json.dumps(TEMPLATE_RULES, indent=2),
        "accounts.journal": ACCOUNTS_JOURNAL,
        "main.journal": "; Main ledger\n!include accounts.journal\n",
    }
    return InMemoryFileStore(files, identity="memory:ledger")


@pytest.fixture
def cache() -> RuleCache:
    return RuleCache()


@pytest.fixture
def loader(store: InMemoryFileStore, cache: RuleCache) -> RuleStoreLoader:
    return RuleStoreLoader(store, cache)
