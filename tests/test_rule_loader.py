"""Tests for rule document parsing, merging, caching and loading."""

from __future__ import annotations

import asyncio
import json
from unittest.mock import AsyncMock

import pytest

from ledger_entry.core.exceptions import StoreError, StoreUnavailableError
from ledger_entry.rules.cache import RuleCache
from ledger_entry.rules.engine import RuleEngine
from ledger_entry.rules.loader import (
    RuleStoreLoader,
    merge_rule_documents,
    parse_accounts_journal,
)
from ledger_entry.rules.schema import dump_rule_document, parse_rule_document
from ledger_entry.rules.types import (
    DEFAULT_CURRENCY,
    DEFAULT_ENTITY,
    LoadedRules,
    MergedRuleSet,
    AccountCatalog,
    RuleDefaults,
    RuleDocument,
    RuleEntry,
    RuleTier,
)
from ledger_entry.store.memory import InMemoryFileStore

from tests.sample_rules import BASE_RULES, TEMPLATE_RULES


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------


class TestParseRuleDocument:
    def test_reads_wire_field_names(self):
        doc = parse_rule_document(json.dumps(BASE_RULES), RuleTier.BASE)

        assert doc.tier is RuleTier.BASE
        assert doc.defaults.fallback_credit_account == "Personal:Assets:Bank:Checking"
        assert doc.merchants[0].target_account == "Personal:Expenses:Food:Cafe"
        assert doc.payments[0].target_account == "Personal:Assets:Bank:KBank"
        assert doc.items[0].target_account == "Personal:Expenses:Food:Groceries"

    def test_malformed_entry_is_skipped(self):
        content = json.dumps({
            "items": [
                {"pattern": "(?i)tea"},
                {"pattern": "(?i)coffee", "debit": "Personal:Expenses:Coffee", "priority": 5},
                "not a rule",
            ],
        })
        doc = parse_rule_document(content, RuleTier.USER)
        assert [rule.pattern for rule in doc.items] == ["(?i)coffee"]
        assert doc.items[0].priority == 5

    def test_non_object_raises(self):
        with pytest.raises(ValueError):
            parse_rule_document("[]", RuleTier.USER)

    def test_invalid_json_raises(self):
        with pytest.raises(json.JSONDecodeError):
            parse_rule_document("{not json", RuleTier.USER)

    def test_learned_fields_survive_dump(self):
        doc = RuleDocument(tier=RuleTier.LEARNED)
        doc.items.append(RuleEntry(
            "(?i)latte", "Personal:Expenses:Food:Coffee",
            priority=20, learned=True, confidence=0.9, usage_count=3,
        ))
        data = json.loads(dump_rule_document(doc))

        item = data["items"][0]
        assert item == {
            "pattern": "(?i)latte",
            "debit": "Personal:Expenses:Food:Coffee",
            "priority": 20,
            "learned": True,
            "confidence": 0.9,
            "usageCount": 3,
        }
        reparsed = parse_rule_document(dump_rule_document(doc), RuleTier.LEARNED)
        assert reparsed.items[0].usage_count == 3
        assert reparsed.items[0].learned is True


# ---------------------------------------------------------------------------
# Accounts journal
# ---------------------------------------------------------------------------


class TestParseAccountsJournal:
    def test_accounts_and_aliases(self):
        catalog = parse_accounts_journal(
            "account Assets:Bank  ; main account\n"
            "alias bank = Assets:Bank\n"
            "account Expenses:Food\n"
            "alias ghost = Expenses:Ghost\n"
        )
        assert [a.canonical_name for a in catalog.accounts] == ["Assets:Bank", "Expenses:Food"]
        assert catalog.find("bank").canonical_name == "Assets:Bank"
        assert catalog.find("ghost") is None

    def test_empty(self):
        assert len(parse_accounts_journal("")) == 0


# ---------------------------------------------------------------------------
# Merging
# ---------------------------------------------------------------------------


class TestMergeRuleDocuments:
    def test_defaults_highest_tier_wins(self):
        learned = RuleDocument(RuleTier.LEARNED, defaults=RuleDefaults(currency="THB"))
        base = RuleDocument(RuleTier.BASE, defaults=RuleDefaults(entity="Home", currency="USD"))
        merged = merge_rule_documents([learned, base])

        assert merged.defaults.currency == "THB"
        assert merged.defaults.entity == "Home"
        assert merged.defaults.fallback_credit_account  # built-in default

    def test_builtin_defaults_when_empty(self):
        merged = merge_rule_documents([RuleDocument(RuleTier.BASE)])
        assert merged.defaults.entity == DEFAULT_ENTITY
        assert merged.defaults.currency == DEFAULT_CURRENCY

    def test_stable_priority_sort(self):
        learned = RuleDocument(RuleTier.LEARNED, items=[RuleEntry("(?i)coffee", "Learned", priority=10)])
        template = RuleDocument(RuleTier.TEMPLATE, items=[
            RuleEntry("(?i)coffee", "Template", priority=10),
            RuleEntry("(?i)tea", "Tea", priority=50),
        ])
        merged = merge_rule_documents([learned, template])

        assert [r.target_account for r in merged.items] == ["Tea", "Learned", "Template"]

    def test_learned_rule_overrides_template_rule(self):
        learned = RuleDocument(RuleTier.LEARNED, items=[
            RuleEntry("(?i)coffee", "Personal:Expenses:Food:Cafe", priority=20, learned=True),
        ])
        template = RuleDocument(RuleTier.TEMPLATE, items=[
            RuleEntry("(?i)coffee", "Personal:Expenses:Food:Coffee", priority=10),
        ])
        engine = RuleEngine(merge_rule_documents([learned, template]))

        assert engine.resolve_debit_account("coffee", None, "Personal") == "Personal:Expenses:Food:Cafe"


# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------


def _loaded() -> LoadedRules:
    return LoadedRules(rules=MergedRuleSet(), accounts=AccountCatalog())


class TestRuleCache:
    def test_put_get_invalidate(self):
        cache = RuleCache()
        loaded = _loaded()
        cache.put("repo", loaded)

        assert cache.get("repo") is loaded
        assert "repo" in cache
        assert cache.size == 1
        assert cache.invalidate("repo") is True
        assert cache.invalidate("repo") is False
        assert cache.get("repo") is None

    @pytest.mark.asyncio
    async def test_get_or_load_calls_loader_once(self):
        cache = RuleCache()
        loader = AsyncMock(return_value=_loaded())

        first = await cache.get_or_load("repo", loader)
        second = await cache.get_or_load("repo", loader)

        assert first is second
        loader.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_concurrent_misses_share_one_load(self):
        cache = RuleCache()
        calls = 0

        async def slow_loader() -> LoadedRules:
            nonlocal calls
            calls += 1
            await asyncio.sleep(0.01)
            return _loaded()

        results = await asyncio.gather(*(cache.get_or_load("repo", slow_loader) for _ in range(5)))

        assert calls == 1
        assert all(r is results[0] for r in results)

    def test_clear(self):
        cache = RuleCache()
        cache.put("a", _loaded())
        cache.put("b", _loaded())
        cache.clear()
        assert cache.size == 0

    @pytest.mark.asyncio
    async def test_invalidate_during_load_is_not_cached(self):
        cache = RuleCache()
        started = asyncio.Event()
        release = asyncio.Event()
        stale = _loaded()

        async def slow_loader() -> LoadedRules:
            started.set()
            await release.wait()
            return stale

        task = asyncio.create_task(cache.get_or_load("repo", slow_loader))
        await started.wait()
        cache.invalidate("repo")
        release.set()

        assert await task is stale
        assert cache.get("repo") is None

        fresh = _loaded()
        assert await cache.get_or_load("repo", AsyncMock(return_value=fresh)) is fresh
        assert cache.get("repo") is fresh

    @pytest.mark.asyncio
    async def test_clear_during_load_is_not_cached(self):
        cache = RuleCache()
        cache.invalidate("repo")
        started = asyncio.Event()
        release = asyncio.Event()

        async def slow_loader() -> LoadedRules:
            started.set()
            await release.wait()
            return _loaded()

        task = asyncio.create_task(cache.get_or_load("repo", slow_loader))
        await started.wait()
        cache.clear()
        release.set()
        await task

        assert cache.size == 0


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


class TestRuleStoreLoader:
    @pytest.mark.asyncio
    async def test_load_merges_and_reads_accounts(self, loader):
        loaded = await loader.load()

        assert loaded.rules.defaults.entity == "Personal"
        assert loaded.rules.items[0].pattern == "(?i)coffee"  # priority 10 before 0
        assert len(loaded.rules.merchants) == 2
        assert loaded.accounts.find("kbank").canonical_name == "Personal:Assets:Bank:KBank"

    @pytest.mark.asyncio
    async def test_store_only_read_on_miss(self, store, cache):
        loader = RuleStoreLoader(store, cache)
        original_read = store.read_file
        store.read_file = AsyncMock(side_effect=original_read)

        await loader.load()
        reads = store.read_file.await_count
        await loader.load()

        assert reads == 5
        assert store.read_file.await_count == reads
        assert cache.get(store.identity) is not None

    @pytest.mark.asyncio
    async def test_invalidate_forces_reload(self, store, cache):
        loader = RuleStoreLoader(store, cache)
        first = await loader.load()

        assert loader.invalidate() is True
        second = await loader.load()

        assert first is not second

    @pytest.mark.asyncio
    async def test_missing_and_unparsable_documents_are_empty(self):
        store = InMemoryFileStore({
            "rules/20-user.json": "{broken",
            "rules/10-templates.json": json.dumps(TEMPLATE_RULES),
        })
        loaded = await RuleStoreLoader(store, RuleCache()).load()

        assert len(loaded.rules.items) == 2
        assert loaded.rules.defaults.entity == DEFAULT_ENTITY
        assert len(loaded.accounts) == 0

    @pytest.mark.asyncio
    async def test_generic_store_error_is_treated_as_empty(self):
        store = InMemoryFileStore()
        store.read_file = AsyncMock(side_effect=StoreError("rules/00-base.json", "boom"))

        loaded = await RuleStoreLoader(store, RuleCache()).load()
        assert loaded.rules.rule_count == 0

    @pytest.mark.asyncio
    async def test_unreachable_store_propagates(self):
        store = InMemoryFileStore()
        store.read_file = AsyncMock(side_effect=StoreUnavailableError("rules/30-learned.json", "offline"))
        cache = RuleCache()

        with pytest.raises(StoreUnavailableError):
            await RuleStoreLoader(store, cache).load()
        assert cache.size == 0
