"""Fetch, merge and cache rule documents from a file store."""

from __future__ import annotations

import json
import logging
import re

from ledger_entry.core.exceptions import (
    FileNotFoundInStore,
    StoreError,
    StoreUnavailableError,
)
from ledger_entry.core.protocols import FileStore
from ledger_entry.rules.cache import RuleCache
from ledger_entry.rules.schema import parse_rule_document
from ledger_entry.rules.types import (
    ACCOUNTS_PATH,
    AccountCatalog,
    AccountInfo,
    LoadedRules,
    MergedRuleSet,
    RuleDefaults,
    RuleDocument,
    RuleTier,
)

logger = logging.getLogger(__name__)

# Highest precedence first.
LOAD_ORDER: tuple[RuleTier, ...] = (
    RuleTier.LEARNED,
    RuleTier.USER,
    RuleTier.TEMPLATE,
    RuleTier.BASE,
)

_ACCOUNT_RE = re.compile(r"^account\s+(.+)$")
_ALIAS_RE = re.compile(r"^alias\s+(\S+)\s*=\s*(.+)$")


def parse_accounts_journal(content: str) -> AccountCatalog:
    """Parse ``account <name>`` and ``alias <name> = <account>`` lines.

    Aliases for accounts that were not declared earlier in the file are
    ignored.
    """
    catalog = AccountCatalog()
    by_name: dict[str, AccountInfo] = {}

    for line in content.splitlines():
        stripped = line.split(";", 1)[0].strip()
        if not stripped:
            continue

        account_match = _ACCOUNT_RE.match(stripped)
        if account_match:
            name = account_match.group(1).strip()
            if name not in by_name:
                info = AccountInfo(canonical_name=name)
                by_name[name] = info
                catalog.accounts.append(info)
            continue

        alias_match = _ALIAS_RE.match(stripped)
        if alias_match:
            alias, target = alias_match.group(1), alias_match.group(2).strip()
            info = by_name.get(target)
            if info is not None and alias not in info.aliases:
                info.aliases.append(alias)

    return catalog


def merge_rule_documents(documents: list[RuleDocument]) -> MergedRuleSet:
    """Merge documents given in precedence order (highest tier first).

    Defaults take the first non-empty value; item rules are stably sorted
    by descending priority so equal priorities keep load order.
    """
    merged = MergedRuleSet()
    found = RuleDefaults()
    for document in documents:
        if document.defaults.entity and not found.entity:
            found.entity = document.defaults.entity
        if document.defaults.currency and not found.currency:
            found.currency = document.defaults.currency
        if document.defaults.fallback_credit_account and not found.fallback_credit_account:
            found.fallback_credit_account = document.defaults.fallback_credit_account

    merged.defaults = RuleDefaults(
        entity=found.entity or merged.defaults.entity,
        currency=found.currency or merged.defaults.currency,
        fallback_credit_account=(
            found.fallback_credit_account or merged.defaults.fallback_credit_account
        ),
    )

    items = []
    for document in documents:
        items.extend(document.items)
        merged.merchants.extend(document.merchants)
        merged.payments.extend(document.payments)

    # sorted() is guaranteed stable
    merged.items = sorted(items, key=lambda rule: -rule.priority)
    return merged


class RuleStoreLoader:
    """Load the merged rule set and account catalog for one repository.

    Results are cached in the supplied ``RuleCache`` under the store's
    identity; store calls only happen on a cache miss.
    """

    def __init__(self, store: FileStore, cache: RuleCache) -> None:
        self._store = store
        self._cache = cache

    @property
    def repository_id(self) -> str:
        return self._store.identity

    async def load(self) -> LoadedRules:
        """Return cached rules, loading them from the store on a miss.

        Raises:
            StoreUnavailableError: If the store cannot be reached.
        """
        return await self._cache.get_or_load(self.repository_id, self._load_uncached)

    def invalidate(self) -> bool:
        """Drop the cached rules for this repository."""
        dropped = self._cache.invalidate(self.repository_id)
        if dropped:
            logger.debug("Invalidated rule cache for %s", self.repository_id)
        return dropped

    async def load_document(self, tier: RuleTier) -> RuleDocument:
        """Load one rule document; missing or unreadable yields an empty one."""
        path = tier.path
        try:
            content = await self._store.read_file(path)
        except StoreUnavailableError:
            raise
        except FileNotFoundInStore:
            logger.debug("Rule document %s not found, treating as empty", path)
            return RuleDocument.empty(tier)
        except StoreError as e:
            logger.warning("Failed to read rule document %s: %s", path, e)
            return RuleDocument.empty(tier)

        try:
            return parse_rule_document(content, tier)
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning("Failed to parse rule document %s: %s", path, e)
            return RuleDocument.empty(tier)

    async def load_accounts(self) -> AccountCatalog:
        try:
            content = await self._store.read_file(ACCOUNTS_PATH)
        except StoreUnavailableError:
            raise
        except FileNotFoundInStore:
            return AccountCatalog()
        except StoreError as e:
            logger.warning("Failed to read %s: %s", ACCOUNTS_PATH, e)
            return AccountCatalog()
        return parse_accounts_journal(content)

    async def _load_uncached(self) -> LoadedRules:
        documents = [await self.load_document(tier) for tier in LOAD_ORDER]
        accounts = await self.load_accounts()
        rules = merge_rule_documents(documents)
        logger.info(
            "Loaded %d item, %d merchant, %d payment rules and %d accounts for %s",
            len(rules.items),
            len(rules.merchants),
            len(rules.payments),
            len(accounts),
            self.repository_id,
        )
        return LoadedRules(rules=rules, accounts=accounts)
