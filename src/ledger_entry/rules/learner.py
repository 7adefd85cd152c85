"""Turn user corrections of generated entries into learned rules."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from decimal import Decimal

import Levenshtein

from ledger_entry.core.exceptions import (
    FileNotFoundInStore,
    LearningError,
    StoreError,
)
from ledger_entry.core.protocols import FileStore
from ledger_entry.ledger.postings import parse_postings
from ledger_entry.rules.cache import RuleCache
from ledger_entry.rules.schema import dump_rule_document, parse_rule_document
from ledger_entry.rules.types import RuleDocument, RuleEntry, RuleTier
from ledger_entry.temporal.clock import Clock, SystemClock

logger = logging.getLogger(__name__)

BASE_CONFIDENCE = 0.7
SPECIFICITY_BONUS = 0.2
SUBSTANTIAL_CHANGE_BONUS = 0.1
REINFORCEMENT_STEP = 0.1
# Below the user tier's own rules, above templates and base.
LEARNED_RULE_PRIORITY = 20
AMOUNT_TOLERANCE = Decimal("0.01")


@dataclass
class LearningContext:
    """A single account correction made by the user."""

    original_account: str
    final_account: str
    item_name: str


@dataclass
class ItemMapping:
    """How one item of a generated entry was resolved."""

    item_name: str
    original_account: str
    amount: Decimal
    currency: str


@dataclass
class AccountChange:
    """An item whose account differs between generated and final entries."""

    item_name: str
    original_account: str
    final_account: str
    amount: Decimal
    currency: str


def similarity(a: str, b: str) -> float:
    """Edit-distance similarity in [0, 1]; 1.0 means identical."""
    longer = max(len(a), len(b))
    if longer == 0:
        return 1.0
    return (longer - Levenshtein.distance(a, b)) / longer


def should_learn(original_account: str, final_account: str, item_name: str) -> bool:
    """Whether a correction is meaningful enough to learn from."""
    if original_account == final_account:
        return False
    if not final_account or not final_account.strip():
        return False
    if not item_name or not item_name.strip():
        return False
    if original_account.lower() == final_account.lower():
        return False
    if re.sub(r"\s+", "", original_account) == re.sub(r"\s+", "", final_account):
        return False
    return True


def calculate_confidence(original_account: str, final_account: str) -> float:
    """Initial confidence for a newly learned rule.

    A correction to a deeper account is treated as more specific, and a
    low similarity as a substantial change; both raise confidence.
    """
    confidence = BASE_CONFIDENCE
    if len(final_account.split(":")) > len(original_account.split(":")):
        confidence += SPECIFICITY_BONUS
    if similarity(original_account, final_account) < 0.5:
        confidence += SUBSTANTIAL_CHANGE_BONUS
    return min(round(confidence, 4), 1.0)


def learned_pattern_for(item_name: str) -> str:
    return f"(?i){re.escape(item_name.strip())}"


def _rule_matches_item(rule: RuleEntry, item_name: str) -> bool:
    pattern = rule.pattern.lower()
    name = item_name.strip().lower()
    return name in pattern or re.escape(name) in pattern


def detect_account_changes(
    original_entry: str,
    final_entry: str,
    item_mappings: list[ItemMapping],
) -> list[AccountChange]:
    """Compare a generated entry with the version the user submitted.

    Each mapping is paired with the first posting in the final entry that
    uses the original account, names the item, or carries the same amount.
    """
    final_postings = parse_postings(final_entry)
    changes: list[AccountChange] = []

    for mapping in item_mappings:
        match = None
        for posting in final_postings:
            if (
                posting.account == mapping.original_account
                or mapping.item_name.lower() in posting.account.lower()
                or abs(posting.amount - mapping.amount) < AMOUNT_TOLERANCE
            ):
                match = posting
                break
        if match is not None and match.account != mapping.original_account:
            changes.append(AccountChange(
                item_name=mapping.item_name,
                original_account=mapping.original_account,
                final_account=match.account,
                amount=mapping.amount,
                currency=mapping.currency,
            ))
    return changes


class RuleLearner:
    """Persist corrections into ``rules/30-learned.json``.

    After a successful write the repository's entry in the rule cache is
    invalidated so the next resolution sees the new rule.
    """

    def __init__(
        self,
        store: FileStore,
        cache: RuleCache,
        clock: Clock | None = None,
    ) -> None:
        self._store = store
        self._cache = cache
        self._clock = clock or SystemClock()

    async def load_learned_document(self) -> RuleDocument:
        """Load the learned rule document (empty if it does not exist yet).

        Raises:
            LearningError: If the document exists but cannot be read or parsed.
        """
        path = RuleTier.LEARNED.path
        try:
            content = await self._store.read_file(path)
        except FileNotFoundInStore:
            return RuleDocument.empty(RuleTier.LEARNED)
        except StoreError as e:
            raise LearningError(f"Failed to load learned rules: {e}") from e

        try:
            return parse_rule_document(content, RuleTier.LEARNED)
        except (json.JSONDecodeError, ValueError) as e:
            # Refuse to overwrite a file we could not read.
            raise LearningError(f"Learned rules file is unreadable: {e}") from e

    async def learn(self, context: LearningContext) -> bool:
        """Learn from one correction. Returns False when nothing was learned.

        Raises:
            LearningError: If the learned rules cannot be loaded or saved.
        """
        if not should_learn(context.original_account, context.final_account, context.item_name):
            return False

        document = await self.load_learned_document()
        final_account = context.final_account.strip()

        existing = next(
            (rule for rule in document.items if _rule_matches_item(rule, context.item_name)),
            None,
        )
        if existing is not None:
            existing.target_account = final_account
            existing.usage_count += 1
            existing.confidence = min(round(existing.confidence + REINFORCEMENT_STEP, 4), 1.0)
            existing.learned = True
            rule = existing
            logger.info(
                "Reinforced learned rule %s -> %s (confidence %.2f)",
                rule.pattern, final_account, rule.confidence,
            )
        else:
            rule = RuleEntry(
                pattern=learned_pattern_for(context.item_name),
                target_account=final_account,
                priority=LEARNED_RULE_PRIORITY,
                learned=True,
                confidence=calculate_confidence(context.original_account, final_account),
                usage_count=1,
                created_at=self._clock.now(),
            )
            document.items.append(rule)
            logger.info(
                "Learned new rule %s -> %s (confidence %.2f)",
                rule.pattern, final_account, rule.confidence,
            )

        try:
            await self._store.write_file(
                RuleTier.LEARNED.path,
                dump_rule_document(document),
                f"learning: add rule for {rule.pattern}",
            )
        except StoreError as e:
            raise LearningError(f"Failed to save learned rules: {e}") from e

        self._cache.invalidate(self._store.identity)
        return True

    async def learn_from_edit(
        self,
        original_entry: str,
        final_entry: str,
        item_mappings: list[ItemMapping],
    ) -> int:
        """Learn from every account change in an edited entry.

        Returns the number of rules created or reinforced.
        """
        learned = 0
        for change in detect_account_changes(original_entry, final_entry, item_mappings):
            if await self.learn(LearningContext(
                original_account=change.original_account,
                final_account=change.final_account,
                item_name=change.item_name,
            )):
                learned += 1
        return learned
