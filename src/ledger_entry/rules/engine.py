"""Rule resolution: map items, merchants and payment methods to accounts."""

from __future__ import annotations

import logging
import re

from ledger_entry.core.types import (
    DebitLine,
    ParsedAddCommand,
    ResolvedTransaction,
)
from ledger_entry.rules.types import MergedRuleSet, RuleEntry

logger = logging.getLogger(__name__)

GENERAL_EXPENSE_SUFFIX = "Expenses:General"


def substitute_entity(account: str, entity: str, default_entity: str) -> str:
    """Swap the leading account segment for ``entity``.

    Only applies when ``entity`` differs from the rule set's default
    entity. Accounts without a colon are returned unchanged.
    """
    if not entity or entity == default_entity or ":" not in account:
        return account
    _, rest = account.split(":", 1)
    return f"{entity}:{rest}"


def _compile(rules: list[RuleEntry], kind: str) -> list[tuple[RuleEntry, re.Pattern[str]]]:
    compiled: list[tuple[RuleEntry, re.Pattern[str]]] = []
    for rule in rules:
        try:
            compiled.append((rule, re.compile(rule.pattern, re.IGNORECASE)))
        except re.error as e:
            logger.warning("Invalid regex pattern in %s rule %r: %s", kind, rule.pattern, e)
    return compiled


class RuleEngine:
    """First-match-wins resolver over a merged rule set.

    Patterns are compiled once when the engine is built; a pattern that
    fails to compile never matches. ``resolve`` performs no I/O.
    """

    def __init__(self, rules: MergedRuleSet) -> None:
        self.rules = rules
        self._items = _compile(rules.items, "item")
        self._merchants = _compile(rules.merchants, "merchant")
        self._payments = _compile(rules.payments, "payment")

    @staticmethod
    def _first_match(
        compiled: list[tuple[RuleEntry, re.Pattern[str]]], text: str
    ) -> RuleEntry | None:
        for rule, pattern in compiled:
            if pattern.search(text):
                return rule
        return None

    def find_item_rule(self, item_name: str) -> RuleEntry | None:
        return self._first_match(self._items, item_name)

    def find_merchant_rule(self, merchant: str) -> RuleEntry | None:
        return self._first_match(self._merchants, merchant)

    def find_payment_rule(self, payment: str) -> RuleEntry | None:
        if not payment:
            return None
        return self._first_match(self._payments, payment)

    def resolve_debit_account(
        self, item_name: str, merchant: str | None, entity: str
    ) -> str:
        """Account for one item: item rule, then merchant rule, then general."""
        rule = self.find_item_rule(item_name)
        if rule is None and merchant:
            rule = self.find_merchant_rule(merchant)
        if rule is None:
            return f"{entity}:{GENERAL_EXPENSE_SUFFIX}"
        return substitute_entity(rule.target_account, entity, self.rules.defaults.entity)

    def resolve_credit_account(self, payment: str | None, entity: str) -> str:
        rule = self.find_payment_rule(payment or "")
        account = rule.target_account if rule else self.rules.defaults.fallback_credit_account
        return substitute_entity(account, entity, self.rules.defaults.entity)

    def resolve(self, parsed: ParsedAddCommand) -> ResolvedTransaction:
        """Resolve every item and the funding account of a parsed command."""
        defaults = self.rules.defaults
        entity = parsed.entity or defaults.entity
        currency = parsed.currency or defaults.currency

        debit_lines = [
            DebitLine(
                account=self.resolve_debit_account(item.name, parsed.merchant, entity),
                amount=item.amount,
                currency=item.currency or currency,
                source_item_name=item.name,
            )
            for item in parsed.items
        ]

        return ResolvedTransaction(
            debit_lines=debit_lines,
            credit_account=self.resolve_credit_account(parsed.payment, entity),
            currency=currency,
            entity=entity,
            merchant=parsed.merchant,
            memo=parsed.memo,
        )
