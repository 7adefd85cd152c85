"""Data types for the account rule system."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum


class RuleTier(IntEnum):
    """Precedence tier of a rule document. Higher wins."""

    BASE = 0
    TEMPLATE = 10
    USER = 20
    LEARNED = 30

    @property
    def path(self) -> str:
        return RULE_DOCUMENT_PATHS[self]


RULE_DOCUMENT_PATHS: dict[RuleTier, str] = {
    RuleTier.BASE: "rules/00-base.json",
    RuleTier.TEMPLATE: "rules/10-templates.json",
    RuleTier.USER: "rules/20-user.json",
    RuleTier.LEARNED: "rules/30-learned.json",
}

ACCOUNTS_PATH = "accounts.journal"

# Used only when no loaded document supplies a value.
DEFAULT_ENTITY = "Personal"
DEFAULT_CURRENCY = "USD"
DEFAULT_FALLBACK_CREDIT = "Personal:Assets:Bank:Checking"


class RuleKind(str, Enum):
    """What a rule pattern is matched against."""

    ITEM = "item"
    MERCHANT = "merchant"
    PAYMENT = "payment"


@dataclass
class RuleEntry:
    """A pattern → account mapping."""

    pattern: str
    target_account: str
    priority: int = 0
    learned: bool = False
    confidence: float = 1.0
    usage_count: int = 0
    created_at: datetime | None = None


@dataclass
class RuleDefaults:
    """Document-level defaults. Empty strings mean "not set"."""

    entity: str = ""
    currency: str = ""
    fallback_credit_account: str = ""


@dataclass
class RuleDocument:
    """One rule file (``rules/NN-*.json``)."""

    tier: RuleTier
    version: str = "1.0"
    defaults: RuleDefaults = field(default_factory=RuleDefaults)
    items: list[RuleEntry] = field(default_factory=list)
    merchants: list[RuleEntry] = field(default_factory=list)
    payments: list[RuleEntry] = field(default_factory=list)

    @classmethod
    def empty(cls, tier: RuleTier) -> "RuleDocument":
        return cls(tier=tier)


@dataclass
class MergedRuleSet:
    """Union of all rule documents, ordered for first-match-wins lookup."""

    defaults: RuleDefaults = field(
        default_factory=lambda: RuleDefaults(
            entity=DEFAULT_ENTITY,
            currency=DEFAULT_CURRENCY,
            fallback_credit_account=DEFAULT_FALLBACK_CREDIT,
        )
    )
    items: list[RuleEntry] = field(default_factory=list)
    merchants: list[RuleEntry] = field(default_factory=list)
    payments: list[RuleEntry] = field(default_factory=list)

    @property
    def rule_count(self) -> int:
        return len(self.items) + len(self.merchants) + len(self.payments)


@dataclass
class AccountInfo:
    """A declared account and its aliases."""

    canonical_name: str
    aliases: list[str] = field(default_factory=list)


@dataclass
class AccountCatalog:
    """Accounts declared in ``accounts.journal``."""

    accounts: list[AccountInfo] = field(default_factory=list)

    def find(self, name: str) -> AccountInfo | None:
        """Look up an account by canonical name or alias."""
        for account in self.accounts:
            if account.canonical_name == name or name in account.aliases:
                return account
        return None

    def __len__(self) -> int:
        return len(self.accounts)


@dataclass
class LoadedRules:
    """What the loader returns (and caches) per repository."""

    rules: MergedRuleSet
    accounts: AccountCatalog
