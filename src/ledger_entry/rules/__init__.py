"""Layered account rules: loading, caching, resolution and learning."""

from ledger_entry.rules.types import (
    ACCOUNTS_PATH,
    AccountCatalog,
    AccountInfo,
    LoadedRules,
    MergedRuleSet,
    RuleDefaults,
    RuleDocument,
    RuleEntry,
    RuleKind,
    RuleTier,
)
from ledger_entry.rules.cache import RuleCache
from ledger_entry.rules.engine import RuleEngine, substitute_entity
from ledger_entry.rules.loader import (
    RuleStoreLoader,
    merge_rule_documents,
    parse_accounts_journal,
)
from ledger_entry.rules.learner import (
    AccountChange,
    ItemMapping,
    LearningContext,
    RuleLearner,
    detect_account_changes,
    should_learn,
)
from ledger_entry.rules.schema import dump_rule_document, parse_rule_document

__all__ = [
    # Types
    "ACCOUNTS_PATH",
    "AccountCatalog",
    "AccountInfo",
    "LoadedRules",
    "MergedRuleSet",
    "RuleDefaults",
    "RuleDocument",
    "RuleEntry",
    "RuleKind",
    "RuleTier",
    # Loading
    "RuleCache",
    "RuleStoreLoader",
    "merge_rule_documents",
    "parse_accounts_journal",
    "dump_rule_document",
    "parse_rule_document",
    # Resolution
    "RuleEngine",
    "substitute_entity",
    # Learning
    "AccountChange",
    "ItemMapping",
    "LearningContext",
    "RuleLearner",
    "detect_account_changes",
    "should_learn",
]
