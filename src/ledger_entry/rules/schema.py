"""Pydantic models for the rule document JSON wire format.

The on-disk shape keeps the field names used by existing repositories::

    {
      "version": "1.0",
      "defaults": {"entity": "...", "currency": "...", "fallbackCredit": "..."},
      "items": [{"pattern": "...", "debit": "...", "priority": 10}],
      "merchants": [{"pattern": "...", "defaultDebit": "..."}],
      "payments": [{"pattern": "...", "credit": "..."}]
    }

Entries are validated one by one so a single malformed entry only drops
itself, not the whole document.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ledger_entry.rules.types import (
    RuleDefaults,
    RuleDocument,
    RuleEntry,
    RuleKind,
    RuleTier,
)

logger = logging.getLogger(__name__)


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class DefaultsModel(_WireModel):
    entity: str = ""
    currency: str = ""
    fallback_credit: str = Field(default="", alias="fallbackCredit")


class _RuleModel(_WireModel):
    pattern: str
    learned: bool = False
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    usage_count: int = Field(default=0, ge=0, alias="usageCount")
    created_at: datetime | None = Field(default=None, alias="createdAt")


class ItemRuleModel(_RuleModel):
    debit: str
    priority: int = 0


class MerchantRuleModel(_RuleModel):
    default_debit: str = Field(alias="defaultDebit")


class PaymentRuleModel(_RuleModel):
    credit: str


_MODELS: dict[RuleKind, type[_RuleModel]] = {
    RuleKind.ITEM: ItemRuleModel,
    RuleKind.MERCHANT: MerchantRuleModel,
    RuleKind.PAYMENT: PaymentRuleModel,
}

_SECTIONS: dict[RuleKind, str] = {
    RuleKind.ITEM: "items",
    RuleKind.MERCHANT: "merchants",
    RuleKind.PAYMENT: "payments",
}


def _target_of(model: _RuleModel) -> str:
    if isinstance(model, ItemRuleModel):
        return model.debit
    if isinstance(model, MerchantRuleModel):
        return model.default_debit
    if isinstance(model, PaymentRuleModel):
        return model.credit
    raise TypeError(f"Unsupported rule model: {type(model).__name__}")


def _entry_from_model(model: _RuleModel) -> RuleEntry:
    return RuleEntry(
        pattern=model.pattern,
        target_account=_target_of(model),
        priority=getattr(model, "priority", 0),
        learned=model.learned,
        confidence=model.confidence,
        usage_count=model.usage_count,
        created_at=model.created_at,
    )


def _parse_section(raw: Any, kind: RuleKind, source: str) -> list[RuleEntry]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        logger.warning("Ignoring %s in %s: expected a list", _SECTIONS[kind], source)
        return []

    entries: list[RuleEntry] = []
    model_cls = _MODELS[kind]
    for index, item in enumerate(raw):
        try:
            entries.append(_entry_from_model(model_cls.model_validate(item)))
        except ValidationError as e:
            logger.warning(
                "Skipping malformed %s rule #%d in %s: %s",
                kind.value, index, source, e.errors()[0].get("msg", e),
            )
    return entries


def parse_rule_document(content: str, tier: RuleTier) -> RuleDocument:
    """Parse rule JSON into a ``RuleDocument``.

    Raises:
        ValueError: If the content is not a JSON object.
    """
    data = json.loads(content)
    if not isinstance(data, dict):
        raise ValueError(f"{tier.path} must contain a JSON object")

    defaults_raw = data.get("defaults") or {}
    try:
        defaults = DefaultsModel.model_validate(defaults_raw)
    except ValidationError as e:
        logger.warning("Ignoring malformed defaults in %s: %s", tier.path, e)
        defaults = DefaultsModel()

    return RuleDocument(
        tier=tier,
        version=str(data.get("version", "1.0")),
        defaults=RuleDefaults(
            entity=defaults.entity.strip(),
            currency=defaults.currency.strip(),
            fallback_credit_account=defaults.fallback_credit.strip(),
        ),
        items=_parse_section(data.get("items"), RuleKind.ITEM, tier.path),
        merchants=_parse_section(data.get("merchants"), RuleKind.MERCHANT, tier.path),
        payments=_parse_section(data.get("payments"), RuleKind.PAYMENT, tier.path),
    )


def _entry_to_wire(entry: RuleEntry, kind: RuleKind) -> dict[str, Any]:
    base: dict[str, Any] = {"pattern": entry.pattern}
    if kind is RuleKind.ITEM:
        base["debit"] = entry.target_account
        base["priority"] = entry.priority
    elif kind is RuleKind.MERCHANT:
        base["defaultDebit"] = entry.target_account
    else:
        base["credit"] = entry.target_account
    if entry.learned:
        base["learned"] = True
        base["confidence"] = round(entry.confidence, 4)
        base["usageCount"] = entry.usage_count
        if entry.created_at is not None:
            base["createdAt"] = entry.created_at.isoformat()
    # Never write what we cannot read back.
    _MODELS[kind].model_validate(base)
    return base


def dump_rule_document(document: RuleDocument) -> str:
    """Serialize a ``RuleDocument`` back to pretty-printed JSON."""
    defaults: dict[str, str] = {}
    if document.defaults.entity:
        defaults["entity"] = document.defaults.entity
    if document.defaults.currency:
        defaults["currency"] = document.defaults.currency
    if document.defaults.fallback_credit_account:
        defaults["fallbackCredit"] = document.defaults.fallback_credit_account

    payload = {
        "version": document.version,
        "defaults": defaults,
        "items": [_entry_to_wire(e, RuleKind.ITEM) for e in document.items],
        "merchants": [_entry_to_wire(e, RuleKind.MERCHANT) for e in document.merchants],
        "payments": [_entry_to_wire(e, RuleKind.PAYMENT) for e in document.payments],
    }
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"
