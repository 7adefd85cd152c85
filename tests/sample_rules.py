"""Sample rule documents and account declarations shared by tests."""

from __future__ import annotations

BASE_RULES = {
    "version": "1.0",
    "defaults": {
        "entity": "Personal",
        "currency": "USD",
        "fallbackCredit": "Personal:Assets:Bank:Checking",
    },
    "items": [
        {"pattern": "(?i)groceries", "debit": "Personal:Expenses:Food:Groceries", "priority": 0},
    ],
    "merchants": [
        {"pattern": "(?i)starbucks", "defaultDebit": "Personal:Expenses:Food:Cafe"},
        {"pattern": "(?i)shell", "defaultDebit": "Personal:Expenses:Transport:Fuel"},
    ],
    "payments": [
        {"pattern": "(?i)^kbank$", "credit": "Personal:Assets:Bank:KBank"},
        {"pattern": "(?i)^visa$", "credit": "Personal:Liabilities:CreditCard:Visa"},
    ],
}

TEMPLATE_RULES = {
    "version": "1.0",
    "defaults": {},
    "items": [
        {"pattern": "(?i)coffee", "debit": "Personal:Expenses:Food:Coffee", "priority": 10},
        {"pattern": "(?i)croissant|bagel", "debit": "Personal:Expenses:Food:Bakery", "priority": 10},
    ],
    "merchants": [],
    "payments": [],
}

ACCOUNTS_JOURNAL = """\
; Account declarations
account Personal:Assets:Bank:Checking
account Personal:Assets:Bank:KBank
alias kbank = Personal:Assets:Bank:KBank
account Personal:Expenses:Food:Coffee
alias missing = Personal:Expenses:Nowhere
"""

COFFEE_ENTRY = """\
2025/09/15 Starbucks
    Personal:Expenses:Food:Coffee            10.00 USD
    Personal:Assets:Bank:Checking            -10.00 USD"""
