"""Account commands: balance and accounts."""

from __future__ import annotations

import logging
from collections import defaultdict
from decimal import Decimal

from ledger_entry.commands.types import (
    Command,
    CommandContext,
    CommandResult,
    LogLevel,
)
from ledger_entry.core.exceptions import StoreError
from ledger_entry.ledger.journal import JOURNALS_DIR, journal_files
from ledger_entry.ledger.postings import parse_journal_postings

logger = logging.getLogger(__name__)

NO_CURRENCY = ""


class BalanceCommand(Command):
    """Sum postings per account across all monthly journals."""

    name = "balance"
    aliases = ("bal",)
    description = "Show account balances"
    usage = "balance [account-prefix]"
    examples = ("balance", "bal Personal:Expenses")

    async def execute(self, args: list[str], context: CommandContext) -> CommandResult:
        prefix = " ".join(args)
        try:
            paths = journal_files(await context.store.list_files(f"{JOURNALS_DIR}/"))
        except StoreError as e:
            message = f"Failed to list journals: {e}"
            context.log.error(message)
            context.log.set_status(message, LogLevel.ERROR)
            return CommandResult(success=False, message=message)

        totals: dict[str, dict[str, Decimal]] = defaultdict(lambda: defaultdict(Decimal))
        for path in paths:
            try:
                content = await context.store.read_file(path)
            except StoreError as e:
                logger.warning("Skipping %s in balance: %s", path, e)
                context.log.warning(f"Skipped {path}: {e}")
                continue
            for posting in parse_journal_postings(content):
                if posting.account.startswith(prefix):
                    totals[posting.account][posting.currency or NO_CURRENCY] += posting.amount

        if not totals:
            message = "No postings found"
            context.log.info(message)
            context.log.set_status(message)
            return CommandResult(success=True, message=message, data={"balances": {}})

        context.log.success("Account Balances:")
        width = max(len(account) for account in totals)
        balances: dict[str, dict[str, str]] = {}
        for account in sorted(totals):
            balances[account] = {}
            for currency, amount in sorted(totals[account].items()):
                balances[account][currency] = f"{amount:.2f}"
                context.log.info(f"  {account.ljust(width)}  {amount:>12.2f} {currency}".rstrip())

        message = f"Balances for {len(balances)} accounts across {len(paths)} journals"
        context.log.set_status(message, LogLevel.SUCCESS)
        return CommandResult(success=True, message=message, data={"balances": balances})


class AccountsCommand(Command):
    name = "accounts"
    description = "List all accounts"
    usage = "accounts"

    async def execute(self, args: list[str], context: CommandContext) -> CommandResult:
        try:
            loaded = await context.rules.load()
        except StoreError as e:
            message = f"Failed to load accounts: {e}"
            context.log.error(message)
            context.log.set_status(message, LogLevel.ERROR)
            return CommandResult(success=False, message=message)

        accounts = loaded.accounts.accounts
        if not accounts:
            message = "No accounts declared in accounts.journal"
            context.log.info(message)
            context.log.set_status(message)
            return CommandResult(success=True, message=message, data={"accounts": []})

        context.log.info("Accounts:")
        for account in accounts:
            if account.aliases:
                context.log.info(f"  {account.canonical_name} (aliases: {', '.join(account.aliases)})")
            else:
                context.log.info(f"  {account.canonical_name}")

        message = f"{len(accounts)} accounts"
        context.log.set_status(message, LogLevel.SUCCESS)
        return CommandResult(
            success=True,
            message=message,
            data={"accounts": [a.canonical_name for a in accounts]},
        )
