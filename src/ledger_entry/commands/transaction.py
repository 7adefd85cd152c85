"""The ``add`` command: free text in, ledger entry out."""

from __future__ import annotations

import logging

from ledger_entry.commands.types import (
    Command,
    CommandContext,
    CommandResult,
    GeneratedEntry,
    LogLevel,
    ValidationResult,
)
from ledger_entry.core.exceptions import ParseError, StoreError
from ledger_entry.ledger.formatter import format_entry
from ledger_entry.ledger.parser import parse_add_command
from ledger_entry.rules.engine import RuleEngine
from ledger_entry.rules.learner import ItemMapping

logger = logging.getLogger(__name__)


class AddCommand(Command):
    """Parse, resolve and format a transaction.

    The generated entry is returned for the user to edit and submit; it
    is not written anywhere by this command.
    """

    name = "add"
    description = "Add a transaction using natural language"
    usage = (
        "add <item> <amount> [currency] [, <item> <amount>] [@|at <merchant>] "
        "[with <payment>] [for <entity>] [on <date>] [memo <comment>]"
    )
    examples = (
        "add coffee 10",
        "add coffee 10 @ Starbucks",
        "add coffee 10 @ Starbucks with kbank",
        "add coffee 10, croissant 5 @ Starbucks",
        'add coffee 10 @ Starbucks memo "morning coffee"',
        "add lunch 25 @ McDonald's with visa for Personal on today",
    )

    def validate(self, args: list[str]) -> ValidationResult:
        if not args:
            return ValidationResult(
                False, "Please specify what to add. Example: add coffee 10 @ Starbucks"
            )
        return ValidationResult(True)

    async def execute(self, args: list[str], context: CommandContext) -> CommandResult:
        log = context.log
        try:
            command_text = "add " + (context.raw_args or " ".join(args))
            parsed = parse_add_command(command_text, context.clock)
        except ParseError as e:
            message = f"Parse error: {e}"
            log.error(message)
            if e.suggestion:
                log.info(e.suggestion)
            log.set_status(message, LogLevel.ERROR)
            return CommandResult(
                success=False,
                message=message,
                details=e.suggestion,
                data={"remainder": e.remainder} if e.remainder is not None else {},
            )

        try:
            loaded = await context.rules.load()
        except StoreError as e:
            message = f"Failed to load rules: {e}"
            log.error(message)
            log.set_status(message, LogLevel.ERROR)
            return CommandResult(success=False, message=message)

        rules = loaded.rules
        log.info(
            f"Loaded {len(rules.items)} item rules, {len(rules.merchants)} merchant rules, "
            f"{len(rules.payments)} payment rules"
        )

        resolved = RuleEngine(rules).resolve(parsed)
        log.info(f"Mapped to entity: {resolved.entity}, currency: {resolved.currency}")
        log.info(
            "Debit accounts: "
            + ", ".join(f"{d.account} ({d.amount} {d.currency})" for d in resolved.debit_lines)
        )
        log.info(f"Credit account: {resolved.credit_account}")

        entry = format_entry(resolved, date=parsed.date, clock=context.clock)
        context.last_generated = GeneratedEntry(
            text=entry,
            item_mappings=[
                ItemMapping(
                    item_name=line.source_item_name,
                    original_account=line.account,
                    amount=line.amount,
                    currency=line.currency,
                )
                for line in resolved.debit_lines
            ],
        )
        logger.debug("Generated entry for %s", parsed.to_dict())

        log.success("Generated ledger entry")
        log.info(entry)
        log.info("Edit the entry if needed, then submit it to save it to your repository.")
        message = "Natural language command parsed successfully. Generated entry shown above."
        log.set_status(message, LogLevel.SUCCESS)
        return CommandResult(
            success=True,
            message=message,
            data={
                "generated_entry": entry,
                "parsed_command": parsed.to_dict(),
                "debit_accounts": [d.account for d in resolved.debit_lines],
                "credit_account": resolved.credit_account,
            },
        )
