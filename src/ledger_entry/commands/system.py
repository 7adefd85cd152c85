"""System commands: help, clear, validate."""

from __future__ import annotations

from ledger_entry.commands.types import (
    Command,
    CommandContext,
    CommandResult,
    LogLevel,
)
from ledger_entry.core.exceptions import StoreError
from ledger_entry.ledger.intent import parse_ledger_entry
from ledger_entry.ledger.postings import split_entries
from ledger_entry.ledger.validator import EntryValidator


class HelpCommand(Command):
    name = "help"
    description = "Show available commands"
    usage = "help"

    async def execute(self, args: list[str], context: CommandContext) -> CommandResult:
        log = context.log
        log.info("Available commands:")
        commands = context.registry.all() if context.registry else []
        for command in sorted(commands, key=lambda c: c.name):
            names = ", ".join((command.name, *command.aliases))
            log.info(f"  {names:<16} {command.description}")
            if command.usage and command.usage != command.name:
                log.info(f"  {'':<16} usage: {command.usage}")

        log.info("")
        log.info("You can also type ledger transactions directly:")
        log.info("  2025/09/15 Example Transaction")
        log.info("      Personal:Expenses:Food    10.00 USD")
        log.info("      Personal:Assets:Bank     -10.00 USD")
        log.info("Transactions are saved to journals/YYYY-MM.journal.")
        log.info("Use zero-padded dates (2025/09/15, not 2025/9/15).")

        message = "Help displayed! Try 'files' to see available files."
        log.set_status(message)
        return CommandResult(success=True, message=message)


class ClearCommand(Command):
    name = "clear"
    description = "Clear terminal output"
    usage = "clear"

    async def execute(self, args: list[str], context: CommandContext) -> CommandResult:
        context.log.clear()
        return CommandResult(success=True, message="Terminal cleared")


class ValidateCommand(Command):
    """Validate every entry in the editor buffer, or in a stored file."""

    name = "validate"
    description = "Validate ledger entries"
    usage = "validate [filepath]"

    async def execute(self, args: list[str], context: CommandContext) -> CommandResult:
        log = context.log
        if args:
            path = " ".join(args)
            try:
                content = await context.store.read_file(path)
            except StoreError as e:
                message = f"Failed to load {path}: {e}"
                log.error(message)
                log.set_status(message, LogLevel.ERROR)
                return CommandResult(success=False, message=message)
            source = path
        else:
            content = context.buffer
            source = context.current_path or "buffer"

        if not content.strip():
            message = "Nothing to validate"
            log.warning(message)
            log.set_status(message, LogLevel.WARNING)
            return CommandResult(success=False, message=message)

        validator = EntryValidator(context.clock)
        checked = error_count = warning_count = 0
        for block in split_entries(content):
            entry = parse_ledger_entry(block)
            if entry is None:
                continue
            checked += 1
            validation = validator.validate(entry)
            for issue in validation.errors:
                error_count += 1
                log.error(f"{entry.date} {entry.description}: {issue.message}")
                if issue.suggestion:
                    log.info(f"    {issue.suggestion}")
            for issue in validation.warnings:
                warning_count += 1
                log.warning(f"{entry.date} {entry.description}: {issue.message}")

        data = {
            "source": source,
            "entries": checked,
            "errors": error_count,
            "warnings": warning_count,
        }
        if checked == 0:
            message = f"No ledger entries found in {source}"
            log.warning(message)
            log.set_status(message, LogLevel.WARNING)
            return CommandResult(success=False, message=message, data=data)
        if error_count:
            message = f"{error_count} error(s) in {checked} entries from {source}"
            log.set_status(message, LogLevel.ERROR)
            return CommandResult(success=False, message=message, data=data)

        message = f"All {checked} entries in {source} are valid"
        log.success(message)
        log.set_status(message, LogLevel.SUCCESS)
        return CommandResult(success=True, message=message, data=data)
