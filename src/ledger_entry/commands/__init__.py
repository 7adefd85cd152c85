"""Shell commands and their registry."""

from ledger_entry.commands.types import (
    Command,
    CommandContext,
    CommandResult,
    EventLog,
    GeneratedEntry,
    LogEntry,
    LogLevel,
    StatusMessage,
    ValidationResult,
)
from ledger_entry.commands.registry import CommandRegistry
from ledger_entry.commands.system import ClearCommand, HelpCommand, ValidateCommand
from ledger_entry.commands.files import (
    FilesCommand,
    JournalsCommand,
    LoadCommand,
    RulesCommand,
    SaveCommand,
)
from ledger_entry.commands.accounts import AccountsCommand, BalanceCommand
from ledger_entry.commands.transaction import AddCommand

BUILTIN_COMMANDS: tuple[type[Command], ...] = (
    HelpCommand,
    ClearCommand,
    ValidateCommand,
    BalanceCommand,
    AccountsCommand,
    FilesCommand,
    JournalsCommand,
    RulesCommand,
    LoadCommand,
    SaveCommand,
    AddCommand,
)


def create_default_registry() -> CommandRegistry:
    """Registry with every built-in command."""
    registry = CommandRegistry()
    for command_cls in BUILTIN_COMMANDS:
        registry.register(command_cls())
    return registry


__all__ = [
    "BUILTIN_COMMANDS",
    "Command",
    "CommandContext",
    "CommandRegistry",
    "CommandResult",
    "EventLog",
    "GeneratedEntry",
    "LogEntry",
    "LogLevel",
    "StatusMessage",
    "ValidationResult",
    "create_default_registry",
    "AccountsCommand",
    "AddCommand",
    "BalanceCommand",
    "ClearCommand",
    "FilesCommand",
    "HelpCommand",
    "JournalsCommand",
    "LoadCommand",
    "RulesCommand",
    "SaveCommand",
    "ValidateCommand",
]
