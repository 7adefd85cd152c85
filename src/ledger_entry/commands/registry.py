"""Command registry and dispatcher."""

from __future__ import annotations

import logging

from ledger_entry.commands.types import (
    Command,
    CommandContext,
    CommandResult,
    LogLevel,
)

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Named commands with alias lookup.

    ``execute`` never raises: unknown names, failed validation and
    exceptions from a command all come back as a failed ``CommandResult``.
    """

    def __init__(self) -> None:
        self._commands: dict[str, Command] = {}
        self._lookup: dict[str, Command] = {}

    def register(self, command: Command) -> None:
        """Register a command under its name and aliases.

        Raises:
            ValueError: If the name or any alias is already taken.
        """
        if not command.name:
            raise ValueError(f"{type(command).__name__} has no name")
        keys = [command.name.lower(), *(alias.lower() for alias in command.aliases)]
        for key in keys:
            if key in self._lookup:
                raise ValueError(f"Command name already registered: {key}")
        self._commands[command.name.lower()] = command
        for key in keys:
            self._lookup[key] = command

    def get(self, name: str) -> Command | None:
        return self._lookup.get(name.lower())

    def all(self) -> list[Command]:
        return list(self._commands.values())

    def names(self) -> set[str]:
        """Every name and alias that dispatches to a command."""
        return set(self._lookup)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._lookup

    def __len__(self) -> int:
        return len(self._commands)

    async def execute(
        self,
        name: str,
        args: list[str],
        context: CommandContext,
        raw_args: str | None = None,
    ) -> CommandResult:
        context.raw_args = " ".join(args) if raw_args is None else raw_args
        command = self.get(name)
        if command is None:
            result = CommandResult(
                success=False,
                message=f"Unknown command: {name}. Type 'help' for available commands.",
            )
            context.log.error(result.message)
            context.log.set_status(result.message, LogLevel.ERROR)
            return result

        validation = command.validate(args)
        if not validation.valid:
            message = validation.error or f"Invalid arguments. Usage: {command.usage}"
            context.log.error(message)
            context.log.set_status(message, LogLevel.ERROR)
            return CommandResult(success=False, message=message)

        try:
            return await command.execute(args, context)
        except Exception as e:
            logger.exception("Command %s failed", command.name)
            message = f"Command '{command.name}' failed: {e}"
            context.log.error(message)
            context.log.set_status(message, LogLevel.ERROR)
            return CommandResult(success=False, message=message)
