"""File commands: files, journals, rules, load, save."""

from __future__ import annotations

import logging

from ledger_entry.commands.types import (
    Command,
    CommandContext,
    CommandResult,
    LogLevel,
    ValidationResult,
)
from ledger_entry.core.exceptions import StoreError
from ledger_entry.ledger.journal import (
    find_journal_file,
    is_journal_criteria,
    journal_files,
)
from ledger_entry.rules.types import ACCOUNTS_PATH

logger = logging.getLogger(__name__)

RULES_DIR = "rules/"


def _fail(context: CommandContext, message: str) -> CommandResult:
    context.log.error(message)
    context.log.set_status(message, LogLevel.ERROR)
    return CommandResult(success=False, message=message)


class _ListingCommand(Command):
    """List store paths under ``prefix``."""

    prefix = ""
    title = ""
    empty_message = "No files found"

    def select(self, paths: list[str]) -> list[str]:
        return paths

    async def execute(self, args: list[str], context: CommandContext) -> CommandResult:
        try:
            paths = self.select(await context.store.list_files(self.prefix))
        except StoreError as e:
            return _fail(context, f"Failed to list files: {e}")

        context.log.info(self.title)
        if not paths:
            context.log.info(f"  {self.empty_message}")
        for path in paths:
            context.log.info(f"  {path}")

        message = f"Found {len(paths)} files"
        context.log.set_status(message)
        return CommandResult(success=True, message=message, data={"paths": paths})


class FilesCommand(_ListingCommand):
    name = "files"
    description = "List all files in repository"
    usage = "files"
    title = "Repository files:"


class JournalsCommand(_ListingCommand):
    name = "journals"
    description = "List journal files in /journals folder"
    usage = "journals"
    prefix = "journals/"
    title = "Journal files in /journals folder:"
    empty_message = "No journal files found"

    def select(self, paths: list[str]) -> list[str]:
        return journal_files(paths)


class RulesCommand(_ListingCommand):
    name = "rules"
    description = "List rule files in /rules folder"
    usage = "rules"
    prefix = RULES_DIR
    title = "Rule files in /rules folder:"
    empty_message = "No rule files found"


class LoadCommand(Command):
    name = "load"
    description = "Load a file from repository or use -j flag for journal shortcuts"
    usage = "load <filepath> | load -j [current|latest|<month>|<month-name>|<year-month>]"
    examples = ("load main.journal", "load -j latest", "load -j sep", "load -j 2025-09")

    def validate(self, args: list[str]) -> ValidationResult:
        if not args:
            return ValidationResult(False, "Usage: load <filepath> or load -j <journal>")
        if args[0] == "-j":
            if len(args) < 2:
                return ValidationResult(
                    False,
                    "Usage: load -j [current|latest|<month>|<month-name>|<year-month>]",
                )
            if not is_journal_criteria(args[1]):
                return ValidationResult(
                    False,
                    "Invalid journal specifier. Use: current, latest, <month>, "
                    "<month-name>, or <year-month>",
                )
        return ValidationResult(True)

    async def execute(self, args: list[str], context: CommandContext) -> CommandResult:
        if args[0] == "-j":
            criteria = args[1]
            try:
                paths = await context.store.list_files("journals/")
            except StoreError as e:
                return _fail(context, f"Failed to list journals: {e}")
            path = find_journal_file(paths, criteria, context.clock.today())
            if path is None:
                return _fail(context, f"No journal file found for: {criteria}")
        else:
            path = " ".join(args)

        try:
            content = await context.store.read_file(path)
        except StoreError as e:
            return _fail(context, f"Failed to load file: {e}")

        context.buffer = content
        context.current_path = path
        message = f"Loaded file: {path}"
        context.log.success(message)
        context.log.set_status(message, LogLevel.SUCCESS)
        return CommandResult(success=True, message=message, data={"path": path})


class SaveCommand(Command):
    """Write the editor buffer back to its file.

    Saving a rule or account file drops the cached rules so the next
    ``add`` sees the change.
    """

    name = "save"
    description = "Save current file"
    usage = "save [commit message]"

    async def execute(self, args: list[str], context: CommandContext) -> CommandResult:
        path = context.current_path
        if not path:
            return _fail(context, "No file loaded. Use 'load <filepath>' first.")

        commit_message = " ".join(args) or f"Update {path}"
        try:
            await context.store.write_file(path, context.buffer, commit_message)
        except StoreError as e:
            return _fail(context, f"Failed to save {path}: {e}")

        if path.startswith(RULES_DIR) or path == ACCOUNTS_PATH:
            context.rules.invalidate()
            logger.debug("Rule cache invalidated after saving %s", path)

        message = f"File saved: {path}"
        context.log.success(message)
        context.log.set_status("File saved successfully!", LogLevel.SUCCESS)
        return CommandResult(success=True, message=message, data={"path": path})
