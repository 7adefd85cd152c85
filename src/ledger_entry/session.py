"""The input loop behind the interactive shell.

Raw input is classified and then either dispatched to a command or, for
a ledger entry, validated and appended to its monthly journal. When the
submitted entry is an edited version of the last ``add`` output, the
edit is learned from in a background task.
"""

from __future__ import annotations

import asyncio
import logging

from ledger_entry.commands import (
    CommandContext,
    CommandRegistry,
    CommandResult,
    EventLog,
    GeneratedEntry,
    LogLevel,
    create_default_registry,
)
from ledger_entry.core.exceptions import (
    EntryValidationError,
    LearningError,
    StoreError,
)
from ledger_entry.core.protocols import FileStore
from ledger_entry.core.types import ParsedLedgerEntry
from ledger_entry.ledger.intent import IntentClassifier, IntentKind
from ledger_entry.ledger.journal import JournalAppender
from ledger_entry.ledger.validator import EntryValidator
from ledger_entry.rules.cache import RuleCache
from ledger_entry.rules.learner import RuleLearner
from ledger_entry.rules.loader import RuleStoreLoader
from ledger_entry.temporal.clock import Clock, SystemClock

logger = logging.getLogger(__name__)

INVALID_INPUT_MESSAGE = (
    "Invalid input. Type 'help' for commands, or enter a ledger transaction "
    "starting with a zero-padded date (YYYY/MM/DD)."
)


class Session:
    """One user's session against one store.

    Only one ``handle`` call should run at a time. Learning tasks run in
    the background between inputs; ``handle`` first waits for any still
    pending, so a rule learned from one entry applies to the next command.

    Example:
        >>> session = Session(InMemoryFileStore())
        >>> result = await session.handle("add coffee 10 @ Starbucks")
        >>> result.data["generated_entry"]
    """

    def __init__(
        self,
        store: FileStore,
        cache: RuleCache | None = None,
        clock: Clock | None = None,
        registry: CommandRegistry | None = None,
        learning_enabled: bool = True,
    ) -> None:
        self.store = store
        self.clock = clock or SystemClock()
        self.cache = cache if cache is not None else RuleCache()
        self.registry = registry or create_default_registry()
        self.log = EventLog(self.clock)
        self.loader = RuleStoreLoader(store, self.cache)
        self.learner = RuleLearner(store, self.cache, self.clock)
        self.appender = JournalAppender(store, self.clock)
        self.validator = EntryValidator(self.clock)
        self.classifier = IntentClassifier(self.registry.names())
        self.learning_enabled = learning_enabled
        self.context = CommandContext(
            store=store,
            rules=self.loader,
            log=self.log,
            clock=self.clock,
            registry=self.registry,
        )
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending_tasks(self) -> int:
        return len(self._tasks)

    async def handle(self, text: str) -> CommandResult:
        """Handle one unit of input (a command line or a whole entry)."""
        await self.drain()
        intent = self.classifier.classify(text)

        if intent.kind is IntentKind.COMMAND:
            return await self.registry.execute(
                intent.command_name or "",
                intent.args or [],
                self.context,
                raw_args=intent.raw_args,
            )

        if intent.kind is IntentKind.LEDGER_ENTRY and intent.entry is not None:
            return await self.submit_entry(intent.entry)

        if not text.strip():
            return CommandResult(success=False)

        self.log.error(INVALID_INPUT_MESSAGE)
        self.log.set_status("Invalid input", LogLevel.ERROR)
        return CommandResult(success=False, message=INVALID_INPUT_MESSAGE)

    async def submit_entry(self, entry: ParsedLedgerEntry) -> CommandResult:
        """Validate an entry and append it to its monthly journal."""
        try:
            validation = self.validator.check(entry)
        except EntryValidationError as e:
            self.log.error("Validation failed:")
            for error in e.errors:
                self.log.error(f"  {error}")
            message = "Transaction validation failed. Please fix the errors above."
            self.log.set_status(message, LogLevel.ERROR)
            return CommandResult(success=False, message=message, data={"errors": e.errors})

        for warning in validation.warnings:
            self.log.warning(warning.message)

        try:
            result = await self.appender.append(entry)
        except StoreError as e:
            message = f"Failed to save transaction: {e}"
            self.log.error(message)
            self.log.set_status("Failed to save transaction", LogLevel.ERROR)
            return CommandResult(success=False, message=message)

        for warning in result.warnings:
            self.log.warning(warning)
        if result.manifest_updated:
            self.log.info(f"Updated main.journal to include {result.journal_path}")
        message = f"Transaction saved to {result.journal_path}"
        self.log.success(message)
        self.log.set_status(message, LogLevel.SUCCESS)

        generated = self.context.last_generated
        self.context.last_generated = None
        if generated is not None and self.learning_enabled:
            if generated.text.strip() != entry.full_content.strip():
                self._spawn_learning(generated, entry.full_content)

        return CommandResult(
            success=True,
            message=message,
            data={
                "journal_path": result.journal_path,
                "created": result.created,
                "manifest_updated": result.manifest_updated,
                "warnings": list(result.warnings),
            },
        )

    def _spawn_learning(self, generated: GeneratedEntry, final_entry: str) -> None:
        task = asyncio.create_task(self._learn(generated, final_entry))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _learn(self, generated: GeneratedEntry, final_entry: str) -> None:
        try:
            learned = await self.learner.learn_from_edit(
                generated.text,
                final_entry,
                generated.item_mappings,
            )
        except LearningError as e:
            logger.warning("Learning from edit failed: %s", e)
            self.log.warning(f"Could not save learned rule: {e}")
            return
        except Exception:
            logger.exception("Unexpected error while learning from edit")
            return
        if learned:
            self.log.info(f"Learned {learned} rule(s) from your edit")

    async def drain(self) -> None:
        """Wait for all background learning tasks to finish."""
        while self._tasks:
            tasks = list(self._tasks)
            await asyncio.gather(*tasks)
            self._tasks.difference_update(tasks)
