"""Command protocol, results and the user-facing event log."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from ledger_entry.core.protocols import FileStore
from ledger_entry.rules.learner import ItemMapping
from ledger_entry.rules.loader import RuleStoreLoader
from ledger_entry.temporal.clock import Clock, SystemClock

if TYPE_CHECKING:
    from ledger_entry.commands.registry import CommandRegistry


class LogLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class LogEntry:
    level: LogLevel
    message: str
    timestamp: datetime


@dataclass
class StatusMessage:
    text: str
    level: LogLevel = LogLevel.INFO


class EventLog:
    """Stream of user-facing log entries plus a single status message.

    This is what an interactive shell renders; diagnostic logging goes
    through the ``logging`` module instead.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or SystemClock()
        self.entries: list[LogEntry] = []
        self.status: StatusMessage | None = None

    def add(self, level: LogLevel, message: str) -> LogEntry:
        entry = LogEntry(level=level, message=message, timestamp=self._clock.now())
        self.entries.append(entry)
        return entry

    def info(self, message: str) -> LogEntry:
        return self.add(LogLevel.INFO, message)

    def success(self, message: str) -> LogEntry:
        return self.add(LogLevel.SUCCESS, message)

    def warning(self, message: str) -> LogEntry:
        return self.add(LogLevel.WARNING, message)

    def error(self, message: str) -> LogEntry:
        return self.add(LogLevel.ERROR, message)

    def set_status(self, text: str, level: LogLevel = LogLevel.INFO) -> None:
        self.status = StatusMessage(text=text, level=level)

    def clear(self) -> None:
        self.entries.clear()
        self.status = None

    def messages(self, level: LogLevel | None = None) -> list[str]:
        return [e.message for e in self.entries if level is None or e.level is level]


@dataclass
class ValidationResult:
    valid: bool
    error: str | None = None


@dataclass
class CommandResult:
    """Uniform outcome of a dispatched command."""

    success: bool
    message: str | None = None
    details: str | None = None
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"success": self.success}
        if self.message:
            result["message"] = self.message
        if self.details:
            result["details"] = self.details
        if self.data:
            result["data"] = self.data
        return result


@dataclass
class GeneratedEntry:
    """An entry produced by ``add``, kept so a later edit can be learned from."""

    text: str
    item_mappings: list[ItemMapping]


@dataclass
class CommandContext:
    """Everything a command may touch.

    ``buffer`` and ``current_path`` model the editor: ``load`` fills them,
    ``save`` and ``validate`` read them.
    ``raw_args`` holds the unsplit arguments of the running command.
    """

    store: FileStore
    rules: RuleStoreLoader
    log: EventLog
    clock: Clock = field(default_factory=SystemClock)
    registry: "CommandRegistry | None" = None
    buffer: str = ""
    current_path: str | None = None
    last_generated: GeneratedEntry | None = None
    raw_args: str = ""


class Command(ABC):
    """Base class for shell commands.

    Subclasses set the class attributes and implement ``execute``.
    ``validate`` runs first; a failed validation short-circuits.
    """

    name: str = ""
    aliases: tuple[str, ...] = ()
    description: str = ""
    usage: str = ""
    examples: tuple[str, ...] = ()

    def validate(self, args: list[str]) -> ValidationResult:
        return ValidationResult(valid=True)

    @abstractmethod
    async def execute(self, args: list[str], context: CommandContext) -> CommandResult:
        ...
