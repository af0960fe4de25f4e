"""
Command Base - Explicit results for tracker mutations.

A command wraps exactly one tracker call. Whatever the tracker client
raises is caught inside execute() and turned into a failed CommandResult,
so callers match on results instead of catching exceptions.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from ...core.domain.events import EventBus


@dataclass
class CommandResult:
    """Outcome of a single command."""

    success: bool = True
    data: Any = None
    error: Optional[str] = None
    dry_run: bool = False
    skipped: bool = False

    @classmethod
    def ok(cls, data: Any = None, dry_run: bool = False) -> "CommandResult":
        return cls(success=True, data=data, dry_run=dry_run)

    @classmethod
    def fail(cls, error: str) -> "CommandResult":
        return cls(success=False, error=error)

    @classmethod
    def skip(cls, reason: str) -> "CommandResult":
        return cls(success=True, skipped=True, data=reason)


class Command(ABC):
    """
    A single tracker operation.

    Subclasses implement validate(), _describe() and _execute().
    """

    def __init__(self, event_bus: Optional[EventBus] = None, dry_run: bool = False):
        self.event_bus = event_bus
        self.dry_run = dry_run
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def name(self) -> str:
        return self.__class__.__name__

    def validate(self) -> Optional[str]:
        """Return an error message if the command cannot run, else None."""
        return None

    @abstractmethod
    def _describe(self) -> str:
        """Short human description used in log lines."""
        ...

    @abstractmethod
    def _execute(self) -> Any:
        """Perform the tracker call."""
        ...

    def _on_success(self, data: Any) -> None:
        """Publish events after a successful (or dry-run) execution."""
        pass

    def execute(self) -> CommandResult:
        """Validate and run the command, never raising."""
        error = self.validate()
        if error:
            self.logger.error(f"{self.name} invalid: {error}")
            return CommandResult.fail(error)

        if self.dry_run:
            self.logger.info(f"[DRY-RUN] Would {self._describe()}")
            self._on_success(None)
            return CommandResult.ok(dry_run=True)

        try:
            data = self._execute()
        except Exception as e:
            message = f"Failed to {self._describe()}: {e}"
            self.logger.error(message)
            return CommandResult.fail(message)

        self._on_success(data)
        return CommandResult.ok(data)


class CommandBatch:
    """Run several commands in order, optionally stopping at the first failure."""

    def __init__(self, stop_on_error: bool = False):
        self.stop_on_error = stop_on_error
        self.commands: list[Command] = []
        self.results: list[CommandResult] = []

    def add(self, command: Command) -> "CommandBatch":
        self.commands.append(command)
        return self

    def execute_all(self) -> list[CommandResult]:
        self.results = []
        for command in self.commands:
            result = command.execute()
            self.results.append(result)
            if not result.success and self.stop_on_error:
                break
        return self.results

    @property
    def all_succeeded(self) -> bool:
        return all(r.success for r in self.results)

    @property
    def executed_count(self) -> int:
        return sum(1 for r in self.results if r.success and not r.dry_run and not r.skipped)

    @property
    def failed_count(self) -> int:
        return sum(1 for r in self.results if not r.success)
