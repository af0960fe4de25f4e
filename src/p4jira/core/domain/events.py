"""
Domain Events - Things that happened during a sync run.

Events are immutable records of something that occurred.
They enable loose coupling and audit trails.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional
from uuid import uuid4

from .entities import ChangeId, IssueKey


@dataclass(frozen=True)
class DomainEvent:
    """Base class for all domain events."""

    event_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def event_type(self) -> str:
        """Get the event type name."""
        return self.__class__.__name__


@dataclass(frozen=True)
class SyncStarted(DomainEvent):
    """Event: A sync run started."""

    cursor: Optional[ChangeId] = None
    explicit: bool = False
    dry_run: bool = False


@dataclass(frozen=True)
class ChangeSkipped(DomainEvent):
    """Event: A change referenced no issue of the configured project."""

    change_id: ChangeId = 0


@dataclass(frozen=True)
class CommentAdded(DomainEvent):
    """Event: A change comment was posted to an issue."""

    change_id: ChangeId = 0
    issue_key: IssueKey = ""
    dry_run: bool = False


@dataclass(frozen=True)
class AttachmentAdded(DomainEvent):
    """Event: A diff attachment was uploaded to an issue."""

    change_id: ChangeId = 0
    issue_key: IssueKey = ""
    filename: str = ""
    size: int = 0
    dry_run: bool = False


@dataclass(frozen=True)
class DeliveryFailed(DomainEvent):
    """Event: Delivering a change to an issue (or resolving its keys) failed."""

    change_id: ChangeId = 0
    issue_key: Optional[IssueKey] = None
    operation: str = ""  # resolve, attach, comment
    error: str = ""


@dataclass(frozen=True)
class ChangeSynced(DomainEvent):
    """Event: All issues referenced by a change were attempted."""

    change_id: ChangeId = 0
    issue_keys: tuple = ()
    failures: int = 0


@dataclass(frozen=True)
class SyncCompleted(DomainEvent):
    """Event: A sync run completed."""

    changes_processed: int = 0
    changes_skipped: int = 0
    comments_added: int = 0
    attachments_added: int = 0
    checkpoint: Optional[ChangeId] = None
    errors: list = field(default_factory=list)


class EventBus:
    """
    Simple event bus for publishing and subscribing to domain events.

    This enables loose coupling between components.
    """

    def __init__(self):
        self._handlers: dict[type, list[Callable]] = {}
        self._history: list[DomainEvent] = []

    def subscribe(self, event_type: type, handler: Callable) -> None:
        """Subscribe a handler to an event type."""
        self._handlers.setdefault(event_type, []).append(handler)

    def publish(self, event: DomainEvent) -> None:
        """Publish an event to all subscribers."""
        self._history.append(event)

        for handler in self._handlers.get(type(event), []):
            handler(event)

        # Catch-all handlers
        for handler in self._handlers.get(DomainEvent, []):
            handler(event)

    def get_history(self) -> list[DomainEvent]:
        """Get all published events."""
        return self._history.copy()

    def events_of(self, event_type: type) -> list[DomainEvent]:
        """Get published events of one type."""
        return [e for e in self._history if isinstance(e, event_type)]

    def clear_history(self) -> None:
        """Clear event history."""
        self._history.clear()
