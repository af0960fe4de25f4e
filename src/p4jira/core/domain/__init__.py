"""
Domain - Entities, value types and events of the change sync.
"""

from .entities import (
    ChangeId,
    IssueKey,
    FileRevision,
    Change,
    DiffBundle,
    DeliveryMode,
    DeliveryPlan,
)
from .events import (
    DomainEvent,
    SyncStarted,
    ChangeSkipped,
    CommentAdded,
    AttachmentAdded,
    DeliveryFailed,
    ChangeSynced,
    SyncCompleted,
    EventBus,
)

__all__ = [
    "ChangeId",
    "IssueKey",
    "FileRevision",
    "Change",
    "DiffBundle",
    "DeliveryMode",
    "DeliveryPlan",
    "DomainEvent",
    "SyncStarted",
    "ChangeSkipped",
    "CommentAdded",
    "AttachmentAdded",
    "DeliveryFailed",
    "ChangeSynced",
    "SyncCompleted",
    "EventBus",
]
