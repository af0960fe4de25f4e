"""
Application Layer - Use cases, commands, and orchestration.

This layer contains:
- commands/: Individual tracker operations (AddComment, AddAttachment)
- sync/: Annotation, diff aggregation, composition, delivery and the
  synchronization orchestrator
"""

from .sync import SyncOrchestrator, SyncResult
from .commands import (
    Command,
    CommandResult,
    CommandBatch,
    AddCommentCommand,
    AddAttachmentCommand,
)

__all__ = [
    "SyncOrchestrator",
    "SyncResult",
    "Command",
    "CommandResult",
    "CommandBatch",
    "AddCommentCommand",
    "AddAttachmentCommand",
]
