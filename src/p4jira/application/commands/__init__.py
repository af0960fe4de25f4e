"""
Commands - Individual tracker operations.

Commands represent write operations and can be:
- Executed (or previewed in dry-run)
- Logged for audit
- Matched on through their CommandResult
"""

from .base import Command, CommandResult, CommandBatch
from .issue_commands import AddCommentCommand, AddAttachmentCommand

__all__ = [
    "Command",
    "CommandResult",
    "CommandBatch",
    "AddCommentCommand",
    "AddAttachmentCommand",
]
