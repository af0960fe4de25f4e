"""
Issue Commands - Comment and attachment delivery to one issue.
"""

from typing import Any, Optional

from ...core.domain.entities import ChangeId
from ...core.domain.events import AttachmentAdded, CommentAdded, EventBus
from ...core.ports.issue_tracker import IssueTrackerPort
from .base import Command


class AddCommentCommand(Command):
    """Post a change comment to an issue."""

    def __init__(
        self,
        tracker: IssueTrackerPort,
        issue_key: str,
        body: str,
        change_id: ChangeId = 0,
        event_bus: Optional[EventBus] = None,
        dry_run: bool = False,
    ):
        super().__init__(event_bus=event_bus, dry_run=dry_run)
        self.tracker = tracker
        self.issue_key = issue_key
        self.body = body
        self.change_id = change_id

    def validate(self) -> Optional[str]:
        if not self.issue_key:
            return "Issue key is required"
        if not self.body:
            return "Comment body is required"
        return None

    def _describe(self) -> str:
        return f"add comment for change {self.change_id} to {self.issue_key}"

    def _execute(self) -> Any:
        return self.tracker.add_comment(self.issue_key, self.body)

    def _on_success(self, data: Any) -> None:
        if self.event_bus:
            self.event_bus.publish(CommentAdded(
                change_id=self.change_id,
                issue_key=self.issue_key,
                dry_run=self.dry_run,
            ))


class AddAttachmentCommand(Command):
    """Upload the diffs of a change as an attachment to an issue."""

    def __init__(
        self,
        tracker: IssueTrackerPort,
        issue_key: str,
        filename: str,
        content: bytes,
        change_id: ChangeId = 0,
        event_bus: Optional[EventBus] = None,
        dry_run: bool = False,
    ):
        super().__init__(event_bus=event_bus, dry_run=dry_run)
        self.tracker = tracker
        self.issue_key = issue_key
        self.filename = filename
        self.content = content
        self.change_id = change_id

    def validate(self) -> Optional[str]:
        if not self.issue_key:
            return "Issue key is required"
        if not self.filename:
            return "Attachment name is required"
        return None

    def _describe(self) -> str:
        return (
            f"attach {self.filename} ({len(self.content)} bytes) "
            f"for change {self.change_id} to {self.issue_key}"
        )

    def _execute(self) -> Any:
        return self.tracker.add_attachment(self.issue_key, self.filename, self.content)

    def _on_success(self, data: Any) -> None:
        if self.event_bus:
            self.event_bus.publish(AttachmentAdded(
                change_id=self.change_id,
                issue_key=self.issue_key,
                filename=self.filename,
                size=len(self.content),
                dry_run=self.dry_run,
            ))
