"""
Issue Delivery - Post one change to every issue it references.

Each issue is an independent failure domain: a failed attachment does not
block the comment, and a failed issue does not block its siblings.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from ...core.domain.entities import ChangeId, DeliveryPlan, DiffBundle, IssueKey
from ...core.domain.events import DeliveryFailed, EventBus
from ...core.ports.issue_tracker import IssueHandle, IssueTrackerPort
from ..commands import AddAttachmentCommand, AddCommentCommand, CommandBatch, CommandResult


@dataclass
class DeliveryResult:
    """Outcome of delivering one change to one issue."""

    issue_key: IssueKey
    comment: CommandResult
    attachment: Optional[CommandResult] = None

    @property
    def success(self) -> bool:
        return self.comment.success and (self.attachment is None or self.attachment.success)

    @property
    def errors(self) -> list[str]:
        return [r.error for r in (self.attachment, self.comment) if r is not None and r.error]


@dataclass
class DeliveryReport:
    """Outcome of delivering one change to all of its issues."""

    change_id: ChangeId
    results: dict[IssueKey, DeliveryResult] = field(default_factory=dict)
    unresolved_keys: list[IssueKey] = field(default_factory=list)
    resolution_error: Optional[str] = None

    @property
    def resolution_failed(self) -> bool:
        return self.resolution_error is not None

    @property
    def failures(self) -> int:
        return sum(1 for r in self.results.values() if not r.success)

    @property
    def errors(self) -> list[str]:
        errors = [self.resolution_error] if self.resolution_error else []
        for result in self.results.values():
            errors.extend(result.errors)
        return errors


class IssueDelivery:
    """Resolves issue keys and runs the attach/comment commands per issue."""

    def __init__(self, tracker: IssueTrackerPort, event_bus: Optional[EventBus] = None):
        self.tracker = tracker
        self.event_bus = event_bus or EventBus()
        self.logger = logging.getLogger("IssueDelivery")

    def deliver(
        self,
        change_id: ChangeId,
        keys: Iterable[IssueKey],
        comment: str,
        plan: DeliveryPlan,
        bundle: DiffBundle,
        dry_run: bool = False,
    ) -> DeliveryReport:
        """
        Deliver a composed comment (and attachment) to every issue.

        Args:
            change_id: Change being delivered, for log context
            keys: Issue keys referenced by the change
            comment: Composed comment body
            plan: Inline or attachment decision
            bundle: Diffs, uploaded when the plan says attachment
            dry_run: Only log what would be sent

        Returns:
            DeliveryReport with one DeliveryResult per resolved issue
        """
        keys = list(keys)
        report = DeliveryReport(change_id=change_id)

        issues = self._resolve(change_id, keys, report)
        if issues is None:
            return report

        found = {issue.key for issue in issues}
        report.unresolved_keys = [key for key in keys if key not in found]
        for key in report.unresolved_keys:
            self.logger.warning(f"Change {change_id}: issue {key} not found in {self.tracker.name}")

        for issue in issues:
            report.results[issue.key] = self._deliver_to_issue(
                change_id, issue.key, comment, plan, bundle, dry_run
            )

        return report

    # -------------------------------------------------------------------------
    # Private Methods
    # -------------------------------------------------------------------------

    def _resolve(
        self,
        change_id: ChangeId,
        keys: list[IssueKey],
        report: DeliveryReport,
    ) -> Optional[list[IssueHandle]]:
        try:
            return self.tracker.resolve_issues(keys)
        except Exception as e:
            message = f"Change {change_id}: could not resolve issues {', '.join(keys)}: {e}"
            self.logger.error(message)
            report.resolution_error = message
            self.event_bus.publish(DeliveryFailed(
                change_id=change_id,
                operation="resolve",
                error=str(e),
            ))
            return None

    def _deliver_to_issue(
        self,
        change_id: ChangeId,
        issue_key: IssueKey,
        comment: str,
        plan: DeliveryPlan,
        bundle: DiffBundle,
        dry_run: bool,
    ) -> DeliveryResult:
        batch = CommandBatch(stop_on_error=False)

        if plan.is_attachment:
            batch.add(AddAttachmentCommand(
                tracker=self.tracker,
                issue_key=issue_key,
                filename=plan.attachment_name,
                content=bundle.text.encode("utf-8"),
                change_id=change_id,
                event_bus=self.event_bus,
                dry_run=dry_run,
            ))

        batch.add(AddCommentCommand(
            tracker=self.tracker,
            issue_key=issue_key,
            body=comment,
            change_id=change_id,
            event_bus=self.event_bus,
            dry_run=dry_run,
        ))

        results = batch.execute_all()
        attachment = results[0] if plan.is_attachment else None
        result = DeliveryResult(issue_key=issue_key, comment=results[-1], attachment=attachment)

        if attachment is not None and not attachment.success:
            self._failed(change_id, issue_key, "attach", attachment.error)
        if not result.comment.success:
            self._failed(change_id, issue_key, "comment", result.comment.error)
        elif not dry_run:
            self.logger.info(f"Comment made on {issue_key} for change {change_id}")

        return result

    def _failed(self, change_id: ChangeId, issue_key: IssueKey, operation: str, error: Optional[str]) -> None:
        self.event_bus.publish(DeliveryFailed(
            change_id=change_id,
            issue_key=issue_key,
            operation=operation,
            error=error or "",
        ))
