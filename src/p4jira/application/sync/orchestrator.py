"""
Sync Orchestrator - Coordinates a synchronization run.

This is the main entry point for sync operations.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from ...core.domain.entities import Change, ChangeId, DeliveryPlan, DiffBundle
from ...core.domain.events import (
    ChangeSkipped,
    ChangeSynced,
    EventBus,
    SyncCompleted,
    SyncStarted,
)
from ...core.ports.change_source import ChangeSourcePort
from ...core.ports.checkpoint_store import CheckpointStorePort
from ...core.ports.config_provider import SyncConfig
from ...core.ports.issue_tracker import IssueTrackerPort
from .annotator import DescriptionAnnotator
from .composer import CommentComposer, format_file_list
from .delivery import DeliveryReport, IssueDelivery
from .diffs import DiffAggregator, attachment_name, choose_delivery_plan


# Cursor used when neither an override nor a stored checkpoint exists
MINIMUM_CHANGE_ID = 0


@dataclass
class SyncResult:
    """Result of a sync run."""

    success: bool = True
    dry_run: bool = False
    explicit: bool = False

    # Cursor
    start_cursor: Optional[ChangeId] = None
    checkpoint: Optional[ChangeId] = None

    # Counts
    comments_added: int = 0
    attachments_added: int = 0

    # Details
    changes_processed: list[ChangeId] = field(default_factory=list)
    changes_skipped: list[ChangeId] = field(default_factory=list)
    deliveries: dict[ChangeId, DeliveryReport] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, error: str) -> None:
        """Add an error message."""
        self.errors.append(error)
        self.success = False

    def add_warning(self, warning: str) -> None:
        """Add a warning message."""
        self.warnings.append(warning)

    @property
    def changes_synced(self) -> list[ChangeId]:
        return [c for c in self.changes_processed if c not in self.changes_skipped]


class SyncOrchestrator:
    """
    Orchestrates one run from the change source to the issue tracker.

    Phases, per change in ascending order:
    1. Fetch and annotate the description (skip when no issue key matches)
    2. Fetch the file list and aggregate the diffs
    3. Decide inline vs attachment and compose the comment
    4. Deliver to each referenced issue
    5. Advance the checkpoint (normal runs only)

    Change source and checkpoint failures propagate and end the run.
    Tracker failures are recorded in the result and never do.
    """

    def __init__(
        self,
        source: ChangeSourcePort,
        tracker: IssueTrackerPort,
        checkpoint_store: CheckpointStorePort,
        project_key: str,
        config: SyncConfig,
        event_bus: Optional[EventBus] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            source: Change source port
            tracker: Issue tracker port
            checkpoint_store: Checkpoint store port
            project_key: Tracker project whose keys are looked for
            config: Sync configuration
            event_bus: Optional event bus
            logger: Optional logger handle
        """
        self.source = source
        self.tracker = tracker
        self.checkpoint_store = checkpoint_store
        self.config = config
        self.event_bus = event_bus or EventBus()
        self.logger = logger or logging.getLogger("SyncOrchestrator")

        self.annotator = DescriptionAnnotator(project_key, config.review_url_template)
        self.aggregator = DiffAggregator(source)
        self.composer = CommentComposer()
        self.delivery = IssueDelivery(tracker, self.event_bus)

    @property
    def verbosity(self) -> int:
        return self.config.verbosity

    # -------------------------------------------------------------------------
    # Main Entry Point
    # -------------------------------------------------------------------------

    def run(
        self,
        changes: Optional[Sequence[ChangeId]] = None,
        since: Optional[ChangeId] = None,
        progress_callback: Optional[Callable[[ChangeId, int, int], None]] = None,
    ) -> SyncResult:
        """
        Run one synchronization.

        Args:
            changes: Explicit change IDs to replay, in the given order.
                The checkpoint is never advanced for explicit runs.
            since: Cursor override; changes greater than this are processed
            progress_callback: Optional callback for progress updates

        Returns:
            SyncResult with run details

        Raises:
            ChangeSourceError: If the change source fails
            CheckpointError: If the checkpoint cannot be read or written
        """
        explicit = changes is not None
        result = SyncResult(dry_run=self.config.dry_run, explicit=explicit)
        persist = not explicit and not self.config.dry_run

        if explicit:
            change_ids = list(changes)
            self.logger.debug(f"Processing {len(change_ids)} explicitly requested change(s)")
        else:
            cursor = self._resolve_cursor(since)
            result.start_cursor = cursor
            result.checkpoint = cursor
            change_ids = self._discover(cursor)

        self.event_bus.publish(SyncStarted(
            cursor=result.start_cursor,
            explicit=explicit,
            dry_run=self.config.dry_run,
        ))

        total = len(change_ids)
        for index, change_id in enumerate(change_ids, start=1):
            if progress_callback:
                progress_callback(change_id, index, total)

            self._process_change(change_id, result)
            result.changes_processed.append(change_id)

            if persist:
                self.checkpoint_store.write(change_id)
                result.checkpoint = change_id
                self.logger.debug(f"Checkpoint advanced to {change_id}")

        self.event_bus.publish(SyncCompleted(
            changes_processed=len(result.changes_processed),
            changes_skipped=len(result.changes_skipped),
            comments_added=result.comments_added,
            attachments_added=result.attachments_added,
            checkpoint=result.checkpoint,
            errors=list(result.errors),
        ))

        return result

    # -------------------------------------------------------------------------
    # Discovery
    # -------------------------------------------------------------------------

    def _resolve_cursor(self, since: Optional[ChangeId]) -> ChangeId:
        if since is not None:
            self.logger.debug(f"Starting after change {since} (override)")
            return since

        stored = self.checkpoint_store.read()
        if stored is not None:
            self.logger.debug(f"Starting after change {stored} (checkpoint)")
            return stored

        self.logger.debug("No checkpoint found, starting from the beginning")
        return MINIMUM_CHANGE_ID

    def _discover(self, cursor: ChangeId) -> list[ChangeId]:
        listed = self.source.list_changes(cursor)
        change_ids = sorted({c for c in listed if c > cursor})

        self.logger.debug(f"Found {len(change_ids)} new change(s) after {cursor}")
        if self.verbosity >= 3:
            self.logger.debug(f"Changes: {change_ids}")

        return change_ids

    # -------------------------------------------------------------------------
    # Per-change Pipeline
    # -------------------------------------------------------------------------

    def _process_change(self, change_id: ChangeId, result: SyncResult) -> None:
        description = self.source.get_description(change_id)
        if self.verbosity >= 3:
            self.logger.debug(f"Change {change_id} description:\n{description}")

        annotation = self.annotator.annotate(description)
        if not annotation.is_relevant:
            if self.verbosity >= 1:
                self.logger.info(
                    f"Change {change_id} skipped: no {self.annotator.project_key} issue key found"
                )
            result.changes_skipped.append(change_id)
            self.event_bus.publish(ChangeSkipped(change_id=change_id))
            return

        change = Change(
            id=change_id,
            description=description,
            files=tuple(self.source.get_files(change_id)),
        )
        file_list = format_file_list(change.files)
        if self.verbosity >= 3:
            self.logger.debug(f"Change {change_id} files:\n{file_list}")

        bundle = self.aggregator.aggregate(change.files)
        plan, comment = self._compose(change, annotation.text, file_list, bundle)
        if self.verbosity >= 3:
            self.logger.debug(f"Change {change_id} comment:\n{comment}")

        report = self.delivery.deliver(
            change_id,
            annotation.keys,
            comment,
            plan,
            bundle,
            dry_run=self.config.dry_run,
        )
        self._record(report, result)

        self.event_bus.publish(ChangeSynced(
            change_id=change_id,
            issue_keys=annotation.keys,
            failures=report.failures + (1 if report.resolution_failed else 0),
        ))

    def _compose(
        self,
        change: Change,
        text: str,
        file_list: str,
        bundle: DiffBundle,
    ) -> tuple[DeliveryPlan, str]:
        """
        Pick the delivery plan and build the comment.

        An inline comment longer than the tracker accepts is rebuilt with
        the diffs attached instead.
        """
        plan = choose_delivery_plan(
            change.id,
            bundle,
            self.config.attachment_threshold,
            self.config.attachment_extension,
        )
        comment = self.composer.compose(text, file_list, bundle, plan)

        if not plan.is_attachment and not self.composer.fits(comment):
            self.logger.debug(
                f"Change {change.id}: inline comment is {len(comment)} characters, attaching diffs"
            )
            plan = DeliveryPlan.attachment(
                attachment_name(change.id, self.config.attachment_extension)
            )
            comment = self.composer.compose(text, file_list, bundle, plan)

        return plan, comment

    def _record(self, report: DeliveryReport, result: SyncResult) -> None:
        result.deliveries[report.change_id] = report

        for key in report.unresolved_keys:
            result.add_warning(f"Change {report.change_id}: issue {key} not found")

        for delivery in report.results.values():
            if delivery.comment.success and not delivery.comment.dry_run:
                result.comments_added += 1
            attachment = delivery.attachment
            if attachment is not None and attachment.success and not attachment.dry_run:
                result.attachments_added += 1

        for error in report.errors:
            result.add_error(error)
