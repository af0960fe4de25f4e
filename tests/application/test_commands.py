"""Tests for application commands."""

import pytest
from unittest.mock import Mock

from p4jira.application.commands import (
    CommandResult,
    CommandBatch,
    AddCommentCommand,
    AddAttachmentCommand,
)
from p4jira.core.domain.events import AttachmentAdded, CommentAdded, EventBus
from p4jira.core.ports.issue_tracker import IssueTrackerError


class TestCommandResult:
    """Tests for CommandResult."""

    def test_ok(self):
        result = CommandResult.ok("data")
        assert result.success
        assert result.data == "data"
        assert not result.dry_run

    def test_ok_dry_run(self):
        result = CommandResult.ok("data", dry_run=True)
        assert result.success
        assert result.dry_run

    def test_fail(self):
        result = CommandResult.fail("error message")
        assert not result.success
        assert result.error == "error message"

    def test_skip(self):
        result = CommandResult.skip("reason")
        assert result.success
        assert result.skipped


class TestAddCommentCommand:
    """Tests for AddCommentCommand."""

    @pytest.fixture
    def mock_tracker(self):
        tracker = Mock()
        tracker.add_comment.return_value = True
        return tracker

    def test_validate_missing_key(self, mock_tracker):
        cmd = AddCommentCommand(tracker=mock_tracker, issue_key="", body="Body")
        assert cmd.validate() is not None

    def test_validate_missing_body(self, mock_tracker):
        cmd = AddCommentCommand(tracker=mock_tracker, issue_key="PROJ-1", body="")
        assert cmd.validate() is not None

    def test_invalid_command_is_not_sent(self, mock_tracker):
        result = AddCommentCommand(tracker=mock_tracker, issue_key="", body="Body").execute()

        assert not result.success
        mock_tracker.add_comment.assert_not_called()

    def test_execute_dry_run(self, mock_tracker):
        bus = EventBus()
        cmd = AddCommentCommand(
            tracker=mock_tracker,
            issue_key="PROJ-1",
            body="Body",
            change_id=7,
            event_bus=bus,
            dry_run=True,
        )

        result = cmd.execute()

        assert result.success
        assert result.dry_run
        mock_tracker.add_comment.assert_not_called()
        assert bus.events_of(CommentAdded)[0].dry_run

    def test_execute_success(self, mock_tracker):
        bus = EventBus()
        cmd = AddCommentCommand(
            tracker=mock_tracker,
            issue_key="PROJ-1",
            body="Body",
            change_id=7,
            event_bus=bus,
        )

        result = cmd.execute()

        assert result.success
        mock_tracker.add_comment.assert_called_once_with("PROJ-1", "Body")
        event = bus.events_of(CommentAdded)[0]
        assert event.change_id == 7
        assert event.issue_key == "PROJ-1"

    def test_tracker_error_becomes_failed_result(self, mock_tracker):
        mock_tracker.add_comment.side_effect = IssueTrackerError("boom")
        bus = EventBus()

        result = AddCommentCommand(
            tracker=mock_tracker, issue_key="PROJ-1", body="Body", event_bus=bus
        ).execute()

        assert not result.success
        assert "boom" in result.error
        assert bus.get_history() == []


class TestAddAttachmentCommand:
    """Tests for AddAttachmentCommand."""

    @pytest.fixture
    def mock_tracker(self):
        tracker = Mock()
        tracker.add_attachment.return_value = True
        return tracker

    def test_validate_missing_filename(self, mock_tracker):
        cmd = AddAttachmentCommand(
            tracker=mock_tracker, issue_key="PROJ-1", filename="", content=b"x"
        )
        assert cmd.validate() is not None

    def test_execute_dry_run(self, mock_tracker):
        cmd = AddAttachmentCommand(
            tracker=mock_tracker,
            issue_key="PROJ-1",
            filename="change_7_diffs.diff",
            content=b"diff",
            dry_run=True,
        )

        result = cmd.execute()

        assert result.success
        assert result.dry_run
        mock_tracker.add_attachment.assert_not_called()

    def test_execute_success(self, mock_tracker):
        bus = EventBus()
        cmd = AddAttachmentCommand(
            tracker=mock_tracker,
            issue_key="PROJ-1",
            filename="change_7_diffs.diff",
            content=b"diff",
            change_id=7,
            event_bus=bus,
        )

        result = cmd.execute()

        assert result.success
        mock_tracker.add_attachment.assert_called_once_with(
            "PROJ-1", "change_7_diffs.diff", b"diff"
        )
        event = bus.events_of(AttachmentAdded)[0]
        assert event.size == 4


class TestCommandBatch:
    """Tests for CommandBatch."""

    def test_execute_all_success(self):
        cmd1 = Mock()
        cmd1.execute.return_value = CommandResult.ok("result1")

        cmd2 = Mock()
        cmd2.execute.return_value = CommandResult.ok("result2")

        batch = CommandBatch()
        batch.add(cmd1).add(cmd2)

        results = batch.execute_all()

        assert len(results) == 2
        assert batch.all_succeeded
        assert batch.executed_count == 2

    def test_execute_stop_on_error(self):
        cmd1 = Mock()
        cmd1.execute.return_value = CommandResult.fail("error")

        cmd2 = Mock()
        cmd2.execute.return_value = CommandResult.ok()

        batch = CommandBatch(stop_on_error=True)
        batch.add(cmd1).add(cmd2)

        results = batch.execute_all()

        assert len(results) == 1
        assert batch.failed_count == 1
        cmd2.execute.assert_not_called()

    def test_execute_continue_on_error(self):
        cmd1 = Mock()
        cmd1.execute.return_value = CommandResult.fail("error")

        cmd2 = Mock()
        cmd2.execute.return_value = CommandResult.ok()

        batch = CommandBatch(stop_on_error=False)
        batch.add(cmd1).add(cmd2)

        results = batch.execute_all()

        # A failed attachment must not stop the comment
        assert len(results) == 2
        assert batch.failed_count == 1
        assert batch.executed_count == 1

    def test_dry_run_results_not_counted_as_executed(self):
        cmd = Mock()
        cmd.execute.return_value = CommandResult.ok(dry_run=True)

        batch = CommandBatch().add(cmd)
        batch.execute_all()

        assert batch.all_succeeded
        assert batch.executed_count == 0
