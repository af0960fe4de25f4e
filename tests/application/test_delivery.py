"""Tests for issue delivery."""

import pytest

from p4jira.application.sync.delivery import IssueDelivery
from p4jira.core.domain.entities import DeliveryPlan, DiffBundle
from p4jira.core.domain.events import DeliveryFailed, EventBus
from p4jira.core.ports.issue_tracker import (
    IssueHandle,
    IssueResolutionError,
    IssueTrackerError,
)


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def delivery(tracker, bus):
    return IssueDelivery(tracker, bus)


@pytest.fixture
def bundle():
    return DiffBundle(("diff text",))


class TestInlineDelivery:
    """Tests for comments with inline diffs."""

    def test_comment_posted_to_every_issue(self, delivery, tracker, bundle):
        report = delivery.deliver(10, ["PROJ-1", "PROJ-2"], "body", DeliveryPlan.inline(), bundle)

        assert tracker.add_comment.call_count == 2
        tracker.add_comment.assert_any_call("PROJ-1", "body")
        tracker.add_comment.assert_any_call("PROJ-2", "body")
        tracker.add_attachment.assert_not_called()
        assert report.failures == 0
        assert report.errors == []

    def test_keys_resolved_in_one_call(self, delivery, tracker, bundle):
        delivery.deliver(10, ["PROJ-1", "PROJ-2"], "body", DeliveryPlan.inline(), bundle)
        tracker.resolve_issues.assert_called_once_with(["PROJ-1", "PROJ-2"])

    def test_failed_issue_does_not_block_others(self, delivery, tracker, bus, bundle):
        def add_comment(key, body):
            if key == "PROJ-1":
                raise IssueTrackerError("comment rejected", issue_key=key)
            return True

        tracker.add_comment.side_effect = add_comment

        report = delivery.deliver(10, ["PROJ-1", "PROJ-2"], "body", DeliveryPlan.inline(), bundle)

        assert not report.results["PROJ-1"].success
        assert report.results["PROJ-2"].success
        assert report.failures == 1
        assert len(report.errors) == 1
        failed = bus.events_of(DeliveryFailed)
        assert [(e.issue_key, e.operation) for e in failed] == [("PROJ-1", "comment")]

    def test_unknown_keys_reported_and_skipped(self, delivery, tracker, bundle):
        tracker.resolve_issues.side_effect = lambda keys: [IssueHandle(key="PROJ-2")]

        report = delivery.deliver(10, ["PROJ-1", "PROJ-2"], "body", DeliveryPlan.inline(), bundle)

        assert report.unresolved_keys == ["PROJ-1"]
        tracker.add_comment.assert_called_once_with("PROJ-2", "body")


class TestAttachmentDelivery:
    """Tests for comments with attached diffs."""

    @pytest.fixture
    def plan(self):
        return DeliveryPlan.attachment("change_10_diffs.diff")

    def test_attachment_uploaded_before_comment(self, delivery, tracker, plan, bundle):
        order = []
        tracker.add_attachment.side_effect = lambda *a: order.append("attach") or True
        tracker.add_comment.side_effect = lambda *a: order.append("comment") or True

        report = delivery.deliver(10, ["PROJ-1"], "body", plan, bundle)

        assert order == ["attach", "comment"]
        tracker.add_attachment.assert_called_once_with(
            "PROJ-1", "change_10_diffs.diff", b"diff text"
        )
        assert report.results["PROJ-1"].success

    def test_failed_attachment_still_posts_comment(self, delivery, tracker, bus, plan, bundle):
        tracker.add_attachment.side_effect = IssueTrackerError("upload failed")

        report = delivery.deliver(10, ["PROJ-1"], "body", plan, bundle)

        tracker.add_comment.assert_called_once_with("PROJ-1", "body")
        result = report.results["PROJ-1"]
        assert result.comment.success
        assert not result.attachment.success
        assert not result.success
        assert [e.operation for e in bus.events_of(DeliveryFailed)] == ["attach"]


class TestResolutionFailure:
    """Tests for failed key resolution."""

    def test_no_mutations_when_resolution_fails(self, delivery, tracker, bus, bundle):
        tracker.resolve_issues.side_effect = IssueResolutionError("search failed", keys=["PROJ-1"])

        report = delivery.deliver(10, ["PROJ-1"], "body", DeliveryPlan.inline(), bundle)

        assert report.resolution_failed
        assert "search failed" in report.resolution_error
        assert report.results == {}
        tracker.add_comment.assert_not_called()
        assert bus.events_of(DeliveryFailed)[0].operation == "resolve"

    def test_unexpected_resolution_error_is_contained(self, delivery, tracker, bundle):
        tracker.resolve_issues.side_effect = RuntimeError("socket closed")

        report = delivery.deliver(10, ["PROJ-1"], "body", DeliveryPlan.inline(), bundle)

        assert report.resolution_failed


def test_dry_run_makes_no_mutations(delivery, tracker, bundle):
    report = delivery.deliver(
        10,
        ["PROJ-1"],
        "body",
        DeliveryPlan.attachment("change_10_diffs.diff"),
        bundle,
        dry_run=True,
    )

    tracker.add_comment.assert_not_called()
    tracker.add_attachment.assert_not_called()
    assert report.results["PROJ-1"].comment.dry_run
