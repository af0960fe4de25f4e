"""
Diff Aggregator - Collect per-file diffs and pick the delivery mode.
"""

import logging
from typing import Iterable

from ...core.domain.entities import ChangeId, DeliveryPlan, DiffBundle, FileRevision
from ...core.ports.change_source import ChangeSourcePort


def added_file_marker(file: FileRevision) -> str:
    """Block used in place of a diff for a newly added file."""
    return f"==== {file.path}#{file.revision} (added) ===="


def attachment_name(change_id: ChangeId, extension: str = "diff") -> str:
    return f"change_{change_id}_diffs.{extension.lstrip('.')}"


def choose_delivery_plan(
    change_id: ChangeId,
    bundle: DiffBundle,
    threshold: int,
    extension: str = "diff",
) -> DeliveryPlan:
    """
    Decide whether the diffs of a change go inline or as an attachment.

    A bundle of `threshold` bytes or more is attached.
    """
    if bundle.total_byte_length >= threshold:
        return DeliveryPlan.attachment(attachment_name(change_id, extension))
    return DeliveryPlan.inline()


class DiffAggregator:
    """Builds the DiffBundle of a change from its file list."""

    def __init__(self, source: ChangeSourcePort):
        self.source = source
        self.logger = logging.getLogger("DiffAggregator")

    def aggregate(self, files: Iterable[FileRevision]) -> DiffBundle:
        """
        Fetch one diff block per file, in file-list order.

        Added files (revision 1) get a marker block without a diff call.

        Raises:
            ChangeSourceError: If a diff cannot be fetched
        """
        blocks = []
        for file in files:
            if file.is_added:
                blocks.append(added_file_marker(file))
                continue

            diff = self.source.get_diff(file.path, file.previous_revision, file.revision)
            blocks.append(diff.rstrip("\n"))

        bundle = DiffBundle(per_file_diffs=tuple(blocks))
        self.logger.debug(f"Aggregated {len(blocks)} diff block(s), {bundle.total_byte_length} bytes")
        return bundle
