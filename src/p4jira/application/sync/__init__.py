"""
Sync Module - Orchestration of synchronization from changes to issues.
"""

from .annotator import Annotation, DescriptionAnnotator
from .composer import CommentComposer, format_file_list, format_size
from .delivery import DeliveryReport, DeliveryResult, IssueDelivery
from .diffs import DiffAggregator, attachment_name, choose_delivery_plan
from .orchestrator import SyncOrchestrator, SyncResult

__all__ = [
    "Annotation",
    "DescriptionAnnotator",
    "CommentComposer",
    "format_file_list",
    "format_size",
    "DeliveryReport",
    "DeliveryResult",
    "IssueDelivery",
    "DiffAggregator",
    "attachment_name",
    "choose_delivery_plan",
    "SyncOrchestrator",
    "SyncResult",
]
