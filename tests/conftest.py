"""Shared fixtures for p4jira tests."""

from typing import Optional
from unittest.mock import Mock

import pytest

from p4jira.core.domain.entities import FileRevision
from p4jira.core.ports.change_source import ChangeSourcePort
from p4jira.core.ports.checkpoint_store import CheckpointStorePort
from p4jira.core.ports.config_provider import SyncConfig
from p4jira.core.ports.issue_tracker import IssueHandle, IssueTrackerPort


class FakeChangeSource(ChangeSourcePort):
    """In-memory change source recording every call."""

    def __init__(self):
        self.changes: dict[int, tuple[str, list[FileRevision]]] = {}
        self.diffs: dict[tuple[str, int, int], str] = {}
        self.calls: list[tuple] = []

    def add_change(self, change_id: int, description: str, files=()) -> None:
        self.changes[change_id] = (description, list(files))

    @property
    def name(self) -> str:
        return "Fake"

    def list_changes(self, since: int) -> list[int]:
        self.calls.append(("list_changes", since))
        return sorted(c for c in self.changes if c > since)

    def get_description(self, change_id: int) -> str:
        self.calls.append(("get_description", change_id))
        return self.changes[change_id][0]

    def get_files(self, change_id: int) -> list[FileRevision]:
        self.calls.append(("get_files", change_id))
        return self.changes[change_id][1]

    def get_diff(self, path: str, old_revision: int, new_revision: int) -> str:
        self.calls.append(("get_diff", path, old_revision, new_revision))
        return self.diffs.get(
            (path, old_revision, new_revision),
            f"--- {path}#{old_revision}\n+++ {path}#{new_revision}\n@@ -1 +1 @@\n-old\n+new\n",
        )

    def calls_to(self, method: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == method]


class MemoryCheckpointStore(CheckpointStorePort):
    """Checkpoint store keeping every written value."""

    def __init__(self, value: Optional[int] = None):
        self.value = value
        self.writes: list[int] = []

    def read(self) -> Optional[int]:
        return self.value

    def write(self, change_id: int) -> None:
        self.writes.append(change_id)
        self.value = change_id


@pytest.fixture
def source():
    return FakeChangeSource()


@pytest.fixture
def checkpoint_store():
    return MemoryCheckpointStore()


@pytest.fixture
def tracker():
    """Tracker mock where every requested key exists."""
    tracker = Mock(spec=IssueTrackerPort)
    tracker.name = "Jira"
    tracker.resolve_issues.side_effect = lambda keys: [IssueHandle(key=k) for k in keys]
    tracker.add_comment.return_value = True
    tracker.add_attachment.return_value = True
    return tracker


@pytest.fixture
def sync_config():
    return SyncConfig(checkpoint_path="unused.ckpt")
