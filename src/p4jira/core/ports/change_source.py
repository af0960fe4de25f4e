"""
Change Source Port - Abstract interface for the version-control system.

Implementations:
- PerforceAdapter: Perforce Helix Core via the p4 command line
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..domain.entities import ChangeId, FileRevision


class ChangeSourceError(Exception):
    """The change source could not be queried. Always fatal to a run."""

    def __init__(self, message: str, command: Optional[list[str]] = None, cause: Optional[Exception] = None):
        super().__init__(message)
        self.command = command
        self.cause = cause


class ChangeSourceTimeoutError(ChangeSourceError):
    """A change source call exceeded its timeout."""
    pass


class ChangeSourcePort(ABC):
    """
    Abstract interface for listing and reading submitted changes.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    def list_changes(self, since: ChangeId) -> list[ChangeId]:
        """
        List submitted changes newer than a cursor.

        Args:
            since: Exclusive lower bound; 0 means from the beginning

        Returns:
            Change IDs greater than `since`, ascending
        """
        ...

    @abstractmethod
    def get_description(self, change_id: ChangeId) -> str:
        """Get the verbose description of one change."""
        ...

    @abstractmethod
    def get_files(self, change_id: ChangeId) -> list[FileRevision]:
        """Get the affected files of one change, in listing order."""
        ...

    @abstractmethod
    def get_diff(self, path: str, old_revision: int, new_revision: int) -> str:
        """Get the unified diff of a path between two revisions."""
        ...
