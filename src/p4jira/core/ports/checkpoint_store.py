"""
Checkpoint Store Port - Persistence of the last fully processed change.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..domain.entities import ChangeId


class CheckpointError(Exception):
    """The checkpoint could not be read or written. Always fatal to a run."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.cause = cause


class CheckpointStorePort(ABC):
    """Reads and overwrites a single change ID."""

    @abstractmethod
    def read(self) -> Optional[ChangeId]:
        """Return the stored change ID, or None when no run has completed yet."""
        ...

    @abstractmethod
    def write(self, change_id: ChangeId) -> None:
        """Durably replace the stored change ID."""
        ...
