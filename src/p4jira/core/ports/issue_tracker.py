"""
Issue Tracker Port - Abstract interface for the issue tracking system.

Implementations:
- JiraAdapter: Atlassian Jira
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Optional


class IssueTrackerError(Exception):
    """Base exception for issue tracker errors."""

    def __init__(self, message: str, issue_key: Optional[str] = None, cause: Optional[Exception] = None):
        super().__init__(message)
        self.issue_key = issue_key
        self.cause = cause


class AuthenticationError(IssueTrackerError):
    """Authentication failed."""
    pass


class NotFoundError(IssueTrackerError):
    """Issue not found."""
    pass


class PermissionError(IssueTrackerError):
    """Insufficient permissions."""
    pass


class RateLimitError(IssueTrackerError):
    """Rate limit exceeded (HTTP 429)."""

    def __init__(
        self,
        message: str,
        retry_after: Optional[int] = None,
        issue_key: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message, issue_key, cause)
        self.retry_after = retry_after


class TransientError(IssueTrackerError):
    """Transient server error (5xx) that may succeed on retry."""
    pass


class IssueResolutionError(IssueTrackerError):
    """Resolving a batch of issue keys to issues failed as a whole."""

    def __init__(self, message: str, keys: Iterable[str] = (), cause: Optional[Exception] = None):
        super().__init__(message, cause=cause)
        self.keys = list(keys)


@dataclass(frozen=True)
class IssueHandle:
    """An issue the tracker confirmed to exist."""

    key: str
    id: str = ""
    summary: str = ""


class IssueTrackerPort(ABC):
    """
    Abstract interface for the issue tracker.

    Resolution failures raise IssueResolutionError; mutation failures
    raise any other IssueTrackerError.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the tracker name (e.g., 'Jira')."""
        ...

    @abstractmethod
    def test_connection(self) -> bool:
        """Test the connection to the tracker."""
        ...

    @abstractmethod
    def resolve_issues(self, issue_keys: Iterable[str]) -> list[IssueHandle]:
        """
        Resolve issue keys to issues in a single batch call.

        Args:
            issue_keys: Keys to look up (e.g., ['PROJ-1', 'PROJ-2'])

        Returns:
            Handles for the keys that exist. Unknown keys are omitted.

        Raises:
            IssueResolutionError: If the batch lookup itself failed
        """
        ...

    @abstractmethod
    def add_comment(self, issue_key: str, body: str) -> bool:
        """Append a comment (tracker markup) to an issue."""
        ...

    @abstractmethod
    def add_attachment(self, issue_key: str, filename: str, content: bytes) -> bool:
        """Attach a named payload to an issue."""
        ...
