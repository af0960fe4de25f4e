"""
Jira Adapter - Implements IssueTrackerPort for Atlassian Jira.

This is the main entry point for Jira integration.
"""

import logging
from typing import Iterable, Optional

from ...core.ports.config_provider import TrackerConfig
from ...core.ports.issue_tracker import (
    IssueHandle,
    IssueResolutionError,
    IssueTrackerError,
    IssueTrackerPort,
)
from .client import JiraApiClient


class JiraAdapter(IssueTrackerPort):
    """
    Jira implementation of the IssueTrackerPort.

    Comments are sent as Jira wiki markup; diffs are uploaded as
    plain-text attachments.
    """

    ATTACHMENT_MIME_TYPE = "text/x-diff"

    def __init__(
        self,
        config: TrackerConfig,
        dry_run: bool = False,
        client: Optional[JiraApiClient] = None,
    ):
        """
        Initialize the Jira adapter.

        Args:
            config: Tracker configuration
            dry_run: If True, don't make changes
            client: Optional preconfigured API client
        """
        self.config = config
        self._dry_run = dry_run
        self.logger = logging.getLogger("JiraAdapter")

        self._client = client or JiraApiClient(
            base_url=config.url,
            email=config.email,
            api_token=config.api_token,
            dry_run=dry_run,
            timeout=config.timeout,
            max_retries=config.max_retries,
        )

    # -------------------------------------------------------------------------
    # IssueTrackerPort Implementation - Properties
    # -------------------------------------------------------------------------

    @property
    def name(self) -> str:
        return "Jira"

    @property
    def is_connected(self) -> bool:
        return self._client.is_connected

    def test_connection(self) -> bool:
        return self._client.test_connection()

    # -------------------------------------------------------------------------
    # IssueTrackerPort Implementation - Read Operations
    # -------------------------------------------------------------------------

    def resolve_issues(self, issue_keys: Iterable[str]) -> list[IssueHandle]:
        keys = list(dict.fromkeys(issue_keys))
        if not keys:
            return []

        jql = f"key in ({', '.join(keys)}) ORDER BY key ASC"
        try:
            data = self._client.search_jql(jql, ["summary"], max_results=len(keys))
        except IssueTrackerError as e:
            raise IssueResolutionError(f"Issue lookup failed: {e}", keys=keys, cause=e) from e

        for warning in data.get("warningMessages", []):
            self.logger.debug(f"JQL warning: {warning}")

        return [self._parse_issue(issue) for issue in data.get("issues", [])]

    # -------------------------------------------------------------------------
    # IssueTrackerPort Implementation - Write Operations
    # -------------------------------------------------------------------------

    def add_comment(self, issue_key: str, body: str) -> bool:
        if self._dry_run:
            self.logger.info(f"[DRY-RUN] Would add comment to {issue_key}")
            return True

        self._client.post(f"issue/{issue_key}/comment", json={"body": body})
        self.logger.debug(f"Added comment to {issue_key}")
        return True

    def add_attachment(self, issue_key: str, filename: str, content: bytes) -> bool:
        if self._dry_run:
            self.logger.info(f"[DRY-RUN] Would attach {filename} to {issue_key}")
            return True

        self._client.post_file(
            f"issue/{issue_key}/attachments",
            filename,
            content,
            mime_type=self.ATTACHMENT_MIME_TYPE,
        )
        self.logger.debug(f"Attached {filename} to {issue_key}")
        return True

    # -------------------------------------------------------------------------
    # Private Methods
    # -------------------------------------------------------------------------

    def _parse_issue(self, data: dict) -> IssueHandle:
        """Parse Jira API response into IssueHandle."""
        fields = data.get("fields", {})
        return IssueHandle(
            key=data["key"],
            id=str(data.get("id", "")),
            summary=fields.get("summary", ""),
        )
