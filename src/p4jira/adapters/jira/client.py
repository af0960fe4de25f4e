"""
Jira API Client - Low-level HTTP client for Jira REST API.

This handles the raw HTTP communication with Jira.
The JiraAdapter uses this to implement the IssueTrackerPort.
"""

import logging
import random
import time
from typing import Any, Optional

import requests

from ...core.ports.issue_tracker import (
    IssueTrackerError,
    AuthenticationError,
    NotFoundError,
    PermissionError,
    RateLimitError,
    TransientError,
)


# HTTP status codes that should trigger retry
RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


class JiraApiClient:
    """
    Low-level Jira REST API client.

    Handles authentication, timeouts, retries and error mapping.
    API version 2 is used so comment bodies can carry wiki markup.
    """

    API_VERSION = "2"

    def __init__(
        self,
        base_url: str,
        email: str,
        api_token: str,
        dry_run: bool = False,
        timeout: float = 30.0,
        max_retries: int = 3,
        initial_delay: float = 1.0,
        max_delay: float = 30.0,
        backoff_factor: float = 2.0,
        jitter: float = 0.1,
    ):
        """
        Initialize the Jira client.

        Args:
            base_url: Jira instance URL (e.g., https://company.atlassian.net)
            email: User email for authentication
            api_token: API token
            dry_run: If True, don't make write operations
            timeout: Per-request timeout in seconds
            max_retries: Maximum number of retry attempts for transient failures
            initial_delay: Initial delay between retries in seconds
            max_delay: Maximum delay between retries in seconds
            backoff_factor: Multiplier for exponential backoff
            jitter: Random jitter factor (0.1 = 10% variation)
        """
        self.base_url = base_url.rstrip("/")
        self.api_url = f"{self.base_url}/rest/api/{self.API_VERSION}"
        self.auth = (email, api_token)
        self.dry_run = dry_run
        self.timeout = timeout
        self.logger = logging.getLogger("JiraApiClient")

        # Retry configuration
        self.max_retries = max_retries
        self.initial_delay = initial_delay
        self.max_delay = max_delay
        self.backoff_factor = backoff_factor
        self.jitter = jitter

        self.headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

        self._session = requests.Session()
        self._session.auth = self.auth
        self._session.headers.update(self.headers)

        self._current_user: Optional[dict] = None

    # -------------------------------------------------------------------------
    # Core Request Methods
    # -------------------------------------------------------------------------

    def request(
        self,
        method: str,
        endpoint: str,
        **kwargs: Any,
    ) -> Any:
        """
        Make an authenticated request to Jira API with retry logic.

        Retries on transient failures (connection errors, timeouts, rate
        limits, server errors) using exponential backoff.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            endpoint: API endpoint (e.g., 'issue/PROJ-123')
            **kwargs: Additional arguments for requests

        Returns:
            Decoded JSON response

        Raises:
            IssueTrackerError: On API errors after all retries exhausted
            AuthenticationError: On 401 (not retried)
            NotFoundError: On 404 (not retried)
            PermissionError: On 403 (not retried)
            RateLimitError: On 429 after all retries exhausted
            TransientError: On 5xx after all retries exhausted
        """
        url = f"{self.api_url}/{endpoint}"
        kwargs.setdefault("timeout", self.timeout)
        attempts = self.max_retries + 1

        for attempt in range(attempts):
            try:
                response = self._session.request(method, url, **kwargs)
            except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
                kind = "Timeout" if isinstance(e, requests.exceptions.Timeout) else "Connection error"
                if attempt < self.max_retries:
                    delay = self._calculate_delay(attempt)
                    self.logger.warning(
                        f"{kind} on {method} {endpoint}, "
                        f"attempt {attempt + 1}/{attempts}, "
                        f"retrying in {delay:.2f}s: {e}"
                    )
                    time.sleep(delay)
                    continue
                raise IssueTrackerError(
                    f"{kind} on {method} {endpoint} after {attempts} attempts: {e}",
                    issue_key=endpoint,
                    cause=e,
                )

            if response.status_code in RETRYABLE_STATUS_CODES:
                retry_after = self._get_retry_after(response)
                if attempt < self.max_retries:
                    delay = self._calculate_delay(attempt, retry_after)
                    self.logger.warning(
                        f"Retryable error {response.status_code} on {method} {endpoint}, "
                        f"attempt {attempt + 1}/{attempts}, "
                        f"retrying in {delay:.2f}s"
                    )
                    time.sleep(delay)
                    continue

                if response.status_code == 429:
                    raise RateLimitError(
                        f"Rate limit exceeded for {endpoint} after {attempts} attempts",
                        retry_after=retry_after,
                        issue_key=endpoint,
                    )
                raise TransientError(
                    f"Server error {response.status_code} for {endpoint} after {attempts} attempts",
                    issue_key=endpoint,
                )

            return self._handle_response(response, endpoint)

        raise IssueTrackerError(f"Request failed after {attempts} attempts", issue_key=endpoint)

    def get(self, endpoint: str, **kwargs: Any) -> Any:
        """GET request."""
        return self.request("GET", endpoint, **kwargs)

    def post(self, endpoint: str, json: Optional[dict] = None, **kwargs: Any) -> Any:
        """POST request (checks dry_run for mutations)."""
        if self.dry_run and not endpoint.startswith("search"):
            self.logger.info(f"[DRY-RUN] Would POST to {endpoint}")
            return {}
        return self.request("POST", endpoint, json=json, **kwargs)

    def post_file(self, endpoint: str, filename: str, content: bytes, mime_type: str = "text/plain") -> Any:
        """Multipart upload (checks dry_run)."""
        if self.dry_run:
            self.logger.info(f"[DRY-RUN] Would upload {filename} to {endpoint}")
            return []
        return self.request(
            "POST",
            endpoint,
            files={"file": (filename, content, mime_type)},
            # None drops the session's JSON content type so requests sets the multipart boundary
            headers={"X-Atlassian-Token": "no-check", "Content-Type": None},
        )

    # -------------------------------------------------------------------------
    # Response Handling
    # -------------------------------------------------------------------------

    def _handle_response(self, response: requests.Response, endpoint: str) -> Any:
        """Handle API response and errors."""
        if response.ok:
            if response.text:
                return response.json()
            return {}

        status = response.status_code
        error_body = response.text[:500] if response.text else ""

        if status == 401:
            raise AuthenticationError(
                "Authentication failed. Check JIRA_EMAIL and JIRA_API_TOKEN."
            )

        if status == 403:
            raise PermissionError(f"Permission denied for {endpoint}", issue_key=endpoint)

        if status == 404:
            raise NotFoundError(f"Not found: {endpoint}", issue_key=endpoint)

        raise IssueTrackerError(f"API error {status}: {error_body}", issue_key=endpoint)

    def _calculate_delay(self, attempt: int, retry_after: Optional[int] = None) -> float:
        """Exponential backoff with jitter, honouring Retry-After."""
        if retry_after is not None:
            base_delay = min(retry_after, self.max_delay)
        else:
            base_delay = min(self.initial_delay * (self.backoff_factor ** attempt), self.max_delay)

        jitter_range = base_delay * self.jitter
        return max(0, base_delay + random.uniform(-jitter_range, jitter_range))

    def _get_retry_after(self, response: requests.Response) -> Optional[int]:
        retry_after = response.headers.get("Retry-After")
        if retry_after is not None:
            try:
                return int(retry_after)
            except ValueError:
                return None
        return None

    # -------------------------------------------------------------------------
    # Convenience Methods
    # -------------------------------------------------------------------------

    def get_myself(self) -> dict[str, Any]:
        """Get current authenticated user."""
        if self._current_user is None:
            self._current_user = self.get("myself")
        return self._current_user

    def search_jql(
        self,
        jql: str,
        fields: list[str],
        max_results: int = 100,
    ) -> dict[str, Any]:
        """Execute JQL search, tolerating keys that don't exist."""
        return self.post(
            "search",
            json={
                "jql": jql,
                "maxResults": max_results,
                "fields": fields,
                "validateQuery": "warn",
            },
        )

    def test_connection(self) -> bool:
        """Test if connection is valid."""
        try:
            self.get_myself()
            return True
        except IssueTrackerError:
            return False

    @property
    def is_connected(self) -> bool:
        """Check if connected."""
        return self._current_user is not None

    def close(self) -> None:
        self._session.close()
