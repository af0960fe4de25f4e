"""
Jira Adapter - Implementation of IssueTrackerPort for Atlassian Jira.
"""

from .adapter import JiraAdapter
from .client import JiraApiClient

__all__ = [
    "JiraAdapter",
    "JiraApiClient",
]
