"""
Adapters - Concrete implementations of ports.

This module contains implementations for:
- Issue Trackers: Jira
- Change Sources: Perforce
- Checkpoint Stores: plain file
- Config: Environment variables and .env files
"""

from .jira import JiraAdapter
from .perforce import PerforceAdapter
from .checkpoint import FileCheckpointStore
from .config import EnvironmentConfigProvider

__all__ = [
    "JiraAdapter",
    "PerforceAdapter",
    "FileCheckpointStore",
    "EnvironmentConfigProvider",
]
