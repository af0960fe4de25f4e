"""
Ports - Abstract interfaces for external dependencies.

Ports define the contracts that adapters must implement.
This enables dependency inversion and easy testing.
"""

from .change_source import ChangeSourcePort, ChangeSourceError, ChangeSourceTimeoutError
from .checkpoint_store import CheckpointStorePort, CheckpointError
from .config_provider import (
    ConfigProviderPort,
    ConfigError,
    AppConfig,
    TrackerConfig,
    SourceConfig,
    SyncConfig,
)
from .issue_tracker import (
    IssueTrackerPort,
    IssueTrackerError,
    IssueResolutionError,
    IssueHandle,
    AuthenticationError,
    NotFoundError,
    PermissionError,
    RateLimitError,
    TransientError,
)

__all__ = [
    "ChangeSourcePort",
    "ChangeSourceError",
    "ChangeSourceTimeoutError",
    "CheckpointStorePort",
    "CheckpointError",
    "ConfigProviderPort",
    "ConfigError",
    "AppConfig",
    "TrackerConfig",
    "SourceConfig",
    "SyncConfig",
    "IssueTrackerPort",
    "IssueTrackerError",
    "IssueResolutionError",
    "IssueHandle",
    "AuthenticationError",
    "NotFoundError",
    "PermissionError",
    "RateLimitError",
    "TransientError",
]
