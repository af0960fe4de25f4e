"""
Configuration Provider Port - Abstract interface for configuration.

Implementations:
- EnvironmentConfigProvider: Load from env vars, .env files and CLI overrides
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional


# Inline diffs must leave room for the description and file list
# below the tracker comment limit (MAX_COMMENT_LENGTH in the composer)
DEFAULT_ATTACHMENT_THRESHOLD = 30 * 1024


class ConfigError(Exception):
    """Required configuration is missing or malformed."""

    def __init__(self, message: str, errors: Optional[list[str]] = None):
        super().__init__(message)
        self.errors = errors or []


@dataclass
class TrackerConfig:
    """Configuration for the issue tracker (Jira)."""

    url: str
    email: str
    api_token: str
    project_key: str = ""

    # HTTP behaviour
    timeout: float = 30.0
    max_retries: int = 3

    def is_valid(self) -> bool:
        """Check if configuration is valid."""
        return bool(self.url and self.email and self.api_token and self.project_key)


@dataclass
class SourceConfig:
    """Configuration for the change source (Perforce)."""

    depot_path: str
    port: Optional[str] = None
    user: Optional[str] = None
    client: Optional[str] = None
    password: Optional[str] = None
    p4_binary: str = "p4"
    timeout: float = 120.0

    def is_valid(self) -> bool:
        """Check if configuration is valid."""
        return bool(self.depot_path)


@dataclass
class SyncConfig:
    """Configuration for sync runs."""

    dry_run: bool = False
    verbosity: int = 0  # 0-3

    # Diff delivery
    attachment_threshold: int = DEFAULT_ATTACHMENT_THRESHOLD
    attachment_extension: str = "diff"

    # Description annotation
    review_url_template: Optional[str] = None

    # Progress persistence
    checkpoint_path: Optional[str] = None


@dataclass
class AppConfig:
    """Complete application configuration."""

    tracker: TrackerConfig
    source: SourceConfig
    sync: SyncConfig = field(default_factory=SyncConfig)

    log_file: Optional[str] = None

    def validate(self) -> list[str]:
        """
        Validate configuration.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not self.tracker.url:
            errors.append("Missing tracker URL (JIRA_URL)")
        if not self.tracker.email:
            errors.append("Missing tracker email (JIRA_EMAIL)")
        if not self.tracker.api_token:
            errors.append("Missing API token (JIRA_API_TOKEN)")
        if not self.tracker.project_key:
            errors.append("Missing Jira project key (JIRA_PROJECT)")
        if not self.source.depot_path:
            errors.append("Missing depot path (P4JIRA_DEPOT_PATH)")
        if not self.sync.checkpoint_path:
            errors.append("Missing checkpoint file (P4JIRA_CHECKPOINT_FILE)")
        if not 0 <= self.sync.verbosity <= 3:
            errors.append(f"Verbosity must be between 0 and 3, got {self.sync.verbosity}")

        return errors


class ConfigProviderPort(ABC):
    """
    Abstract interface for configuration providers.

    Configuration can come from various sources:
    - Environment variables
    - .env files
    - Command line arguments
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the provider name."""
        ...

    @abstractmethod
    def load(self) -> AppConfig:
        """
        Load configuration from source.

        Returns:
            Complete application configuration

        Raises:
            ConfigError: If a value cannot be converted
        """
        ...

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Get a specific configuration value."""
        ...

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Set a configuration value."""
        ...

    @abstractmethod
    def validate(self) -> list[str]:
        """
        Validate loaded configuration.

        Returns:
            List of validation errors
        """
        ...
