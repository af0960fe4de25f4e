"""
Environment Config Provider - Load configuration from environment variables.

Supports, in increasing precedence:
- .env files
- Environment variables (JIRA_URL, P4PORT, P4JIRA_DEPOT_PATH, ...)
- Command line argument overrides

String values may reference other values as ${NAME}; see macros.expand.
"""

import os
from pathlib import Path
from typing import Any, Callable, Optional

from ...core.ports.config_provider import (
    DEFAULT_ATTACHMENT_THRESHOLD,
    AppConfig,
    ConfigError,
    ConfigProviderPort,
    SourceConfig,
    SyncConfig,
    TrackerConfig,
)
from .macros import expand


# Environment variable -> config key
ENV_MAPPING = {
    "JIRA_URL": "jira_url",
    "JIRA_EMAIL": "jira_email",
    "JIRA_API_TOKEN": "jira_api_token",
    "JIRA_PROJECT": "project_key",
    "JIRA_TIMEOUT": "jira_timeout",
    "P4JIRA_DEPOT_PATH": "depot_path",
    "P4PORT": "p4_port",
    "P4USER": "p4_user",
    "P4CLIENT": "p4_client",
    "P4PASSWD": "p4_password",
    "P4JIRA_P4_BINARY": "p4_binary",
    "P4JIRA_P4_TIMEOUT": "p4_timeout",
    "P4JIRA_FAKE": "dry_run",
    "P4JIRA_VERBOSITY": "verbosity",
    "P4JIRA_ATTACHMENT_THRESHOLD": "attachment_threshold",
    "P4JIRA_ATTACHMENT_EXT": "attachment_extension",
    "P4JIRA_REVIEW_URL": "review_url_template",
    "P4JIRA_CHECKPOINT_FILE": "checkpoint_path",
    "P4JIRA_LOG_FILE": "log_file",
}

# CLI argument -> config key
CLI_MAPPING = {
    "project": "project_key",
    "jira_url": "jira_url",
    "depot": "depot_path",
    "fake": "dry_run",
    "verbose": "verbosity",
    "threshold": "attachment_threshold",
    "review_url": "review_url_template",
    "checkpoint_file": "checkpoint_path",
    "log_file": "log_file",
}


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes", "on")


class EnvironmentConfigProvider(ConfigProviderPort):
    """
    Configuration provider that loads from environment variables and .env files.
    """

    def __init__(
        self,
        env_file: Optional[Path] = None,
        cli_overrides: Optional[dict[str, Any]] = None,
        environ: Optional[dict[str, str]] = None,
    ):
        """
        Initialize the config provider.

        Args:
            env_file: Path to .env file (auto-detected if not specified)
            cli_overrides: Command line argument overrides
            environ: Environment to read (defaults to os.environ)
        """
        self._values: dict[str, Any] = {}
        self._raw: dict[str, str] = {}
        self._env_file = env_file
        self._cli_overrides = cli_overrides or {}
        self._environ = dict(os.environ if environ is None else environ)

        # Load configuration
        self._load_env_file()
        self._load_environment()
        self._apply_cli_overrides()
        self._expand_macros()

    # -------------------------------------------------------------------------
    # ConfigProviderPort Implementation
    # -------------------------------------------------------------------------

    @property
    def name(self) -> str:
        return "Environment"

    def load(self) -> AppConfig:
        """
        Load complete configuration.

        Raises:
            ConfigError: If a numeric value cannot be converted
        """
        tracker = TrackerConfig(
            url=self.get("jira_url", ""),
            email=self.get("jira_email", ""),
            api_token=self.get("jira_api_token", ""),
            project_key=self.get("project_key", ""),
            timeout=self._typed("jira_timeout", float, 30.0),
        )

        source = SourceConfig(
            depot_path=self.get("depot_path", ""),
            port=self.get("p4_port"),
            user=self.get("p4_user"),
            client=self.get("p4_client"),
            password=self.get("p4_password"),
            p4_binary=self.get("p4_binary") or "p4",
            timeout=self._typed("p4_timeout", float, 120.0),
        )

        sync = SyncConfig(
            dry_run=_to_bool(self.get("dry_run", False)),
            verbosity=self._typed("verbosity", int, 0),
            attachment_threshold=self._typed(
                "attachment_threshold", int, DEFAULT_ATTACHMENT_THRESHOLD
            ),
            attachment_extension=(self.get("attachment_extension") or "diff").lstrip("."),
            review_url_template=self.get("review_url_template") or None,
            checkpoint_path=self.get("checkpoint_path") or None,
        )

        return AppConfig(
            tracker=tracker,
            source=source,
            sync=sync,
            log_file=self.get("log_file") or None,
        )

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value."""
        key = key.lower().replace("-", "_")
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value."""
        key = key.lower().replace("-", "_")
        self._values[key] = value

    def validate(self) -> list[str]:
        """Validate configuration."""
        errors = []

        if not self.get("jira_url"):
            errors.append("Missing JIRA_URL - set in environment or .env file")
        if not self.get("jira_email"):
            errors.append("Missing JIRA_EMAIL - set in environment or .env file")
        if not self.get("jira_api_token"):
            errors.append("Missing JIRA_API_TOKEN - set in environment or .env file")
        if not self.get("project_key"):
            errors.append("Missing JIRA_PROJECT - set in environment or pass --project")
        if not self.get("depot_path"):
            errors.append("Missing P4JIRA_DEPOT_PATH - set in environment or pass --depot")
        if not self.get("checkpoint_path"):
            errors.append(
                "Missing P4JIRA_CHECKPOINT_FILE - set in environment or pass --checkpoint-file"
            )

        for key, env_name in (
            ("verbosity", "P4JIRA_VERBOSITY"),
            ("attachment_threshold", "P4JIRA_ATTACHMENT_THRESHOLD"),
        ):
            try:
                self._typed(key, int, 0)
            except ConfigError:
                errors.append(f"{env_name} must be an integer, got {self.get(key)!r}")

        return errors

    # -------------------------------------------------------------------------
    # Private Methods
    # -------------------------------------------------------------------------

    def _typed(self, key: str, convert: Callable[[Any], Any], default: Any) -> Any:
        value = self.get(key)
        if value is None or value == "":
            return default
        try:
            return convert(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid value for {key}: {value!r}", errors=[str(e)]) from e

    def _load_env_file(self) -> None:
        """Load values from .env file."""
        env_file = self._find_env_file()
        if not env_file:
            return

        for line in env_file.read_text(encoding="utf-8").splitlines():
            line = line.strip()

            # Skip empty lines and comments
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            if key.startswith("export "):
                key = key[len("export "):].strip()
            self._raw[key] = value.strip().strip('"').strip("'")

    def _find_env_file(self) -> Optional[Path]:
        """Find .env file."""
        if self._env_file:
            if not self._env_file.exists():
                raise ConfigError(f"Env file not found: {self._env_file}")
            return self._env_file

        cwd_env = Path.cwd() / ".env"
        if cwd_env.exists():
            return cwd_env

        return None

    def _load_environment(self) -> None:
        """Load values from the .env file and environment variables."""
        self._raw.update(self._environ)

        for env_key, config_key in ENV_MAPPING.items():
            if env_key in self._raw:
                self._values[config_key] = self._raw[env_key]

    def _apply_cli_overrides(self) -> None:
        """Apply CLI argument overrides."""
        for cli_key, config_key in CLI_MAPPING.items():
            value = self._cli_overrides.get(cli_key)
            if value is not None:
                self._values[config_key] = value

    def _expand_macros(self) -> None:
        """Resolve ${NAME} references against env names and config keys."""
        bindings: dict[str, Any] = dict(self._raw)
        bindings.update({k: v for k, v in self._values.items() if isinstance(v, str)})

        for key, value in self._values.items():
            if isinstance(value, str) and "${" in value:
                self._values[key] = expand(value, bindings)
