"""
Perforce Client - Runs p4 commands with bounded timeouts.

The PerforceAdapter uses this to implement the ChangeSourcePort.
Connection settings are passed through the child environment, so the
password never appears on a command line.
"""

import logging
import os
import subprocess
from typing import Optional

from ...core.ports.change_source import ChangeSourceError, ChangeSourceTimeoutError


# stderr text that means "empty result" rather than failure
NO_RESULT_MARKERS = ("no such file(s)", "file(s) not in client view")


class P4Client:
    """
    Thin wrapper around the p4 command line client.

    Every failure (missing binary, timeout, non-zero exit) is raised as
    ChangeSourceError.
    """

    def __init__(
        self,
        p4_binary: str = "p4",
        port: Optional[str] = None,
        user: Optional[str] = None,
        client: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = 120.0,
    ):
        """
        Initialize the client.

        Args:
            p4_binary: Path or name of the p4 executable
            port: P4PORT (server address)
            user: P4USER
            client: P4CLIENT (workspace)
            password: P4PASSWD (password or ticket)
            timeout: Per-command timeout in seconds
        """
        self.p4_binary = p4_binary
        self.timeout = timeout
        self.logger = logging.getLogger("P4Client")

        self._settings = {
            "P4PORT": port,
            "P4USER": user,
            "P4CLIENT": client,
            "P4PASSWD": password,
        }

    def _environment(self) -> dict[str, str]:
        env = dict(os.environ)
        env.update({k: v for k, v in self._settings.items() if v})
        return env

    def run(self, *args: str) -> str:
        """
        Run a p4 command and return its standard output.

        Args:
            *args: p4 command and arguments (e.g., 'describe', '-s', '1234')

        Raises:
            ChangeSourceTimeoutError: If the command exceeds the timeout
            ChangeSourceError: If p4 cannot be started or exits non-zero
        """
        command = [self.p4_binary, *args]
        self.logger.debug(f"Running: {' '.join(command)}")

        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
                env=self._environment(),
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise ChangeSourceTimeoutError(
                f"p4 {args[0] if args else ''} timed out after {self.timeout}s",
                command=command,
                cause=e,
            ) from e
        except OSError as e:
            raise ChangeSourceError(
                f"Could not run {self.p4_binary}: {e}",
                command=command,
                cause=e,
            ) from e

        if completed.returncode != 0:
            stderr = (completed.stderr or "").strip()
            raise ChangeSourceError(
                f"p4 {' '.join(args)} failed with exit code {completed.returncode}: {stderr}",
                command=command,
            )

        # p4 reports some errors (e.g. bad login) on stderr with exit code 0
        stderr = (completed.stderr or "").strip()
        if stderr and not completed.stdout and not any(m in stderr for m in NO_RESULT_MARKERS):
            raise ChangeSourceError(
                f"p4 {' '.join(args)} failed: {stderr}",
                command=command,
            )

        if stderr:
            self.logger.debug(f"p4 {args[0]}: {stderr}")

        return completed.stdout
