"""
Perforce Adapter - Implements ChangeSourcePort on top of the p4 CLI.
"""

import logging
import re
from typing import Optional

from ...core.domain.entities import ChangeId, FileRevision
from ...core.ports.change_source import ChangeSourcePort
from ...core.ports.config_provider import SourceConfig
from .client import P4Client


CHANGE_LINE_PATTERN = re.compile(r"^Change (\d+) ", re.MULTILINE)
FILE_LINE_PATTERN = re.compile(r"^\.\.\. (//\S.*)#(\d+) (\S+)", re.MULTILINE)
# Sections of `p4 describe` output that follow the description body
DESCRIBE_TRAILERS = re.compile(r"^(Affected files|Shelved files|Jobs fixed) \.\.\.", re.MULTILINE)


class PerforceAdapter(ChangeSourcePort):
    """
    Perforce implementation of the ChangeSourcePort.

    The description and file list both come from `p4 describe -s`, so the
    last describe output is cached per change id.
    """

    def __init__(self, config: SourceConfig, client: Optional[P4Client] = None):
        """
        Initialize the Perforce adapter.

        Args:
            config: Source configuration
            client: Optional preconfigured p4 client
        """
        self.config = config
        self.depot_path = config.depot_path
        self.logger = logging.getLogger("PerforceAdapter")

        self._client = client or P4Client(
            p4_binary=config.p4_binary,
            port=config.port,
            user=config.user,
            client=config.client,
            password=config.password,
            timeout=config.timeout,
        )
        self._describe_cache: Optional[tuple[ChangeId, str]] = None

    # -------------------------------------------------------------------------
    # ChangeSourcePort Implementation
    # -------------------------------------------------------------------------

    @property
    def name(self) -> str:
        return "Perforce"

    def list_changes(self, since: ChangeId) -> list[ChangeId]:
        output = self._client.run(
            "changes", "-s", "submitted", f"{self.depot_path}@{since + 1},@now"
        )
        changes = sorted({int(m) for m in CHANGE_LINE_PATTERN.findall(output)})
        self.logger.debug(f"Found {len(changes)} submitted change(s) after {since}")
        return changes

    def get_description(self, change_id: ChangeId) -> str:
        output = self._describe(change_id)
        lines = output.splitlines()

        # First line is the "Change N by user@client on date" header
        body = "\n".join(lines[1:]) if lines and lines[0].startswith("Change ") else output

        trailer = DESCRIBE_TRAILERS.search(body)
        if trailer:
            body = body[: trailer.start()]

        return body.strip("\n").rstrip()

    def get_files(self, change_id: ChangeId) -> list[FileRevision]:
        output = self._describe(change_id)
        return [
            FileRevision(path=path, revision=int(rev), action=action)
            for path, rev, action in FILE_LINE_PATTERN.findall(output)
        ]

    def get_diff(self, path: str, old_revision: int, new_revision: int) -> str:
        return self._client.run("diff2", "-du", f"{path}#{old_revision}", f"{path}#{new_revision}")

    def _describe(self, change_id: ChangeId) -> str:
        if self._describe_cache and self._describe_cache[0] == change_id:
            return self._describe_cache[1]

        output = self._client.run("describe", "-s", str(change_id))
        self._describe_cache = (change_id, output)
        return output
