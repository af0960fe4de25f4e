"""
File Checkpoint Store - Persists the last processed change in a text file.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from ...core.domain.entities import ChangeId
from ...core.ports.checkpoint_store import CheckpointError, CheckpointStorePort


class FileCheckpointStore(CheckpointStorePort):
    """
    Stores a single change ID as decimal text.

    Writes go to a temporary file in the same directory which then
    replaces the checkpoint, so readers never see a partial value.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.logger = logging.getLogger("FileCheckpointStore")

    def read(self) -> Optional[ChangeId]:
        try:
            raw = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            self.logger.debug(f"No checkpoint at {self.path}")
            return None
        except OSError as e:
            raise CheckpointError(f"Cannot read checkpoint {self.path}: {e}", cause=e) from e

        if not raw:
            return None

        try:
            value = int(raw)
        except ValueError as e:
            raise CheckpointError(
                f"Checkpoint {self.path} does not hold a change number: {raw!r}", cause=e
            ) from e

        if value < 0:
            raise CheckpointError(f"Checkpoint {self.path} holds a negative change number: {value}")

        return value

    def write(self, change_id: ChangeId) -> None:
        directory = self.path.parent
        tmp_name = None

        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=directory
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(f"{change_id}\n")
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise CheckpointError(f"Cannot write checkpoint {self.path}: {e}", cause=e) from e

        self.logger.debug(f"Checkpoint advanced to {change_id}")
