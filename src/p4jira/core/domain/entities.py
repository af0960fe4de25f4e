"""
Domain Entities - Changes, file revisions and diff delivery decisions.

These are plain immutable values. They are created per run from the
change source and never persisted, except for the change ID stored as
the checkpoint.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


ChangeId = int
IssueKey = str

DIFF_BLOCK_SEPARATOR = "\n\n"


@dataclass(frozen=True)
class FileRevision:
    """A depot file at a specific revision, as listed by a change."""

    path: str
    revision: int
    action: str = ""

    def __post_init__(self) -> None:
        if self.revision < 1:
            raise ValueError(f"Revision must be positive: {self.path}#{self.revision}")

    @property
    def is_added(self) -> bool:
        """Revision 1 has no previous revision to diff against."""
        return self.revision == 1

    @property
    def previous_revision(self) -> Optional[int]:
        return None if self.is_added else self.revision - 1

    def __str__(self) -> str:
        return f"{self.path}#{self.revision}"


@dataclass(frozen=True)
class Change:
    """A submitted change fetched from the change source."""

    id: ChangeId
    description: str
    files: tuple[FileRevision, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class DiffBundle:
    """
    Concatenated per-file diffs for one change.

    Blocks keep file-list order and are separated by a blank line.
    """

    per_file_diffs: tuple[str, ...] = field(default_factory=tuple)

    @property
    def text(self) -> str:
        return DIFF_BLOCK_SEPARATOR.join(self.per_file_diffs)

    @property
    def total_byte_length(self) -> int:
        return len(self.text.encode("utf-8"))

    @property
    def is_empty(self) -> bool:
        return not self.per_file_diffs


class DeliveryMode(Enum):
    """How the diffs of a change reach the tracker."""

    INLINE = "inline"
    ATTACHMENT = "attachment"


@dataclass(frozen=True)
class DeliveryPlan:
    """Inline or attachment decision, made once per change."""

    mode: DeliveryMode
    attachment_name: Optional[str] = None

    @property
    def is_attachment(self) -> bool:
        return self.mode is DeliveryMode.ATTACHMENT

    @classmethod
    def inline(cls) -> "DeliveryPlan":
        return cls(mode=DeliveryMode.INLINE)

    @classmethod
    def attachment(cls, name: str) -> "DeliveryPlan":
        return cls(mode=DeliveryMode.ATTACHMENT, attachment_name=name)
