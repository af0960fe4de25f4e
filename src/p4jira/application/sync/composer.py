"""
Comment Composer - Build the Jira wiki markup comment for a change.
"""

from typing import Iterable

from ...core.domain.entities import DeliveryPlan, DiffBundle, FileRevision


AFFECTED_FILES_HEADER = "*Affected files:*"
DIFF_OPEN = "{code:diff}"
DIFF_CLOSE = "{code}"

SIZE_UNITS = ("K", "M", "G", "T")

# Jira rejects comment bodies longer than this many characters
MAX_COMMENT_LENGTH = 32767


def format_size(num_bytes: int) -> str:
    """
    Human-readable binary size.

    Examples:
        100 -> '100 bytes', 1536 -> '1.5K', 1048576 -> '1M'
    """
    if num_bytes < 1024:
        return f"{num_bytes} bytes"

    size = float(num_bytes)
    for unit in SIZE_UNITS:
        size /= 1024
        if size < 1024 or unit == SIZE_UNITS[-1]:
            break

    return f"{size:.2f}".rstrip("0").rstrip(".") + unit


def format_file_list(files: Iterable[FileRevision]) -> str:
    """One `<path>#<rev> <action>` line per file."""
    lines = []
    for file in files:
        line = str(file)
        if file.action:
            line = f"{line} {file.action}"
        lines.append(line)
    return "\n".join(lines)


class CommentComposer:
    """Assembles comment bodies. Pure; performs no I/O."""

    def __init__(self, max_length: int = MAX_COMMENT_LENGTH):
        self.max_length = max_length

    def fits(self, comment: str) -> bool:
        return len(comment) <= self.max_length

    def compose(
        self,
        description: str,
        file_list_text: str,
        bundle: DiffBundle,
        plan: DeliveryPlan,
    ) -> str:
        parts = [
            description.rstrip(),
            "",
            AFFECTED_FILES_HEADER,
            file_list_text,
            "",
        ]

        if plan.is_attachment:
            size = format_size(bundle.total_byte_length)
            parts.append(f"Diffs ({size}) attached as [^{plan.attachment_name}]")
        else:
            parts.extend([DIFF_OPEN, bundle.text, DIFF_CLOSE])

        return "\n".join(parts)
