"""
Description Annotator - Find issue keys and link review references.
"""

import re
from dataclasses import dataclass, field
from typing import Optional

from ...core.domain.entities import IssueKey


REVIEW_PATTERN = re.compile(r"Review:\s*ID\s*(\d+)")
REVIEW_ID_PLACEHOLDER = "{id}"


@dataclass(frozen=True)
class Annotation:
    """Issue keys found in a description, plus the rewritten text."""

    keys: tuple[IssueKey, ...] = field(default_factory=tuple)
    text: str = ""

    @property
    def is_relevant(self) -> bool:
        return bool(self.keys)


class DescriptionAnnotator:
    """
    Extracts issue keys of one project from change descriptions.

    Keys are matched as `<PROJECT>-<digits>`, with the project prefix
    taken literally. The prefix must start a word, so `XPROJ-1` is not a
    `PROJ` key; anything but another digit may follow the number. A `Review: ID <digits>` reference becomes a Jira wiki
    link when a review URL template is configured; `{id}` in the template
    is replaced by the review number.
    """

    def __init__(self, project_key: str, review_url_template: Optional[str] = None):
        if not project_key:
            raise ValueError("Project key is required")

        self.project_key = project_key
        self.review_url_template = review_url_template or None
        self._key_pattern = re.compile(rf"\b{re.escape(project_key)}-\d+(?!\d)")

    def annotate(self, description: str) -> Annotation:
        """
        Annotate a change description.

        Args:
            description: Verbose change description

        Returns:
            Annotation with de-duplicated keys in first-occurrence order.
            No keys means the change is not relevant to the project.
        """
        text = "\n".join(line.lstrip() for line in description.splitlines())

        keys = tuple(dict.fromkeys(self._key_pattern.findall(text)))
        text = self._link_review(text)

        return Annotation(keys=keys, text=text)

    def _link_review(self, text: str) -> str:
        if not self.review_url_template:
            return text

        def to_link(match: re.Match) -> str:
            url = self.review_url_template.replace(REVIEW_ID_PLACEHOLDER, match.group(1))
            return f"[{match.group(0)}|{url}]"

        return REVIEW_PATTERN.sub(to_link, text, count=1)
