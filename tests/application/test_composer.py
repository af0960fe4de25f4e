"""Tests for comment composition."""

import pytest

from p4jira.application.sync.composer import (
    MAX_COMMENT_LENGTH,
    CommentComposer,
    format_file_list,
    format_size,
)
from p4jira.core.domain.entities import DeliveryPlan, DiffBundle, FileRevision


class TestFormatSize:
    """Tests for format_size."""

    @pytest.mark.parametrize(
        "num_bytes,expected",
        [
            (0, "0 bytes"),
            (100, "100 bytes"),
            (1023, "1023 bytes"),
            (1024, "1K"),
            (1100, "1.07K"),
            (1536, "1.5K"),
            (1048576, "1M"),
            (3 * 1024 ** 3, "3G"),
            (1024 ** 4, "1T"),
            (1024 ** 5, "1024T"),
        ],
    )
    def test_sizes(self, num_bytes, expected):
        assert format_size(num_bytes) == expected


class TestFormatFileList:
    """Tests for format_file_list."""

    def test_one_line_per_file(self):
        files = [
            FileRevision("//depot/a.c", 3, "edit"),
            FileRevision("//depot/b.c", 1, "add"),
        ]
        assert format_file_list(files) == "//depot/a.c#3 edit\n//depot/b.c#1 add"

    def test_unknown_action_omitted(self):
        assert format_file_list([FileRevision("//depot/a.c", 3)]) == "//depot/a.c#3"


class TestCommentComposer:
    """Tests for CommentComposer."""

    @pytest.fixture
    def composer(self):
        return CommentComposer()

    def test_inline_comment(self, composer):
        body = composer.compose(
            "Fix PROJ-1\n",
            "//depot/a.c#2 edit",
            DiffBundle(("-old\n+new",)),
            DeliveryPlan.inline(),
        )

        assert body == (
            "Fix PROJ-1\n"
            "\n"
            "*Affected files:*\n"
            "//depot/a.c#2 edit\n"
            "\n"
            "{code:diff}\n"
            "-old\n+new\n"
            "{code}"
        )

    def test_attachment_comment_references_file(self, composer):
        body = composer.compose(
            "Fix PROJ-1",
            "//depot/a.c#2 edit",
            DiffBundle(("x" * 1536,)),
            DeliveryPlan.attachment("change_9_diffs.diff"),
        )

        assert body.endswith("Diffs (1.5K) attached as [^change_9_diffs.diff]")
        assert "{code:diff}" not in body
        assert "x" * 10 not in body


class TestCommentLimit:
    """Tests for the tracker comment size limit."""

    def test_limit_matches_jira(self):
        assert MAX_COMMENT_LENGTH == 32767

    def test_fits(self):
        composer = CommentComposer(max_length=10)
        assert composer.fits("x" * 10)
        assert not composer.fits("x" * 11)
