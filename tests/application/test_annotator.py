"""Tests for the description annotator."""

import pytest

from p4jira.application.sync.annotator import Annotation, DescriptionAnnotator


class TestKeyExtraction:
    """Tests for issue key matching."""

    @pytest.fixture
    def annotator(self):
        return DescriptionAnnotator("PROJ")

    def test_keys_in_first_occurrence_order(self, annotator):
        annotation = annotator.annotate("Fix PROJ-12 and PROJ-3\nsee PROJ-12 again")
        assert annotation.keys == ("PROJ-12", "PROJ-3")
        assert annotation.is_relevant

    def test_no_key_is_not_relevant(self, annotator):
        annotation = annotator.annotate("Refactor build scripts")
        assert annotation.keys == ()
        assert not annotation.is_relevant

    @pytest.mark.parametrize(
        "description",
        [
            "XPROJ-1 is another project",
            "proj-1 lower case",
            "PROJ- without number",
        ],
    )
    def test_non_matching_text(self, annotator, description):
        assert annotator.annotate(description).keys == ()

    def test_other_projects_ignored(self, annotator):
        assert annotator.annotate("OTHER-5, PROJ-6").keys == ("PROJ-6",)

    def test_key_at_punctuation(self, annotator):
        assert annotator.annotate("(PROJ-7): done.").keys == ("PROJ-7",)

    @pytest.mark.parametrize(
        "description, expected",
        [
            ("branch PROJ-123_hotfix merged", ("PROJ-123",)),
            ("merged PROJ-123_fix", ("PROJ-123",)),
            ("fixes PROJ-7a", ("PROJ-7",)),
            ("PROJ-12/PROJ-13", ("PROJ-12", "PROJ-13")),
        ],
    )
    def test_key_followed_by_word_characters(self, annotator, description, expected):
        assert annotator.annotate(description).keys == expected

    def test_number_never_truncated(self, annotator):
        assert annotator.annotate("PROJ-1234").keys == ("PROJ-1234",)

    def test_project_key_taken_literally(self):
        annotator = DescriptionAnnotator("A.B")
        assert annotator.annotate("A.B-1 AxB-2").keys == ("A.B-1",)

    def test_project_key_required(self):
        with pytest.raises(ValueError):
            DescriptionAnnotator("")


class TestDescriptionText:
    """Tests for the rewritten description."""

    def test_leading_whitespace_stripped_per_line(self):
        annotation = DescriptionAnnotator("PROJ").annotate("\tFix PROJ-1\n\t  indented line\n")
        assert annotation.text == "Fix PROJ-1\nindented line"

    def test_review_link_without_template_is_noop(self):
        annotation = DescriptionAnnotator("PROJ").annotate("PROJ-1 Review: ID 1234")
        assert annotation.text == "PROJ-1 Review: ID 1234"

    def test_first_review_reference_linked(self):
        annotator = DescriptionAnnotator("PROJ", "https://reviews.example.com/r/{id}")

        annotation = annotator.annotate("PROJ-1\nReview: ID 1234\nReview: ID 99")

        assert annotation.text == (
            "PROJ-1\n"
            "[Review: ID 1234|https://reviews.example.com/r/1234]\n"
            "Review: ID 99"
        )

    def test_template_without_match_is_noop(self):
        annotator = DescriptionAnnotator("PROJ", "https://reviews.example.com/r/{id}")
        assert annotator.annotate("PROJ-1 reviewed offline").text == "PROJ-1 reviewed offline"


def test_annotation_default_not_relevant():
    assert not Annotation().is_relevant
