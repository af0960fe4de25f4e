"""Tests for configuration macro expansion."""

from p4jira.adapters.config.macros import expand


class TestExpand:
    """Tests for expand."""

    def test_simple_substitution(self):
        assert expand("${HOME}/ckpt", {"HOME": "/var/lib"}) == "/var/lib/ckpt"

    def test_nested_references_reach_fixed_point(self):
        bindings = {"ROOT": "/srv", "STATE": "${ROOT}/state", "CKPT": "${STATE}/p4jira.ckpt"}
        assert expand("${CKPT}", bindings) == "/srv/state/p4jira.ckpt"

    def test_unknown_names_left_untouched(self):
        assert expand("${NOPE}/x", {}) == "${NOPE}/x"

    def test_text_without_macros(self):
        assert expand("plain", {"A": "b"}) == "plain"

    def test_self_reference_stops(self):
        result = expand("${A}", {"A": "x${A}"}, max_iterations=3)
        assert result == "xxx${A}"

    def test_non_string_binding(self):
        assert expand("limit=${N}", {"N": 5}) == "limit=5"

