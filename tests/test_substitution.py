"""
Tests for credlify.substitution
===============================

Test Organization
-----------------
- TestSubstitute: Placeholder replacement rules
- TestFindPlaceholders: Placeholder discovery
"""

import pytest

from credlify.substitution import find_placeholders, substitute


class TestSubstitute:
    """Tests for substitute()."""

    def test_replaces_known_placeholder(self) -> None:
        assert substitute("a %%[x]%% b", {"x": "1"}) == "a 1 b"

    def test_unresolved_placeholder_passes_through(self) -> None:
        assert substitute("a %%[y]%% b", {"x": "1"}) == "a %%[y]%% b"

    def test_replaces_every_occurrence(self) -> None:
        text = "%%[dest]%%/js and %%[dest]%%/css"
        assert substitute(text, {"dest": "dist"}) == "dist/js and dist/css"

    def test_case_sensitive(self) -> None:
        assert substitute("%%[Dest]%%", {"dest": "dist"}) == "%%[Dest]%%"

    def test_names_with_periods_hyphens_underscores(self) -> None:
        values = {"a.b": "1", "c-d": "2", "e_f": "3"}
        assert substitute("%%[a.b]%%%%[c-d]%%%%[e_f]%%", values) == "123"

    def test_invalid_names_are_not_placeholders(self) -> None:
        text = "%%[a b]%% %%[]%% %%[a/b]%%"
        assert substitute(text, {"a b": "x", "": "y", "a/b": "z"}) == text

    def test_values_are_converted_to_text(self) -> None:
        assert substitute("port %%[port]%%", {"port": 8080}) == "port 8080"

    def test_empty_value_removes_placeholder(self) -> None:
        assert substitute("a%%[serverTask]%%b", {"serverTask": ""}) == "ab"

    def test_inserted_values_are_not_expanded(self) -> None:
        values = {"outer": "%%[inner]%%", "inner": "deep"}
        assert substitute("%%[outer]%%", values) == "%%[inner]%%"

    def test_text_without_placeholders_unchanged(self) -> None:
        text = "const x = 100%; // [not] %% a placeholder"
        assert substitute(text, {"x": "1"}) == text

    @pytest.mark.parametrize(
        "text",
        [
            "plain text",
            "%%[src]%%/%%[srcJs]%%",
            "%%[missing]%% and %%[src]%%",
            "",
        ],
    )
    def test_idempotent_when_values_have_no_placeholders(self, text: str) -> None:
        values = {"src": "src", "srcJs": "js"}
        once = substitute(text, values)
        assert substitute(once, values) == once


class TestFindPlaceholders:
    """Tests for find_placeholders()."""

    def test_lists_names_in_order(self) -> None:
        assert find_placeholders("%%[b]%% %%[a]%%") == ["b", "a"]

    def test_deduplicates(self) -> None:
        assert find_placeholders("%%[a]%% %%[a]%% %%[b]%%") == ["a", "b"]

    def test_no_placeholders(self) -> None:
        assert find_placeholders("nothing here") == []
