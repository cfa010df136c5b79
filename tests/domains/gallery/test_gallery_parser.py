"""Tests for namespace field parsing."""

import json

import pytest
from structlog.testing import capture_logs

from gallery_spine.domains.gallery.parser import decode_tag_list, parse_tag_field
from gallery_spine.errors import ParseError, TagParseError


class TestParseTagField:
    """Well-formed and empty fields."""

    def test_single_quoted_list(self):
        assert parse_tag_field("language", "['english','translated']") == ["english", "translated"]

    def test_keeps_field_order(self):
        assert parse_tag_field("artist", "['zeta','alpha','mid']") == ["zeta", "alpha", "mid"]

    def test_tags_with_spaces(self):
        assert parse_tag_field("female", "['big breasts', 'sole female']") == ["big breasts", "sole female"]

    def test_double_quoted_list_is_accepted(self):
        assert parse_tag_field("language", '["english"]') == ["english"]

    def test_empty_list(self):
        assert parse_tag_field("parody", "[]") == []

    @pytest.mark.parametrize("raw", [None, ""])
    def test_absent_or_empty_yields_nothing_without_warning(self, raw):
        with capture_logs() as logs:
            assert parse_tag_field("language", raw) == []
        assert logs == []

    def test_duplicates_are_kept(self):
        assert parse_tag_field("other", "['a','a']") == ["a", "a"]


class TestMalformedFields:
    """Malformed fields are reported and contribute no tags."""

    @pytest.mark.parametrize(
        "raw",
        [
            "['english",  # unbalanced
            "['rock 'n' roll']",  # apostrophe inside a tag
            "'english'",  # a string, not a list
            "[1, 2]",  # non-string items
            "{'a': 'b'}",  # an object
            "english",  # bare text
        ],
    )
    def test_malformed_yields_empty(self, raw):
        assert parse_tag_field("language", raw) == []

    def test_warning_names_namespace_and_raw_value(self):
        with capture_logs() as logs:
            parse_tag_field("artist", "['broken")

        assert len(logs) == 1
        entry = logs[0]
        assert entry["event"] == "tag_field_malformed"
        assert entry["log_level"] == "warning"
        assert entry["namespace"] == "artist"
        assert entry["raw"] == "['broken"

    def test_on_malformed_callback_receives_error(self):
        seen = []
        parse_tag_field("group", "['x'", on_malformed=seen.append)

        assert len(seen) == 1
        assert isinstance(seen[0], TagParseError)
        assert seen[0].namespace == "group"
        assert seen[0].raw == "['x'"

    def test_callback_not_called_for_good_fields(self):
        seen = []
        parse_tag_field("group", "['x']", on_malformed=seen.append)
        assert seen == []

    def test_non_text_value_is_malformed(self):
        seen = []
        assert parse_tag_field("language", 42, on_malformed=seen.append) == []
        assert "int" in seen[0].reason


class TestDecodeTagList:
    """The raising variant used by parse_tag_field."""

    def test_raises_tag_parse_error_with_cause(self):
        with pytest.raises(TagParseError) as exc_info:
            decode_tag_list("male", "['a',")

        error = exc_info.value
        assert isinstance(error, ParseError)
        assert isinstance(error.__cause__, json.JSONDecodeError)
        assert error.context.namespace == "male"
        assert error.context.metadata["raw"] == "['a',"

    def test_non_list_reason(self):
        with pytest.raises(TagParseError, match="expected a list"):
            decode_tag_list("male", "'solo'")

    def test_decodes_good_field(self):
        assert decode_tag_list("mixed", "['group']") == ["group"]
