"""Tests for the example validity rule."""

from datetime import date, datetime

import pytest

from gallery_spine.domains.gallery.classifier import (
    DEFAULT_VALID_DUMPED_THRESHOLD,
    VALID_DUMPED_DATE,
    is_valid_record,
    threshold_from_date,
)
from gallery_spine.domains.gallery.models import SourceRecord

THRESHOLD = DEFAULT_VALID_DUMPED_THRESHOLD


def record(**fields) -> SourceRecord:
    values = {"gid": 1, "token": "abc", "expunged": 0, "removed": 0, "dumped": THRESHOLD + 86400}
    values.update(fields)
    return SourceRecord(**values)


class TestThreshold:
    def test_default_date(self):
        assert VALID_DUMPED_DATE == date(2024, 12, 15)

    def test_local_midnight(self):
        assert threshold_from_date(date(2024, 12, 15)) == int(datetime(2024, 12, 15).timestamp())

    def test_default_threshold_matches_date(self):
        assert DEFAULT_VALID_DUMPED_THRESHOLD == threshold_from_date(VALID_DUMPED_DATE)

    def test_whole_seconds(self):
        assert isinstance(threshold_from_date(date(2020, 1, 1)), int)


class TestIsValidRecord:
    def test_valid(self):
        assert is_valid_record(record()) is True

    def test_expunged_is_invalid(self):
        assert is_valid_record(record(expunged=1)) is False

    def test_removed_is_invalid(self):
        assert is_valid_record(record(removed=1)) is False

    def test_dumped_equal_to_threshold_is_invalid(self):
        assert is_valid_record(record(dumped=THRESHOLD)) is False

    def test_one_second_after_threshold_is_valid(self):
        assert is_valid_record(record(dumped=THRESHOLD + 1)) is True

    def test_before_threshold_is_invalid(self):
        assert is_valid_record(record(dumped=THRESHOLD - 1)) is False

    def test_missing_dumped_is_invalid(self):
        assert is_valid_record(record(dumped=None)) is False

    @pytest.mark.parametrize("flag", ["expunged", "removed"])
    def test_missing_status_flag_is_invalid(self, flag):
        assert is_valid_record(record(**{flag: None})) is False

    def test_custom_threshold(self):
        assert is_valid_record(record(dumped=1_000), threshold=999) is True
        assert is_valid_record(record(dumped=1_000), threshold=1_000) is False

    def test_boolean_flags(self):
        assert is_valid_record(record(expunged=False, removed=False)) is True
        assert is_valid_record(record(expunged=True)) is False
