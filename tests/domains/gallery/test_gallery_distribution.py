"""Tests for the dumped-date histogram."""

import pytest

from gallery_spine.domains.gallery.distribution import DistributionCounter, dumped_date
from gallery_spine.domains.gallery.models import DistributionRow

DEC_15_2024 = 1734220800  # 2024-12-15T00:00:00Z


class TestDumpedDate:
    def test_epoch(self):
        assert dumped_date(0) == "1970-01-01"

    def test_utc_day_boundaries(self):
        assert dumped_date(DEC_15_2024) == "2024-12-15"
        assert dumped_date(DEC_15_2024 + 86399) == "2024-12-15"
        assert dumped_date(DEC_15_2024 + 86400) == "2024-12-16"
        assert dumped_date(DEC_15_2024 - 1) == "2024-12-14"

    def test_none(self):
        assert dumped_date(None) is None

    @pytest.mark.parametrize("dumped", [10**12, -(10**15), 10**20])
    def test_out_of_range_is_none(self, dumped):
        assert dumped_date(dumped) is None


class TestDistributionCounter:
    def test_same_day_counts_together(self):
        counter = DistributionCounter()
        counter.observe_all([DEC_15_2024, DEC_15_2024 + 10, DEC_15_2024 + 86399])
        assert counter.rows() == [DistributionRow("2024-12-15", 3)]

    def test_rows_ascending_with_null_first(self):
        counter = DistributionCounter()
        n = counter.observe_all([DEC_15_2024 + 86400, None, 0, DEC_15_2024, None])

        assert n == 5
        assert counter.rows() == [
            DistributionRow(None, 2),
            DistributionRow("1970-01-01", 1),
            DistributionRow("2024-12-15", 1),
            DistributionRow("2024-12-16", 1),
        ]
        assert counter.null_count == 2

    def test_counts_sum_to_records(self):
        values = [DEC_15_2024 + i * 3600 for i in range(100)] + [None]
        counter = DistributionCounter()
        counter.observe_all(values)

        assert counter.total == len(values)
        assert sum(row.count for row in counter.rows()) == len(values)
        assert len({row.date for row in counter.rows()}) == len(counter)

    def test_millisecond_timestamp_joins_null_row(self):
        counter = DistributionCounter()
        n = counter.observe_all([10**12, DEC_15_2024, None])

        assert counter.rows() == [DistributionRow(None, 2), DistributionRow("2024-12-15", 1)]
        assert counter.total == n == 3

    def test_empty(self):
        counter = DistributionCounter()
        assert counter.rows() == []
        assert counter.total == 0
        assert counter.null_count == 0
