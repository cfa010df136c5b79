# src/gallery_spine/domains/gallery/distribution.py

"""
Histogram of the ``dumped`` timestamp by UTC calendar date.

Runs over the whole ``gallery`` table with no validity or version filter.
Records without a usable ``dumped`` value are kept in a bucket whose date is None,
so the row counts always add up to the number of records.
"""

from collections import Counter
from collections.abc import Iterable
from datetime import UTC, datetime

from gallery_spine.domains.gallery.models import DistributionRow


def dumped_date(dumped: int | float | None) -> str | None:
    """
    UTC calendar date (``YYYY-MM-DD``) of a Unix timestamp.

    None, and timestamps outside the representable date range (e.g. values in
    milliseconds), map to None like SQLite's ``date(dumped, 'unixepoch')``.
    """
    if dumped is None:
        return None
    try:
        return datetime.fromtimestamp(dumped, tz=UTC).strftime("%Y-%m-%d")
    except (ValueError, OverflowError, OSError):
        return None


class DistributionCounter:
    """
    Count records per ``dumped`` date.

    Usage:
        counter = DistributionCounter()
        counter.observe_all(repo.iter_dumped())
        rows = counter.rows()
    """

    def __init__(self):
        self._counts: Counter[str | None] = Counter()

    def observe(self, dumped: int | float | None) -> None:
        self._counts[dumped_date(dumped)] += 1

    def observe_all(self, values: Iterable[int | float | None]) -> int:
        n = 0
        for value in values:
            self.observe(value)
            n += 1
        return n

    @property
    def total(self) -> int:
        return sum(self._counts.values())

    @property
    def null_count(self) -> int:
        return self._counts.get(None, 0)

    def rows(self) -> list[DistributionRow]:
        """Rows by ascending date, the NULL date first."""
        ordered = sorted(self._counts.items(), key=lambda item: (item[0] is not None, item[0] or ""))
        return [DistributionRow(date=day, count=count) for day, count in ordered]

    def __len__(self) -> int:
        return len(self._counts)
