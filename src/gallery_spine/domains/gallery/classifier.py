# src/gallery_spine/domains/gallery/classifier.py

"""
Validity rule for example candidates.

A record is a valid example when it is neither expunged nor removed and was
dumped strictly after the threshold. Only valid records are listed in the
``galleries`` column; every record still counts towards tag frequencies.
"""

from datetime import date, datetime, time

from gallery_spine.domains.gallery.models import SourceRecord

VALID_DUMPED_DATE = date(2024, 12, 15)


def threshold_from_date(day: date) -> int:
    """Unix-epoch seconds of local midnight on ``day``, truncated to whole seconds."""
    return int(datetime.combine(day, time.min).timestamp())


DEFAULT_VALID_DUMPED_THRESHOLD = threshold_from_date(VALID_DUMPED_DATE)


def is_valid_record(record: SourceRecord, threshold: int = DEFAULT_VALID_DUMPED_THRESHOLD) -> bool:
    """
    Decide whether ``record`` may be listed as an example.

    Missing ``dumped`` counts as 0. Missing status flags do not equal 0, so
    such records are never valid.
    """
    return record.expunged == 0 and record.removed == 0 and (record.dumped or 0) > threshold
