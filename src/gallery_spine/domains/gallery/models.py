# src/gallery_spine/domains/gallery/models.py

"""
Gallery catalog - Data Models

Source records come from the ``gallery`` table of the metadata dump. Output
rows are written to the ``tag_aggregate`` and ``dumped_distribution`` tables
of the aggregated store.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Any, NamedTuple


# =============================================================================
# NAMESPACES (frozen values - these are the scanned column names)
# =============================================================================


NAMESPACES: tuple[str, ...] = (
    "reclass",
    "language",
    "parody",
    "character",
    "group",
    "artist",
    "cosplayer",
    "male",
    "female",
    "mixed",
    "other",
)


# =============================================================================
# SOURCE DATA (one row of the gallery table)
# =============================================================================


@dataclass(frozen=True)
class SourceRecord:
    """
    One row of the ``gallery`` table.

    Namespace columns hold list literals such as ``"['english','translated']"``.
    Every column except ``gid`` and ``token`` may be NULL or missing from the
    row entirely; both cases are represented as None.
    """

    gid: int
    token: str

    # Tag namespaces
    reclass: str | None = None
    language: str | None = None
    parody: str | None = None
    character: str | None = None
    group: str | None = None
    artist: str | None = None
    cosplayer: str | None = None
    male: str | None = None
    female: str | None = None
    mixed: str | None = None
    other: str | None = None

    # Status flags (0/1)
    expunged: int | None = None
    removed: int | None = None

    # Unix timestamps
    dumped: int | None = None
    posted: int | None = None

    # Informational columns
    title: str | None = None
    title_jpn: str | None = None
    uploader: str | None = None
    rating: float | None = None

    # Version chain
    parent_gid: int | None = None
    parent_key: str | None = None
    first_gid: int | None = None
    first_key: str | None = None
    current_gid: int | None = None
    current_key: str | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "SourceRecord":
        """Build a record from a row mapping; absent columns become None."""
        values = {f.name: row.get(f.name) for f in fields(cls)}
        return cls(**values)

    def tag_field(self, namespace: str) -> str | None:
        """Raw value of one namespace column."""
        if namespace not in NAMESPACES:
            raise KeyError(namespace)
        return getattr(self, namespace)


# =============================================================================
# AGGREGATION STATE
# =============================================================================


class TagKey(NamedTuple):
    """Identifies one aggregation bucket."""

    namespace: str
    tag: str


@dataclass(frozen=True)
class Candidate:
    """A valid gallery that can be listed as an example of a tag."""

    gid: int
    token: str
    posted: int = 0

    @property
    def ref(self) -> str:
        """Rendered as ``gid/token``."""
        return f"{self.gid}/{self.token}"


# =============================================================================
# OUTPUT ROWS
# =============================================================================


@dataclass(frozen=True)
class TagAggregateRow:
    """One row of the ``tag_aggregate`` table."""

    namespace: str
    tag: str
    count: int
    galleries: str

    def as_tuple(self) -> tuple[str, str, int, str]:
        return (self.namespace, self.tag, self.count, self.galleries)


@dataclass(frozen=True)
class DistributionRow:
    """One row of the ``dumped_distribution`` table (date is None for NULL dumped)."""

    date: str | None
    count: int

    def as_tuple(self) -> tuple[str | None, int]:
        return (self.date, self.count)


# =============================================================================
# PIPELINE RESULTS
# =============================================================================


@dataclass
class AggregateSummary:
    """Result of the tag aggregation pass."""

    total: int = 0
    processed: int = 0
    valid_records: int = 0
    tag_keys: int = 0
    occurrences: int = 0
    malformed_fields: int = 0
    rows_written: int = 0
    top_tags: list[TagAggregateRow] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "processed": self.processed,
            "valid_records": self.valid_records,
            "tag_keys": self.tag_keys,
            "occurrences": self.occurrences,
            "malformed_fields": self.malformed_fields,
            "rows_written": self.rows_written,
        }


@dataclass
class DistributionSummary:
    """Result of the dumped distribution pass."""

    records: int = 0
    dates: int = 0
    null_dumped: int = 0
    rows_written: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "records": self.records,
            "dates": self.dates,
            "null_dumped": self.null_dumped,
            "rows_written": self.rows_written,
        }
