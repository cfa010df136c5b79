# src/gallery_spine/domains/gallery/aggregation.py

"""
Streaming tag aggregation.

One AggregationTable is created per run and fed every record of the catalog
in delivery order. Each (namespace, tag) pair gets a bucket on first sight;
the bucket counts every occurrence and collects the valid ones as example
candidates. Ranking and truncation happen later, in ``ranking``, so a
candidate seen late in the stream is never discarded early.
"""

import heapq
from collections.abc import Callable, Iterator
from typing import Any

from gallery_spine.domains.gallery.models import NAMESPACES, Candidate, SourceRecord, TagKey
from gallery_spine.domains.gallery.parser import parse_tag_field

FieldParser = Callable[[str, Any], list[str]]


class CandidatePool:
    """
    Example candidates of one bucket.

    Unbounded by default. With ``limit`` set, only the ``limit`` best
    candidates by (posted desc, arrival asc) are retained, which ranks
    identically to the unbounded pool for any ranking limit <= ``limit``.
    """

    __slots__ = ("limit", "_items", "_heap", "_seq")

    def __init__(self, limit: int | None = None):
        if limit is not None and limit < 1:
            raise ValueError(f"limit must be positive, got {limit}")
        self.limit = limit
        self._items: list[Candidate] = []
        # (posted, -seq, candidate): heap[0] is the candidate to evict next
        self._heap: list[tuple[int, int, Candidate]] = []
        self._seq = 0

    def add(self, candidate: Candidate) -> None:
        if self.limit is None:
            self._items.append(candidate)
            return

        entry = (candidate.posted, -self._seq, candidate)
        self._seq += 1
        if len(self._heap) < self.limit:
            heapq.heappush(self._heap, entry)
        elif entry[:2] > self._heap[0][:2]:
            heapq.heapreplace(self._heap, entry)

    def candidates(self) -> list[Candidate]:
        """Retained candidates in arrival order."""
        if self.limit is None:
            return list(self._items)
        return [c for _, _, c in sorted(self._heap, key=lambda e: -e[1])]

    def __len__(self) -> int:
        return len(self._items) if self.limit is None else len(self._heap)

    def __iter__(self) -> Iterator[Candidate]:
        return iter(self.candidates())


class AggregationBucket:
    """Occurrence count and example candidates of one tag key."""

    __slots__ = ("count", "candidates")

    def __init__(self, pool_limit: int | None = None):
        self.count = 0
        self.candidates = CandidatePool(pool_limit)

    def __repr__(self) -> str:
        return f"AggregationBucket(count={self.count}, candidates={len(self.candidates)})"


class AggregationTable:
    """
    Mapping from TagKey to AggregationBucket for one aggregation run.

    Buckets are kept in first-observation order. Repeated occurrences are not
    deduplicated: a tag listed twice on one record counts twice.

    Usage:
        table = AggregationTable()
        for record in records:
            table.observe_record(record, is_valid_record(record))
        entries = table.drain()
    """

    def __init__(self, pool_limit: int | None = None):
        self.pool_limit = pool_limit
        self._buckets: dict[TagKey, AggregationBucket] = {}
        self.occurrences = 0

    def observe(
        self,
        namespace: str,
        tag: str,
        occurrence_is_valid: bool,
        gid: int,
        token: str,
        posted: int | None,
    ) -> AggregationBucket:
        """Record one occurrence of ``tag`` in ``namespace``."""
        key = TagKey(namespace, tag)
        bucket = self._buckets.get(key)
        if bucket is None:
            bucket = AggregationBucket(self.pool_limit)
            self._buckets[key] = bucket

        bucket.count += 1
        self.occurrences += 1
        if occurrence_is_valid:
            bucket.candidates.add(Candidate(gid=gid, token=token, posted=posted or 0))
        return bucket

    def observe_record(
        self,
        record: SourceRecord,
        valid: bool,
        parse: FieldParser = parse_tag_field,
    ) -> int:
        """
        Record every tag of every namespace field of ``record``.

        Returns:
            Number of tag occurrences observed
        """
        observed = 0
        for namespace in NAMESPACES:
            raw = record.tag_field(namespace)
            if not raw:
                continue
            for tag in parse(namespace, raw):
                self.observe(namespace, tag, valid, record.gid, record.token, record.posted)
                observed += 1
        return observed

    def get(self, key: TagKey) -> AggregationBucket | None:
        return self._buckets.get(key)

    def drain(self) -> list[tuple[TagKey, AggregationBucket]]:
        """Return all buckets in first-observation order and empty the table."""
        entries = list(self._buckets.items())
        self._buckets = {}
        self.occurrences = 0
        return entries

    def __len__(self) -> int:
        return len(self._buckets)

    def __contains__(self, key: object) -> bool:
        return key in self._buckets
