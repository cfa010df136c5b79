# src/gallery_spine/domains/gallery/ranking.py

"""
Ranking of example candidates and ordering of output rows.

Both sorts are stable: candidates with equal ``posted`` keep arrival order,
and tag keys with equal ``count`` keep first-observation order.
"""

from collections.abc import Iterable, Iterator

from gallery_spine.domains.gallery.aggregation import AggregationBucket
from gallery_spine.domains.gallery.models import Candidate, TagAggregateRow, TagKey

EXAMPLES_PER_TAG = 5


def rank_candidates(candidates: Iterable[Candidate], limit: int = EXAMPLES_PER_TAG) -> list[Candidate]:
    """Most recently posted first, truncated to ``limit``."""
    return sorted(candidates, key=lambda c: c.posted, reverse=True)[:limit]


def render_galleries(candidates: Iterable[Candidate]) -> str:
    """Newline-joined ``gid/token`` refs; empty string when there are none."""
    return "\n".join(c.ref for c in candidates)


def rank_galleries(candidates: Iterable[Candidate], limit: int = EXAMPLES_PER_TAG) -> str:
    return render_galleries(rank_candidates(candidates, limit))


def order_by_count(
    entries: Iterable[tuple[TagKey, AggregationBucket]],
) -> list[tuple[TagKey, AggregationBucket]]:
    """Sort drained buckets by count descending."""
    return sorted(entries, key=lambda entry: entry[1].count, reverse=True)


def finalize(
    entries: Iterable[tuple[TagKey, AggregationBucket]],
    limit: int = EXAMPLES_PER_TAG,
) -> Iterator[TagAggregateRow]:
    """
    Turn drained buckets into output rows, most frequent tags first.

    Args:
        entries: Output of ``AggregationTable.drain()``
        limit: Number of example galleries per tag
    """
    for key, bucket in order_by_count(entries):
        yield TagAggregateRow(
            namespace=key.namespace,
            tag=key.tag,
            count=bucket.count,
            galleries=rank_galleries(bucket.candidates, limit),
        )
