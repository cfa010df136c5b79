# src/gallery_spine/domains/gallery/pipelines.py

"""
Gallery pipelines - tag aggregation, dumped distribution, compression.

``gallery.build`` is the end-to-end run: fresh output store, tag pass,
distribution pass, gzip. The other pipelines run one step against an
existing output store.
"""

import math
from collections.abc import Iterable
from contextlib import closing
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from gallery_spine.compression import gzip_file
from gallery_spine.config import Settings, get_settings
from gallery_spine.db import connect_output, connect_source, remove_database
from gallery_spine.domains.gallery.aggregation import AggregationTable
from gallery_spine.domains.gallery.classifier import is_valid_record
from gallery_spine.domains.gallery.distribution import DistributionCounter
from gallery_spine.domains.gallery.models import AggregateSummary, DistributionSummary, SourceRecord
from gallery_spine.domains.gallery.parser import parse_tag_field
from gallery_spine.domains.gallery.ranking import finalize
from gallery_spine.domains.gallery.repository import AggregateStore, GallerySourceRepository
from gallery_spine.errors import TagParseError
from gallery_spine.logging import bind_context, get_logger, log_step
from gallery_spine.pipelines.base import Pipeline

logger = get_logger(__name__)

TOP_TAGS_REPORTED = 10


class ProgressTracker:
    """Logs a progress event roughly every 1% of ``total``."""

    def __init__(self, total: int, event: str = "tag_aggregate.progress", steps: int = 100):
        self.total = total
        self.event = event
        self.interval = max(1, math.ceil(total / steps))
        self.processed = 0

    def advance(self) -> None:
        self.processed += 1
        if self.processed % self.interval == 0:
            percent = self.processed / self.total * 100 if self.total else 100.0
            logger.info(self.event, processed=self.processed, total=self.total, percent=round(percent, 2))


# =============================================================================
# PASSES
# =============================================================================


def scan_catalog(
    records: Iterable[SourceRecord],
    table: AggregationTable,
    threshold: int,
    progress: ProgressTracker | None = None,
) -> AggregateSummary:
    """
    Feed every record into ``table`` in one pass.

    Returns:
        Summary with processed/valid/occurrence/malformed counts
    """
    summary = AggregateSummary(total=progress.total if progress else 0)

    def count_malformed(error: TagParseError) -> None:
        summary.malformed_fields += 1

    def parse(namespace: str, raw: Any) -> list[str]:
        return parse_tag_field(namespace, raw, on_malformed=count_malformed)

    for record in records:
        valid = is_valid_record(record, threshold)
        summary.occurrences += table.observe_record(record, valid, parse)
        summary.processed += 1
        if valid:
            summary.valid_records += 1
        if progress is not None:
            progress.advance()

    return summary


def build_tag_aggregate(
    source: GallerySourceRepository,
    store: AggregateStore,
    threshold: int,
    examples_per_tag: int = 5,
    pool_limit: int | None = None,
) -> AggregateSummary:
    """Aggregate tags of current galleries and write ``tag_aggregate``."""
    if pool_limit is not None and pool_limit < examples_per_tag:
        raise ValueError(f"pool_limit ({pool_limit}) must be at least examples_per_tag ({examples_per_tag})")

    total = source.count_current()
    logger.info("tag_aggregate.total", total=total)

    table = AggregationTable(pool_limit=pool_limit)
    with log_step("tag_aggregate.scan", total=total) as timer:
        summary = scan_catalog(source.iter_current(), table, threshold, ProgressTracker(total))
        timer.add_metric("processed", summary.processed)
        timer.add_metric("tag_keys", len(table))

    if summary.malformed_fields:
        logger.warning("tag_aggregate.malformed_fields", count=summary.malformed_fields)

    entries = table.drain()
    summary.tag_keys = len(entries)
    rows = list(finalize(entries, examples_per_tag))

    with log_step("tag_aggregate.write", rows_in=len(rows)) as timer:
        summary.rows_written = store.write_tag_aggregate(rows)
        timer.add_metric("rows_out", summary.rows_written)

    summary.top_tags = rows[:TOP_TAGS_REPORTED]
    return summary


def build_dumped_distribution(source: GallerySourceRepository, store: AggregateStore) -> DistributionSummary:
    """Count every gallery by ``dumped`` date and write ``dumped_distribution``."""
    counter = DistributionCounter()
    with log_step("dumped_distribution.scan") as timer:
        records = counter.observe_all(source.iter_dumped())
        timer.add_metric("records", records)

    rows = counter.rows()
    with log_step("dumped_distribution.write", rows_in=len(rows)) as timer:
        written = store.write_dumped_distribution(rows)
        timer.add_metric("rows_out", written)

    return DistributionSummary(
        records=records,
        dates=sum(1 for row in rows if row.date is not None),
        null_dumped=counter.null_count,
        rows_written=written,
    )


# =============================================================================
# PARAMETERS
# =============================================================================


@dataclass
class GalleryParams:
    """Pipeline parameters with settings as fallback."""

    source_path: Path
    output_path: Path
    threshold: int
    examples_per_tag: int
    pool_limit: int | None
    batch_size: int
    compress: bool
    compression_level: int

    @classmethod
    def resolve(cls, params: dict[str, Any], settings: Settings | None = None) -> "GalleryParams":
        settings = settings or get_settings()
        threshold = params.get("threshold")
        return cls(
            source_path=Path(params.get("source_path") or settings.source_path),
            output_path=Path(params.get("output_path") or settings.output_path),
            threshold=int(threshold) if threshold is not None else settings.dumped_threshold,
            examples_per_tag=int(params.get("examples_per_tag", settings.examples_per_tag)),
            pool_limit=params.get("pool_limit", settings.candidate_pool_limit),
            batch_size=settings.insert_batch_size,
            compress=bool(params.get("compress", settings.compress_output)),
            compression_level=int(params.get("compression_level", settings.compression_level)),
        )


class GalleryPipeline(Pipeline):
    """Shared parameter validation."""

    def validate_params(self, params: dict[str, Any]) -> list[str]:
        errors = []
        threshold = params.get("threshold")
        if threshold is not None and not isinstance(threshold, int):
            errors.append("threshold must be an integer Unix timestamp")
        examples = params.get("examples_per_tag")
        if examples is not None and (not isinstance(examples, int) or examples < 0):
            errors.append("examples_per_tag must be a non-negative integer")
        pool_limit = params.get("pool_limit")
        if pool_limit is not None and (not isinstance(pool_limit, int) or pool_limit < 1):
            errors.append("pool_limit must be a positive integer")
        elif pool_limit is not None or examples is not None:
            settings = get_settings()
            limit = pool_limit if pool_limit is not None else settings.candidate_pool_limit
            wanted = examples if isinstance(examples, int) else settings.examples_per_tag
            if limit is not None and limit < wanted:
                errors.append(f"pool_limit ({limit}) must be at least examples_per_tag ({wanted})")
        level = params.get("compression_level")
        if level is not None and level not in range(1, 10):
            errors.append("compression_level must be between 1 and 9")
        return errors


# =============================================================================
# PIPELINES
# =============================================================================


class TagAggregatePipeline(GalleryPipeline):
    """Aggregate tags into the output store."""

    name = "gallery.tag_aggregate"
    description = "Aggregate tag counts and example galleries"

    def execute(self, params: dict[str, Any]) -> dict[str, Any]:
        p = GalleryParams.resolve(params)
        bind_context(source=str(p.source_path), output=str(p.output_path))

        with closing(connect_source(p.source_path)) as src, closing(connect_output(p.output_path)) as out:
            summary = build_tag_aggregate(
                GallerySourceRepository(src),
                AggregateStore(out, p.batch_size),
                threshold=p.threshold,
                examples_per_tag=p.examples_per_tag,
                pool_limit=p.pool_limit,
            )

        return {"tags": summary.to_dict(), "top_tags": [asdict(r) for r in summary.top_tags]}


class DumpedDistributionPipeline(GalleryPipeline):
    """Histogram of dumped dates into the output store."""

    name = "gallery.dumped_distribution"
    description = "Count galleries per dumped date"

    def execute(self, params: dict[str, Any]) -> dict[str, Any]:
        p = GalleryParams.resolve(params)
        bind_context(source=str(p.source_path), output=str(p.output_path))

        with closing(connect_source(p.source_path)) as src, closing(connect_output(p.output_path)) as out:
            summary = build_dumped_distribution(
                GallerySourceRepository(src),
                AggregateStore(out, p.batch_size),
            )

        return {"distribution": summary.to_dict()}


class CompressPipeline(GalleryPipeline):
    """Gzip the output store."""

    name = "gallery.compress"
    description = "Compress the output store to .gz"

    def execute(self, params: dict[str, Any]) -> dict[str, Any]:
        p = GalleryParams.resolve(params)
        bind_context(output=str(p.output_path))
        artifact = gzip_file(p.output_path, level=p.compression_level)
        return {"artifact": str(artifact)}


class BuildPipeline(GalleryPipeline):
    """
    End-to-end run.

    The output store is recreated from scratch. If either pass fails the
    output file is deleted, so a usable store only exists after a complete
    run. Compression runs last.
    """

    name = "gallery.build"
    description = "Build the aggregated store and compress it"

    def execute(self, params: dict[str, Any]) -> dict[str, Any]:
        p = GalleryParams.resolve(params)
        bind_context(source=str(p.source_path), output=str(p.output_path))

        with closing(connect_source(p.source_path)) as src:
            source = GallerySourceRepository(src)
            if remove_database(p.output_path):
                logger.info("output_replaced", path=str(p.output_path))
            try:
                with closing(connect_output(p.output_path)) as out:
                    store = AggregateStore(out, p.batch_size)
                    tags = build_tag_aggregate(
                        source,
                        store,
                        threshold=p.threshold,
                        examples_per_tag=p.examples_per_tag,
                        pool_limit=p.pool_limit,
                    )
                    logger.info("tag_aggregate.complete", rows=tags.rows_written)

                    distribution = build_dumped_distribution(source, store)
                    logger.info("dumped_distribution.complete", rows=distribution.rows_written)
            except Exception:
                remove_database(p.output_path)
                logger.warning("output_discarded", path=str(p.output_path))
                raise

        artifact = None
        if p.compress:
            artifact = str(gzip_file(p.output_path, level=p.compression_level))

        return {
            "output": str(p.output_path),
            "artifact": artifact,
            "tags": tags.to_dict(),
            "distribution": distribution.to_dict(),
            "top_tags": [asdict(r) for r in tags.top_tags],
        }


def register_gallery_pipelines(registry):
    """Register gallery pipelines with the registry."""
    registry.register(TagAggregatePipeline)
    registry.register(DumpedDistributionPipeline)
    registry.register(CompressPipeline)
    registry.register(BuildPipeline)
