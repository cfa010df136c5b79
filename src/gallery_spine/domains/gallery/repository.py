# src/gallery_spine/domains/gallery/repository.py

"""Repositories for the source catalog and the aggregated output store."""

import sqlite3
from collections.abc import Iterable, Iterator
from itertools import islice

from gallery_spine.db import transaction
from gallery_spine.domains.gallery.models import DistributionRow, SourceRecord, TagAggregateRow
from gallery_spine.errors import DatabaseError
from gallery_spine.logging import get_logger

logger = get_logger(__name__)

GALLERY_TABLE = "gallery"
TAG_AGGREGATE_TABLE = "tag_aggregate"
DUMPED_DISTRIBUTION_TABLE = "dumped_distribution"

# Latest version of each gallery: no successor pointer
CURRENT_FILTER = "current_gid IS NULL"


class GallerySourceRepository:
    """
    Read-only access to the ``gallery`` table.

    Rows are yielded in the order SQLite delivers them; bucket order in the
    aggregation depends on it.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def count_current(self) -> int:
        """Number of galleries without a successor."""
        sql = f"SELECT COUNT(*) AS count FROM {GALLERY_TABLE} WHERE {CURRENT_FILTER}"
        try:
            return self.conn.execute(sql).fetchone()[0]
        except sqlite3.Error as e:
            raise DatabaseError(f"Count query failed: {e}", cause=e).with_context(table=GALLERY_TABLE)

    def iter_current(self) -> Iterator[SourceRecord]:
        """Cursor over galleries without a successor."""
        sql = f"SELECT * FROM {GALLERY_TABLE} WHERE {CURRENT_FILTER}"
        try:
            for row in self.conn.execute(sql):
                yield SourceRecord.from_row(dict(row))
        except sqlite3.Error as e:
            raise DatabaseError(f"Gallery scan failed: {e}", cause=e).with_context(table=GALLERY_TABLE)

    def iter_dumped(self) -> Iterator[int | None]:
        """``dumped`` of every gallery, including superseded versions."""
        sql = f"SELECT dumped FROM {GALLERY_TABLE}"
        try:
            for row in self.conn.execute(sql):
                yield row[0]
        except sqlite3.Error as e:
            raise DatabaseError(f"Dumped scan failed: {e}", cause=e).with_context(table=GALLERY_TABLE)


class AggregateStore:
    """
    Write access to the aggregated output store.

    Each table is dropped, recreated and filled inside a single transaction,
    so a failed write leaves no partially filled table behind.
    """

    def __init__(self, conn: sqlite3.Connection, batch_size: int = 10_000):
        self.conn = conn
        self.batch_size = batch_size

    def write_tag_aggregate(self, rows: Iterable[TagAggregateRow]) -> int:
        """Replace ``tag_aggregate`` with ``rows``; returns rows written."""
        return self._replace_table(
            TAG_AGGREGATE_TABLE,
            """
            CREATE TABLE tag_aggregate (
                namespace TEXT,
                tag TEXT,
                count INTEGER,
                galleries TEXT
            )
            """,
            "INSERT INTO tag_aggregate (namespace, tag, count, galleries) VALUES (?, ?, ?, ?)",
            (row.as_tuple() for row in rows),
        )

    def write_dumped_distribution(self, rows: Iterable[DistributionRow]) -> int:
        """Replace ``dumped_distribution`` with ``rows``; returns rows written."""
        return self._replace_table(
            DUMPED_DISTRIBUTION_TABLE,
            """
            CREATE TABLE dumped_distribution (
                date TEXT,
                count INTEGER
            )
            """,
            "INSERT INTO dumped_distribution (date, count) VALUES (?, ?)",
            (row.as_tuple() for row in rows),
        )

    def read_tag_aggregate(self, namespace: str | None = None, limit: int | None = None) -> list[TagAggregateRow]:
        """Rows in stored order, optionally filtered by namespace."""
        sql = f"SELECT namespace, tag, count, galleries FROM {TAG_AGGREGATE_TABLE}"
        params: list = []
        if namespace is not None:
            sql += " WHERE namespace = ?"
            params.append(namespace)
        sql += " ORDER BY rowid"
        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)
        try:
            return [TagAggregateRow(*row) for row in self.conn.execute(sql, params)]
        except sqlite3.Error as e:
            raise DatabaseError(f"Read failed: {e}", cause=e).with_context(table=TAG_AGGREGATE_TABLE)

    def read_dumped_distribution(self) -> list[DistributionRow]:
        sql = f"SELECT date, count FROM {DUMPED_DISTRIBUTION_TABLE} ORDER BY rowid"
        try:
            return [DistributionRow(*row) for row in self.conn.execute(sql)]
        except sqlite3.Error as e:
            raise DatabaseError(f"Read failed: {e}", cause=e).with_context(table=DUMPED_DISTRIBUTION_TABLE)

    def _replace_table(self, table: str, create_sql: str, insert_sql: str, rows: Iterable[tuple]) -> int:
        written = 0
        rows = iter(rows)
        try:
            with transaction(self.conn) as conn:
                conn.execute(f"DROP TABLE IF EXISTS {table}")
                conn.execute(create_sql)
                while batch := list(islice(rows, self.batch_size)):
                    conn.executemany(insert_sql, batch)
                    written += len(batch)
        except sqlite3.Error as e:
            raise DatabaseError(f"Writing {table} failed: {e}", cause=e).with_context(table=table)

        logger.debug("table_replaced", table=table, rows=written)
        return written
