"""Tests for the source catalog and output store repositories."""

import sqlite3

import pytest

from gallery_fixtures import gallery
from gallery_spine.db import connect_output, connect_source
from gallery_spine.domains.gallery.models import DistributionRow, TagAggregateRow
from gallery_spine.domains.gallery.repository import AggregateStore, GallerySourceRepository
from gallery_spine.errors import DatabaseError


@pytest.fixture
def store(tmp_path):
    conn = connect_output(tmp_path / "aggregated.sqlite")
    yield AggregateStore(conn)
    conn.close()


def rows(n: int, prefix: str = "tag") -> list[TagAggregateRow]:
    return [TagAggregateRow("other", f"{prefix}{i}", n - i, f"{i}/t{i}") for i in range(n)]


class TestGallerySourceRepository:
    def test_only_current_versions_are_scanned(self, make_catalog):
        path = make_catalog(
            [
                gallery(1, current_gid=3, current_key="ccc"),
                gallery(2),
                gallery(3, parent_gid=1),
            ]
        )
        with connect_source(path) as conn:
            repo = GallerySourceRepository(conn)
            assert repo.count_current() == 2
            assert [r.gid for r in repo.iter_current()] == [2, 3]

    def test_iter_dumped_includes_superseded(self, make_catalog):
        path = make_catalog([gallery(1, current_gid=2, dumped=10), gallery(2, dumped=None)])
        with connect_source(path) as conn:
            assert list(GallerySourceRepository(conn).iter_dumped()) == [10, None]

    def test_missing_columns_become_none(self, make_catalog):
        columns = {"gid": "INTEGER", "token": "TEXT", "language": "TEXT", "current_gid": "INTEGER"}
        path = make_catalog([gallery(5, "eee", language="['english']")], columns=columns)
        with connect_source(path) as conn:
            (record,) = GallerySourceRepository(conn).iter_current()

        assert record.language == "['english']"
        assert record.expunged is None
        assert record.dumped is None
        assert record.posted is None

    def test_missing_table_is_database_error(self, tmp_path):
        path = tmp_path / "empty.sqlite"
        sqlite3.connect(path).close()
        with connect_source(path) as conn:
            with pytest.raises(DatabaseError):
                GallerySourceRepository(conn).count_current()

    def test_source_is_read_only(self, two_record_catalog):
        with connect_source(two_record_catalog) as conn:
            with pytest.raises(sqlite3.OperationalError):
                conn.execute("DELETE FROM gallery")


class TestAggregateStore:
    def test_write_and_read_back_in_order(self, store):
        written = store.write_tag_aggregate(rows(3))

        assert written == 3
        assert store.read_tag_aggregate() == rows(3)

    def test_read_filters(self, store):
        store.write_tag_aggregate(
            [
                TagAggregateRow("language", "english", 5, "1/a"),
                TagAggregateRow("artist", "x", 4, ""),
                TagAggregateRow("language", "japanese", 3, "2/b"),
            ]
        )
        assert [r.tag for r in store.read_tag_aggregate(namespace="language")] == ["english", "japanese"]
        assert len(store.read_tag_aggregate(limit=2)) == 2

    def test_rewrite_replaces_table(self, store):
        store.write_tag_aggregate(rows(5, "old"))
        store.write_tag_aggregate(rows(2, "new"))
        assert [r.tag for r in store.read_tag_aggregate()] == ["new0", "new1"]

    def test_batches_smaller_than_rows(self, store):
        store.batch_size = 2
        assert store.write_tag_aggregate(rows(7)) == 7
        assert len(store.read_tag_aggregate()) == 7

    def test_failed_write_keeps_previous_table(self, store):
        store.write_tag_aggregate(rows(3, "old"))

        def broken():
            yield from rows(1, "new")
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            store.write_tag_aggregate(broken())

        assert [r.tag for r in store.read_tag_aggregate()] == ["old0", "old1", "old2"]
        assert not store.conn.in_transaction

    def test_distribution_round_trip_with_null_date(self, store):
        written = store.write_dumped_distribution([DistributionRow(None, 2), DistributionRow("2024-12-15", 4)])

        assert written == 2
        assert store.read_dumped_distribution() == [DistributionRow(None, 2), DistributionRow("2024-12-15", 4)]

    def test_schema(self, store):
        store.write_tag_aggregate([])
        store.write_dumped_distribution([])
        columns = {
            table: [row[1] for row in store.conn.execute(f"PRAGMA table_info({table})")]
            for table in ("tag_aggregate", "dumped_distribution")
        }
        assert columns == {
            "tag_aggregate": ["namespace", "tag", "count", "galleries"],
            "dumped_distribution": ["date", "count"],
        }

    def test_read_missing_table(self, store):
        with pytest.raises(DatabaseError):
            store.read_tag_aggregate()
