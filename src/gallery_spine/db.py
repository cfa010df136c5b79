"""SQLite connection and transaction management."""

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from gallery_spine.errors import DatabaseError, SourceNotFoundError, StorageError
from gallery_spine.logging import get_logger

logger = get_logger(__name__)


def connect_source(path: Path) -> sqlite3.Connection:
    """
    Open the source catalog read-only.

    Raises:
        SourceNotFoundError: The file does not exist
        DatabaseError: SQLite could not open it
    """
    path = Path(path)
    if not path.is_file():
        raise SourceNotFoundError(f"Source catalog not found: {path}").with_context(path=str(path))

    try:
        conn = sqlite3.connect(f"{path.resolve().as_uri()}?mode=ro", uri=True)
    except sqlite3.Error as e:
        raise DatabaseError(f"Cannot open source catalog: {e}", cause=e).with_context(path=str(path))

    conn.row_factory = sqlite3.Row
    logger.debug("source_opened", path=str(path))
    return conn


def connect_output(path: Path) -> sqlite3.Connection:
    """Open (creating if needed) the output store; transactions are managed explicitly."""
    path = Path(path)
    try:
        conn = sqlite3.connect(
            path,
            isolation_level=None,  # autocommit mode, we manage transactions explicitly
        )
    except sqlite3.Error as e:
        raise DatabaseError(f"Cannot open output store: {e}", cause=e).with_context(path=str(path))

    logger.debug("output_opened", path=str(path))
    return conn


@contextmanager
def transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """Context manager for database transactions."""
    conn.execute("BEGIN")
    try:
        yield conn
        conn.execute("COMMIT")
    except Exception:
        if conn.in_transaction:
            conn.execute("ROLLBACK")
        raise


def remove_database(path: Path) -> bool:
    """
    Delete a database file and its journal, if present.

    Returns:
        True if the main file existed
    """
    path = Path(path)
    existed = path.exists()
    try:
        for candidate in (path, path.with_name(path.name + "-journal")):
            candidate.unlink(missing_ok=True)
    except OSError as e:
        raise StorageError(f"Cannot remove {path}: {e}", cause=e).with_context(path=str(path))
    if existed:
        logger.debug("database_removed", path=str(path))
    return existed
