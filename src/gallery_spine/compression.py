"""Gzip packaging of the finished output store."""

import gzip
import os
import shutil
from pathlib import Path

from gallery_spine.errors import StorageError
from gallery_spine.logging import get_logger

logger = get_logger(__name__)

CHUNK_SIZE = 1024 * 1024


def gzip_file(path: Path, level: int = 9, destination: Path | None = None) -> Path:
    """
    Compress ``path`` into ``<path>.gz`` (or ``destination``).

    The archive is streamed into a temporary sibling and renamed on success,
    so an interrupted run never leaves a truncated ``.gz`` behind.

    Returns:
        Path of the compressed artifact
    """
    path = Path(path)
    target = Path(destination) if destination else path.with_name(path.name + ".gz")
    partial = target.with_name(target.name + ".part")

    try:
        with open(path, "rb") as src, gzip.open(partial, "wb", compresslevel=level) as dst:
            shutil.copyfileobj(src, dst, CHUNK_SIZE)
        os.replace(partial, target)
    except OSError as e:
        partial.unlink(missing_ok=True)
        raise StorageError(f"Compression failed: {e}", cause=e).with_context(path=str(path))

    logger.info(
        "compression.done",
        source=str(path),
        artifact=str(target),
        bytes_in=path.stat().st_size,
        bytes_out=target.stat().st_size,
        level=level,
    )
    return target
