"""
Gallery Spine - tag aggregation over a gallery metadata catalog.

Reads the ``gallery`` table of a metadata dump, aggregates tag frequencies with
example galleries per tag, counts galleries per dumped date, and writes both
into a fresh SQLite store that is then gzipped for distribution.

Layout:
- gallery_spine.domains.gallery: parsing, validity, aggregation, ranking
- gallery_spine.pipelines / registry / runner: execution
- gallery_spine.cli: command line entry point
"""

__version__ = "0.1.0"

from gallery_spine.logging import configure_logging, get_logger

__all__ = [
    "__version__",
    "configure_logging",
    "get_logger",
]
