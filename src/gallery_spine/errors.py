"""
Structured error types for Gallery Spine.

Every error raised by the aggregation pipeline extends GalleryError so it
carries the same metadata: a category for routing, a structured context
(pipeline, step, source path, namespace, ...) and an optional chained cause.

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────┐
        │                      GalleryError                         │
        │            (category, context, cause)                     │
        ├──────────────────────────────────────────────────────────┤
        │  SourceError           ConfigError        PipelineError   │
        │  (SOURCE)              (CONFIG)           (PIPELINE)      │
        │     │                                        │            │
        │  SourceNotFoundError                 PipelineNotFound     │
        │  ParseError (PARSE)                                       │
        │     │                                                     │
        │  TagParseError                                            │
        │                                                           │
        │  StorageError          DatabaseError                      │
        │  (STORAGE)             (DATABASE)                         │
        └──────────────────────────────────────────────────────────┘

Recovery policy:
    - TagParseError is recovered where it is raised (one field yields no tags).
    - Source, storage and database errors abort the run.

Usage:
    from gallery_spine.errors import DatabaseError

    try:
        conn.execute(sql)
    except sqlite3.Error as e:
        raise DatabaseError("Insert failed", cause=e).with_context(table="tag_aggregate")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and reporting."""

    # Infrastructure
    DATABASE = "DATABASE"  # SQLite open/query/commit failures
    STORAGE = "STORAGE"  # Disk, file system

    # Source/data
    SOURCE = "SOURCE"  # Source catalog missing or unreadable
    PARSE = "PARSE"  # Malformed field content

    # Configuration
    CONFIG = "CONFIG"

    # Application
    PIPELINE = "PIPELINE"

    # Internal
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Attributes:
        pipeline: Pipeline name (e.g. "gallery.tag_aggregate")
        step: Step within the pipeline
        run_id: Run identifier from the log context
        path: File the error relates to (source catalog, output store)
        table: Table the error relates to
        namespace: Tag namespace for field-level errors
        metadata: Additional key-value pairs
    """

    pipeline: str | None = None
    step: str | None = None
    run_id: str | None = None
    path: str | None = None
    table: str | None = None
    namespace: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["pipeline", "step", "run_id", "path", "table", "namespace"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class GalleryError(Exception):
    """
    Base exception for all Gallery Spine errors.

    Subclasses set ``default_category`` so call sites only pass a message and,
    where one exists, the underlying exception as ``cause``.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> GalleryError:
        """
        Add context to this error (fluent API).

        Usage:
            raise StorageError("Compression failed").with_context(path=str(path))
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# SOURCE ERRORS
# =============================================================================


class SourceError(GalleryError):
    """Error reading the source catalog."""

    default_category = ErrorCategory.SOURCE


class SourceNotFoundError(SourceError):
    """Source catalog file does not exist."""

    pass


class ParseError(SourceError):
    """Error parsing source data."""

    default_category = ErrorCategory.PARSE


class TagParseError(ParseError):
    """A namespace field is not a list of strings in the single-quote convention."""

    def __init__(self, namespace: str, raw: Any, reason: str, cause: Exception | None = None):
        super().__init__(
            f"Malformed {namespace} field: {reason}",
            context=ErrorContext(namespace=namespace, metadata={"raw": raw}),
            cause=cause,
        )
        self.namespace = namespace
        self.raw = raw
        self.reason = reason


# =============================================================================
# CONFIG / PIPELINE ERRORS
# =============================================================================


class ConfigError(GalleryError):
    """Missing or invalid settings."""

    default_category = ErrorCategory.CONFIG


class PipelineError(GalleryError):
    """Pipeline execution failure."""

    default_category = ErrorCategory.PIPELINE


class PipelineNotFoundError(PipelineError):
    """Requested pipeline is not registered."""

    def __init__(self, name: str):
        super().__init__(f"Pipeline not found: {name}")
        self.name = name


class BadParamsError(PipelineError):
    """Pipeline parameters failed validation."""

    def __init__(self, name: str, errors: list[str]):
        super().__init__(f"Parameter validation failed for {name}: {errors}")
        self.errors = errors


# =============================================================================
# STORAGE ERRORS
# =============================================================================


class StorageError(GalleryError):
    """File system error (sink file, compressed artifact)."""

    default_category = ErrorCategory.STORAGE


class DatabaseError(GalleryError):
    """SQLite query or transaction error."""

    default_category = ErrorCategory.DATABASE


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "GalleryError",
    "SourceError",
    "SourceNotFoundError",
    "ParseError",
    "TagParseError",
    "ConfigError",
    "PipelineError",
    "PipelineNotFoundError",
    "BadParamsError",
    "StorageError",
    "DatabaseError",
]
