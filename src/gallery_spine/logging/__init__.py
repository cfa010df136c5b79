"""
Gallery Spine Logging - Structured, run-aware logging.

This module provides:
- Structured logging with structlog
- Run context propagation via contextvars
- Timing utilities for step durations

Usage:
    from gallery_spine.logging import get_logger, configure_logging, log_step, set_context

    configure_logging()
    log = get_logger(__name__)

    set_context(run_id="abc123", pipeline="gallery.tag_aggregate")

    with log_step("tag_aggregate.scan"):
        scan_catalog()
"""

from gallery_spine.logging.config import configure_logging, is_configured
from gallery_spine.logging.context import (
    LogContext,
    bind_context,
    clear_context,
    get_context,
    get_logger,
    new_run_id,
    push_context,
    set_context,
)
from gallery_spine.logging.timing import TimingResult, log_step, timed_block

__all__ = [
    # Configuration
    "configure_logging",
    "is_configured",
    # Context
    "get_logger",
    "set_context",
    "bind_context",
    "push_context",
    "clear_context",
    "get_context",
    "new_run_id",
    "LogContext",
    # Timing
    "TimingResult",
    "log_step",
    "timed_block",
]
