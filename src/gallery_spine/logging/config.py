"""
Logging configuration.

Single entry point for configuring structured logging. Settings are read from
the arguments or, when omitted, from the environment:

- GALLERY_SPINE_LOG_LEVEL: DEBUG | INFO | WARNING | ERROR (default: INFO)
- GALLERY_SPINE_LOG_FORMAT: json | console (default: console)

Usage:
    from gallery_spine.logging import configure_logging
    configure_logging()

    # Or with explicit settings
    configure_logging(level="DEBUG", format="json")
"""

import logging
import os
import sys
from typing import Literal

import structlog
from structlog.types import Processor

from gallery_spine.errors import ConfigError
from gallery_spine.logging.context import add_context_processor

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
LOG_FORMATS = ("console", "json")

_configured = False


def configure_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] | None = None,
    format: Literal["json", "console"] | None = None,
    force: bool = False,
) -> None:
    """
    Configure structured logging for the application.

    Called once at startup (CLI entry). Subsequent calls are no-ops unless
    force=True.

    Args:
        level: Log level (overrides GALLERY_SPINE_LOG_LEVEL)
        format: Output format (overrides GALLERY_SPINE_LOG_FORMAT)
        force: Reconfigure even if already configured
    """
    global _configured

    if _configured and not force:
        return

    log_level = (level or os.environ.get("GALLERY_SPINE_LOG_LEVEL", "INFO")).upper()
    log_format = (format or os.environ.get("GALLERY_SPINE_LOG_FORMAT", "console")).lower()

    if log_level not in LOG_LEVELS:
        raise ConfigError(f"Unknown log level: {log_level}")
    if log_format not in LOG_FORMATS:
        raise ConfigError(f"Unknown log format: {log_format}")

    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        # UTC ISO-8601 timestamps
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_context_processor,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stderr.isatty(),
                exception_formatter=structlog.dev.plain_traceback,
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level),
        force=True,
    )
    logging.getLogger("gallery_spine").setLevel(getattr(logging, log_level))

    _configured = True


def is_configured() -> bool:
    """Check if logging has been configured."""
    return _configured
