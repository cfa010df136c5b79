# src/gallery_spine/domains/gallery/parser.py

"""
Namespace field parsing.

The dump stores each namespace as a list literal written with single quotes,
e.g. ``['english','translated']``. Quotes are swapped for double quotes and the
result is read as a JSON array of strings. A field that does not fit that
convention is reported and contributes no tags; it never aborts the record.
"""

import json
from collections.abc import Callable
from typing import Any

from gallery_spine.errors import TagParseError
from gallery_spine.logging import get_logger

logger = get_logger(__name__)

MalformedHandler = Callable[[TagParseError], None]


def decode_tag_list(namespace: str, raw: Any) -> list[str]:
    """
    Decode one namespace field, raising TagParseError if it is malformed.

    Empty values (None, "") decode to an empty list.
    """
    if raw is None or raw == "":
        return []
    if not isinstance(raw, str):
        raise TagParseError(namespace, raw, f"expected text, got {type(raw).__name__}")

    try:
        tags = json.loads(raw.replace("'", '"'))
    except json.JSONDecodeError as e:
        raise TagParseError(namespace, raw, "not a list literal", cause=e) from e

    if not isinstance(tags, list):
        raise TagParseError(namespace, raw, f"expected a list, got {type(tags).__name__}")
    if not all(isinstance(tag, str) for tag in tags):
        raise TagParseError(namespace, raw, "list contains non-string items")
    return tags


def parse_tag_field(
    namespace: str,
    raw: Any,
    on_malformed: MalformedHandler | None = None,
) -> list[str]:
    """
    Parse one namespace field into its tags.

    Malformed input is logged as ``tag_field_malformed`` with the namespace and
    the raw value, then treated as having no tags.

    Args:
        namespace: Column the value came from (for diagnostics)
        raw: Column value
        on_malformed: Called with the error for each malformed field

    Returns:
        Tags in field order (possibly empty)
    """
    try:
        return decode_tag_list(namespace, raw)
    except TagParseError as e:
        logger.warning("tag_field_malformed", namespace=namespace, raw=raw, reason=e.reason)
        if on_malformed is not None:
            on_malformed(e)
        return []
