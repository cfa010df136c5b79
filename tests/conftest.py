"""
Shared pytest fixtures for gallery-spine tests.

This module provides:
- Environment isolation (cwd, GALLERY_SPINE_* variables, cached settings)
- Log context / structlog reset between tests
- A factory that writes temporary gallery catalogs
"""

import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import structlog

from gallery_fixtures import gallery, write_catalog
from gallery_spine import config as config_module
from gallery_spine.logging import clear_context
from gallery_spine.logging import config as logging_config


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Run each test in its own directory with default settings and clean logging."""
    monkeypatch.chdir(tmp_path)
    for name in list(os.environ):
        if name.startswith("GALLERY_SPINE_"):
            monkeypatch.delenv(name)
    config_module.reset_settings()
    clear_context()
    yield
    config_module.reset_settings()
    clear_context()
    structlog.reset_defaults()
    logging_config._configured = False
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    logging.getLogger("gallery_spine").setLevel(logging.NOTSET)


@pytest.fixture
def make_catalog(tmp_path) -> Callable[..., Path]:
    """
    Factory for source catalogs.

    Usage:
        path = make_catalog([gallery(1, language="['english']")])
    """

    def _make(rows: list[dict[str, Any]], name: str = "api_dump.sqlite", columns: dict[str, str] | None = None) -> Path:
        return write_catalog(tmp_path / name, rows, columns)

    return _make


@pytest.fixture
def two_record_catalog(make_catalog) -> Path:
    """Two valid english galleries; the second one was posted later."""
    return make_catalog(
        [
            gallery(1, "aaa", posted=100, language="['english']"),
            gallery(2, "bbb", posted=200, language="['english']"),
        ]
    )
