"""Pipeline registry - Singleton registry of available pipelines."""

import importlib
import pkgutil
from pathlib import Path
from typing import Type

from gallery_spine.logging import get_logger
from gallery_spine.pipelines.base import Pipeline

logger = get_logger(__name__)


class PipelineRegistry:
    """
    Singleton registry for pipeline classes.

    Pipelines are registered by name and can be retrieved for execution.
    """

    _instance: "PipelineRegistry | None" = None
    _pipelines: dict[str, Type[Pipeline]]

    def __new__(cls) -> "PipelineRegistry":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._pipelines = {}
        return cls._instance

    def register(self, pipeline_class: Type[Pipeline]) -> None:
        """Register a pipeline class."""
        name = pipeline_class.name
        if name in self._pipelines:
            logger.warning("pipeline_already_registered", name=name)
        self._pipelines[name] = pipeline_class
        logger.debug("pipeline_registered", name=name)

    def get(self, name: str) -> Pipeline | None:
        """Get a pipeline instance by name."""
        pipeline_class = self._pipelines.get(name)
        if pipeline_class:
            return pipeline_class()
        return None

    def list_pipelines(self) -> list[dict[str, str]]:
        """List all registered pipelines."""
        return [
            {"name": cls.name, "description": cls.description} for cls in self._pipelines.values()
        ]

    def clear(self) -> None:
        """Clear all registered pipelines (for testing)."""
        self._pipelines.clear()


# Global registry instance
registry = PipelineRegistry()


def register_default_pipelines() -> None:
    """
    Register all default pipelines.

    Each package under domains/ may define ``pipelines.register_<name>_pipelines``.
    """
    domains_path = Path(__file__).parent / "domains"
    for _, name, is_pkg in pkgutil.iter_modules([str(domains_path)]):
        if not is_pkg:
            continue
        module = importlib.import_module(f"gallery_spine.domains.{name}.pipelines")
        register_fn = getattr(module, f"register_{name}_pipelines", None)
        if register_fn is not None:
            register_fn(registry)
            logger.debug("domain_pipelines_registered", domain=name)

    logger.debug("pipeline_discovery_complete", count=len(registry.list_pipelines()))


def ensure_registered() -> PipelineRegistry:
    """Run discovery once and return the registry."""
    if not registry.list_pipelines():
        register_default_pipelines()
    return registry
