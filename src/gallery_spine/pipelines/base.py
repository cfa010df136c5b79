"""Base Pipeline class."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class PipelineStatus(str, Enum):
    """Pipeline execution status."""

    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class PipelineResult:
    """Result of a pipeline execution."""

    name: str
    run_id: str
    status: PipelineStatus
    started_at: datetime
    completed_at: datetime | None = None
    error: str | None = None
    metrics: dict[str, Any] = field(default_factory=dict)

    @property
    def duration_seconds(self) -> float | None:
        """Duration in seconds if completed."""
        if self.completed_at is None:
            return None
        return (self.completed_at - self.started_at).total_seconds()

    @property
    def ok(self) -> bool:
        return self.status == PipelineStatus.COMPLETED


class Pipeline(ABC):
    """
    Base class for all pipelines.

    A pipeline is a unit of work that:
    - Has a unique name
    - Takes parameters
    - Executes some business logic
    - Returns a result dictionary of metrics

    Pipelines are registered in the registry and invoked by the runner.
    """

    # Override in subclasses
    name: str = "base"
    description: str = "Base pipeline"

    @abstractmethod
    def execute(self, params: dict[str, Any]) -> dict[str, Any]:
        """
        Execute the pipeline.

        Args:
            params: Pipeline parameters

        Returns:
            Result dictionary
        """
        ...

    def validate_params(self, params: dict[str, Any]) -> list[str]:
        """
        Validate pipeline parameters.

        Override in subclasses for custom validation.

        Returns:
            List of validation error messages (empty if valid)
        """
        return []

    def __repr__(self) -> str:
        return f"<Pipeline:{self.name}>"
