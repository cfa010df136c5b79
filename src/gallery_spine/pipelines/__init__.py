"""Pipeline base types."""

from gallery_spine.pipelines.base import Pipeline, PipelineResult, PipelineStatus

__all__ = ["Pipeline", "PipelineResult", "PipelineStatus"]
