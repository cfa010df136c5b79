"""Runner - Execute registered pipelines."""

from datetime import UTC, datetime
from typing import Any

from gallery_spine.errors import BadParamsError, GalleryError, PipelineNotFoundError
from gallery_spine.logging import get_logger, log_step, new_run_id, push_context
from gallery_spine.pipelines.base import PipelineResult, PipelineStatus
from gallery_spine.registry import ensure_registered

logger = get_logger(__name__)


def run_pipeline_sync(
    pipeline_name: str,
    params: dict[str, Any] | None = None,
    raise_errors: bool = True,
) -> PipelineResult:
    """
    Run a pipeline synchronously.

    A fresh run id is bound to the log context for the duration of the run.

    Args:
        pipeline_name: Name of the pipeline to run
        params: Pipeline parameters
        raise_errors: Re-raise failures instead of returning a FAILED result

    Returns:
        PipelineResult with the metrics returned by the pipeline
    """
    params = params or {}
    registry = ensure_registered()

    pipeline = registry.get(pipeline_name)
    if pipeline is None:
        raise PipelineNotFoundError(pipeline_name)

    validation_errors = pipeline.validate_params(params)
    if validation_errors:
        raise BadParamsError(pipeline_name, validation_errors)

    run_id = new_run_id()
    started_at = datetime.now(UTC)
    token = push_context(run_id=run_id, pipeline=pipeline_name)
    try:
        with log_step("pipeline.run") as timer:
            metrics = pipeline.execute(params)
            timer.add_metric("status", PipelineStatus.COMPLETED.value)
    except Exception as e:
        if isinstance(e, GalleryError):
            e.with_context(pipeline=pipeline_name, run_id=run_id)
            logger.error("pipeline_failed", **e.to_dict())
        if raise_errors:
            raise
        return PipelineResult(
            name=pipeline_name,
            run_id=run_id,
            status=PipelineStatus.FAILED,
            started_at=started_at,
            completed_at=datetime.now(UTC),
            error=str(e),
        )
    finally:
        token.restore()

    return PipelineResult(
        name=pipeline_name,
        run_id=run_id,
        status=PipelineStatus.COMPLETED,
        started_at=started_at,
        completed_at=datetime.now(UTC),
        metrics=metrics,
    )
