"""Pipeline execution commands."""

from pathlib import Path
from typing import Any, Optional

import typer
from typing_extensions import Annotated

from gallery_spine.errors import GalleryError
from gallery_spine.runner import run_pipeline_sync

from ..ui import render_error_panel, render_summary_panel, render_tag_table

app = typer.Typer(no_args_is_help=True)

SourceOption = Annotated[
    Optional[Path],
    typer.Option("--source", "-s", help="Source catalog (SQLite with a gallery table)"),
]
OutputOption = Annotated[
    Optional[Path],
    typer.Option("--output", "-o", help="Aggregated output store"),
]
ThresholdOption = Annotated[
    Optional[int],
    typer.Option("--threshold", help="Valid dumped threshold (Unix seconds)"),
]
ExamplesOption = Annotated[
    Optional[int],
    typer.Option("--examples", help="Example galleries kept per tag"),
]


def _params(**options: Any) -> dict[str, Any]:
    return {key: value for key, value in options.items() if value is not None}


def _run(pipeline: str, params: dict[str, Any], show_top: bool = False) -> None:
    try:
        result = run_pipeline_sync(pipeline, params, raise_errors=False)
    except GalleryError as e:
        render_error_panel(type(e).__name__, e.message)
        raise typer.Exit(1)

    if not result.ok:
        render_error_panel("Pipeline Failed", result.error or "unknown error", [f"pipeline: {pipeline}", f"run: {result.run_id}"])
        raise typer.Exit(1)

    if show_top and result.metrics.get("top_tags"):
        render_tag_table(result.metrics["top_tags"])
    render_summary_panel(pipeline, result.status.value, result.duration_seconds, result.metrics)


@app.command("build")
def build(
    source: SourceOption = None,
    output: OutputOption = None,
    threshold: ThresholdOption = None,
    examples: ExamplesOption = None,
    compress: Annotated[
        bool,
        typer.Option("--compress/--no-compress", help="Gzip the output store after a successful run"),
    ] = True,
) -> None:
    """Build the aggregated store (tags + dumped distribution) and compress it."""
    params = _params(source_path=source, output_path=output, threshold=threshold, examples_per_tag=examples)
    params["compress"] = compress
    _run("gallery.build", params, show_top=True)


@app.command("tags")
def tags(
    source: SourceOption = None,
    output: OutputOption = None,
    threshold: ThresholdOption = None,
    examples: ExamplesOption = None,
) -> None:
    """Aggregate tags into an existing or new output store."""
    _run(
        "gallery.tag_aggregate",
        _params(source_path=source, output_path=output, threshold=threshold, examples_per_tag=examples),
        show_top=True,
    )


@app.command("distribution")
def distribution(source: SourceOption = None, output: OutputOption = None) -> None:
    """Count galleries per dumped date into the output store."""
    _run("gallery.dumped_distribution", _params(source_path=source, output_path=output))


@app.command("compress")
def compress(
    output: OutputOption = None,
    level: Annotated[
        Optional[int],
        typer.Option("--level", min=1, max=9, help="Gzip compression level"),
    ] = None,
) -> None:
    """Gzip the output store."""
    _run("gallery.compress", _params(output_path=output, compression_level=level))
