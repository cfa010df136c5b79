"""Command line interface for Gallery Spine using Typer."""

from typing import Optional

import typer
from typing_extensions import Annotated

from gallery_spine import __version__
from gallery_spine.config import get_settings
from gallery_spine.errors import GalleryError
from gallery_spine.logging import configure_logging

from .commands import inspect_, run
from .console import console
from .ui import render_error_panel

app = typer.Typer(
    name="gallery-spine",
    help="Gallery Spine - tag aggregation over a gallery metadata catalog",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(run.app, name="run", help="Build the aggregated store or run single steps")
app.add_typer(inspect_.app, name="inspect", help="Inspect pipelines, namespaces and output")


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"gallery-spine, version {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, is_eager=True, help="Show version and exit"),
    ] = None,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)"),
    ] = None,
    log_format: Annotated[
        Optional[str],
        typer.Option("--log-format", help="Log format (console, json)"),
    ] = None,
) -> None:
    """
    Gallery Spine - tag aggregation over a gallery metadata catalog.

    Settings are read from GALLERY_SPINE_* environment variables or .env.
    """
    try:
        settings = get_settings()
        configure_logging(
            level=(log_level or settings.log_level).upper(),
            format=(log_format or settings.log_format).lower(),
            force=True,
        )
    except GalleryError as e:
        render_error_panel("Configuration Error", e.message)
        raise typer.Exit(1)


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()
