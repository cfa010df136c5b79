"""Inspection commands: registered pipelines, namespaces, output contents."""

from dataclasses import asdict
from pathlib import Path
from typing import Optional

import typer
from rich.table import Table
from typing_extensions import Annotated

from gallery_spine.config import get_settings
from gallery_spine.db import connect_source
from gallery_spine.domains.gallery.models import NAMESPACES
from gallery_spine.domains.gallery.repository import AggregateStore
from gallery_spine.errors import GalleryError
from gallery_spine.registry import ensure_registered

from ..console import console
from ..ui import render_distribution_table, render_error_panel, render_tag_table

app = typer.Typer(no_args_is_help=True)


@app.command("pipelines")
def list_pipelines() -> None:
    """List registered pipelines."""
    table = Table(title="Pipelines")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    for p in ensure_registered().list_pipelines():
        table.add_row(p["name"], p["description"])
    console.print(table)


@app.command("namespaces")
def list_namespaces() -> None:
    """List the namespace columns scanned for tags, in scan order."""
    for namespace in NAMESPACES:
        console.print(namespace)


@app.command("show")
def show(
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Aggregated output store"),
    ] = None,
    limit: Annotated[int, typer.Option("--limit", "-n", min=1, help="Rows to show")] = 20,
    namespace: Annotated[
        Optional[str],
        typer.Option("--namespace", help="Only tags of this namespace"),
    ] = None,
    distribution: Annotated[
        bool,
        typer.Option("--distribution", help="Show the dumped distribution instead"),
    ] = False,
) -> None:
    """Show the most frequent tags of an output store."""
    if namespace is not None and namespace not in NAMESPACES:
        render_error_panel("Unknown Namespace", namespace, [f"expected one of: {', '.join(NAMESPACES)}"])
        raise typer.Exit(1)

    try:
        path = output or get_settings().output_path
        # Output stores are inspected read-only, like the source catalog
        conn = connect_source(path)
        try:
            store = AggregateStore(conn)
            if distribution:
                render_distribution_table([asdict(r) for r in store.read_dumped_distribution()])
            else:
                rows = store.read_tag_aggregate(namespace=namespace, limit=limit)
                render_tag_table([asdict(r) for r in rows], title=str(path))
        finally:
            conn.close()
    except GalleryError as e:
        render_error_panel(type(e).__name__, e.message)
        raise typer.Exit(1)
