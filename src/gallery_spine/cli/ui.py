"""Rich UI components for panels and tables."""

from typing import Any

from rich.panel import Panel
from rich.table import Table

from .console import console, err_console


def render_summary_panel(title: str, status: str, duration: float | None, metrics: dict[str, Any]) -> None:
    """Render execution summary panel."""
    status_icon = "✓" if status.lower() == "completed" else "✗"
    lines = [f"Status: {status_icon} {status.title()}"]
    if duration is not None:
        lines.append(f"Duration: {duration:.2f}s")

    for key, value in metrics.items():
        if key == "top_tags":
            continue
        display_key = key.replace("_", " ").title()
        if isinstance(value, dict):
            lines.append(f"{display_key}:")
            for sub_key, sub_value in value.items():
                lines.append(f"  • {sub_key.replace('_', ' ')}: {sub_value}")
        elif value is not None:
            lines.append(f"{display_key}: {value}")

    console.print(
        Panel(
            "\n".join(lines),
            title=title,
            border_style="green" if status.lower() == "completed" else "red",
        )
    )


def render_error_panel(title: str, message: str, details: list[str] | None = None) -> None:
    """Render error panel on stderr."""
    lines = [message]
    if details:
        lines.append("")
        lines.extend(f"  • {detail}" for detail in details)
    err_console.print(Panel("\n".join(lines), title=title, border_style="red"))


def render_tag_table(rows: list[dict[str, Any]], title: str = "Top Tags") -> None:
    """Render tag aggregate rows; galleries are shown one per line."""
    table = Table(title=title)
    table.add_column("Namespace", style="cyan")
    table.add_column("Tag")
    table.add_column("Count", justify="right")
    table.add_column("Galleries", style="dim")
    for row in rows:
        table.add_row(row["namespace"], row["tag"], str(row["count"]), row["galleries"])
    console.print(table)


def render_distribution_table(rows: list[dict[str, Any]]) -> None:
    table = Table(title="Dumped Distribution")
    table.add_column("Date")
    table.add_column("Count", justify="right")
    for row in rows:
        table.add_row(row["date"] or "(null)", str(row["count"]))
    console.print(table)
