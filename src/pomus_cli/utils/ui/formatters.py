"""Output formatters for different formats."""

import json
import math
from typing import Any

import yaml
from rich.table import Table

from pomus_cli.utils.ui.console import get_console

console = get_console()


def format_output(data: Any, output_format: str = "table") -> None:
    """Format and display output based on format."""
    if output_format == "json":
        print(json.dumps(data, indent=2, default=str))
    elif output_format == "yaml":
        print(yaml.dump(data, default_flow_style=False, sort_keys=False))
    else:
        format_table(data)


def format_table(data: Any) -> None:
    """Format data as a table."""
    if not data:
        console.print("[yellow]No data to display[/yellow]")
        return

    if isinstance(data, list) and isinstance(data[0], dict):
        format_dict_table(data)
    elif isinstance(data, dict):
        format_single_item(data)
    else:
        console.print(data)


def format_dict_table(items: list[dict]) -> None:
    """Format a list of dictionaries as a table."""
    table = Table(show_header=True, header_style="bold cyan")
    columns = list(items[0].keys())
    for column in columns:
        table.add_column(column.replace("_", " ").title())
    for item in items:
        table.add_row(*(_cell(item.get(column)) for column in columns))
    console.print(table)


def format_single_item(item: dict, prefix: str = "") -> None:
    """Format a single (possibly nested) dictionary as key/value lines."""
    for key, value in item.items():
        if isinstance(value, dict):
            console.print(f"[bold]{prefix}{key}[/bold]")
            format_single_item(value, prefix=prefix + "  ")
        else:
            console.print(f"{prefix}[cyan]{key}[/cyan]: {_cell(value)}")


def _cell(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "✓" if value else "✗"
    return str(value)


def format_clock(seconds: float) -> str:
    """Format seconds as a MM:SS countdown, rounding partial seconds up."""
    total = max(0, math.ceil(seconds))
    return f"{total // 60:02d}:{total % 60:02d}"


def format_duration(seconds: float) -> str:
    """Format seconds as hours and minutes, e.g. ``"2h 5m"``."""
    total = max(0, int(seconds))
    return f"{total // 3600}h {(total % 3600) // 60}m"


def format_error(message: str) -> None:
    """Format and display an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def format_warning(message: str) -> None:
    """Format and display a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def format_info(message: str) -> None:
    """Format and display an info message."""
    console.print(f"[bold blue]Info:[/bold blue] {message}")
