"""Output formatters for different formats."""

import json
from typing import Any

import yaml
from rich.console import Console
from rich.table import Table

console = Console()

STATUS_STYLES = {
    "pending": "yellow",
    "running": "cyan",
    "completed": "green",
    "failed": "red",
    "cancelled": "dim",
}


def format_output(data: Any, output_format: str = "pretty") -> None:
    """Format and display output based on format."""
    if output_format == "json":
        print(json.dumps(data, indent=2, default=str))
    elif output_format == "yaml":
        print(yaml.dump(data, default_flow_style=False, sort_keys=False))
    elif output_format == "table":
        format_table(data)
    elif output_format == "quiet":
        format_quiet(data)
    else:
        format_pretty(data)


def format_table(data: Any) -> None:
    """Format data as a table."""
    if not data:
        console.print("[yellow]No data to display[/yellow]")
        return

    if isinstance(data, list):
        format_dict_table(data)
    elif isinstance(data, dict):
        format_single_item(data)
    else:
        console.print(data)


def format_dict_table(items: list[dict]) -> None:
    """Format a list of dictionaries as a table."""
    if not items:
        console.print("[yellow]No items found[/yellow]")
        return

    columns = list(items[0].keys())
    table = Table(show_header=True, header_style="bold magenta")
    for col in columns:
        table.add_column(_format_key(col))

    for item in items:
        table.add_row(*(_format_value(item.get(col)) for col in columns))

    console.print(table)


def format_single_item(item: dict) -> None:
    """Format a single item as key-value pairs."""
    table = Table(show_header=False, box=None)
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")

    for key, value in item.items():
        table.add_row(_format_key(key), _format_value(value))

    console.print(table)


def format_pretty(data: Any) -> None:
    """Format output in pretty format."""
    if isinstance(data, list):
        for item in data:
            format_pretty(item)
    elif isinstance(data, dict) and "taskId" in data:
        format_task_item(data)
    elif isinstance(data, dict):
        for key, value in data.items():
            console.print(f"[cyan]{_format_key(key)}:[/cyan] {_format_value(value)}")
    else:
        console.print(data)


def format_task_item(task: dict) -> None:
    """Format a single task with its status and priority highlighted."""
    status = task.get("status", "pending")
    style = STATUS_STYLES.get(status, "white")
    console.print(
        f"[{style}]●[/{style}] [bold]{task.get('title', '')}[/bold] "
        f"[dim]({task.get('taskId')})[/dim]"
    )
    console.print(
        f"  [{style}]{status}[/{style}]  priority [bold]{task.get('priority')}[/bold]"
    )
    if task.get("description"):
        console.print(f"  {task['description']}")
    if task.get("dueBy"):
        console.print(f"  [magenta]due {task['dueBy']}[/magenta]")
    console.print(f"  [dim]updated {task.get('updatedAt')}[/dim]")


def format_quiet(data: Any) -> None:
    """Format output in quiet mode (IDs only)."""
    if isinstance(data, list):
        for item in data:
            format_quiet(item)
    elif isinstance(data, dict) and "taskId" in data:
        print(data["taskId"])


def format_error(message: str) -> None:
    """Format and display an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def _format_key(key: str) -> str:
    # camelCase and snake_case both become "Title Case"
    spaced = "".join(f" {c}" if c.isupper() else c for c in key)
    return spaced.replace("_", " ").strip().title()


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "✓" if value else "✗"
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    if value is None:
        return "-"
    return str(value)
