"""Main entry point for the Task Cluster CLI."""

import typer

from taskcluster import __version__
from taskcluster.commands import config, tasks
from taskcluster.utils.ui.console import get_console

app = typer.Typer(
    name="taskcluster",
    help="Track tasks with pluggable, concurrency-safe storage",
    no_args_is_help=True,
)

console = get_console()

app.add_typer(tasks.app, name="tasks", help="Task management commands")
app.add_typer(config.app, name="config", help="Configuration management")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]Task Cluster[/bold] version [cyan]{__version__}[/cyan]")


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()
