"""Configuration management commands."""

from typing import Annotated

import typer

from taskcluster.services.config_service import get_config_service
from taskcluster.utils.ui.formatters import format_error, format_output, format_success

from .decorators import command_wrapper

app = typer.Typer(help="Configuration management commands", no_args_is_help=True)


@app.command("show")
@command_wrapper
def show_config(
    output: Annotated[
        str, typer.Option("--output", "-o", help="Output format")
    ] = "yaml",
) -> None:
    """View current configuration."""
    config_svc = get_config_service()
    format_output(config_svc.config.model_dump(), output)


@app.command("contexts")
@command_wrapper
def list_contexts(
    output: Annotated[
        str, typer.Option("--output", "-o", help="Output format")
    ] = "table",
) -> None:
    """List storage contexts."""
    config_svc = get_config_service()
    current = config_svc.get_current_context().name
    rows = [
        {
            "current": ctx.name == current,
            "name": ctx.name,
            "type": ctx.type,
            "source": ctx.source,
            "description": ctx.description,
        }
        for ctx in config_svc.list_contexts()
    ]
    format_output(rows, output)


@app.command("use")
@command_wrapper
def use_context(
    name: Annotated[str, typer.Argument(help="Context name")],
) -> None:
    """Switch the active storage context."""
    config_svc = get_config_service()
    try:
        context = config_svc.use_context(name)
    except ValueError as e:
        format_error(str(e))
        raise typer.Exit(2) from e
    format_success(f"Switched to context '{context.name}' ({context.type})")
