"""Task management commands."""

from typing import Annotated
from uuid import UUID

import typer

from taskcluster.models import NotFoundError
from taskcluster.services.config_service import (
    get_config_service,
    get_storage_strategy_context,
)
from taskcluster.services.task_service import TaskService
from taskcluster.utils.retry import retry_on_conflict
from taskcluster.utils.ui.formatters import format_output, format_success

from .decorators import command_wrapper

app = typer.Typer(help="Task management commands", no_args_is_help=True)

OutputOption = Annotated[
    str | None,
    typer.Option("--output", "-o", help="Output format (pretty, json, yaml, table)"),
]


def _get_task_service() -> TaskService:
    return TaskService(get_storage_strategy_context().task_repository)


def _resolve_output(output: str | None) -> str:
    if output is not None:
        return output
    return get_config_service().config.output.format


def _conflict_attempts() -> int:
    return get_config_service().config.retry.conflict_attempts


def parse_task_id(value: str) -> UUID:
    """Parse a task ID; a malformed ID can never name a stored task."""
    try:
        return UUID(value)
    except ValueError as e:
        raise NotFoundError(value) from e


@app.command("create")
@command_wrapper
async def create_task(
    title: Annotated[str, typer.Argument(help="Task title")],
    priority: Annotated[
        int, typer.Option("--priority", "-p", help="Priority (1-10)")
    ],
    description: Annotated[
        str | None, typer.Option("--description", "-d", help="Task description")
    ] = None,
    due_by: Annotated[
        str | None, typer.Option("--due-by", help="Deadline (ISO-8601)")
    ] = None,
    output: OutputOption = None,
) -> None:
    """Create a new task."""
    service = _get_task_service()
    task = await service.create_task(
        title, priority=priority, description=description, due_by=due_by
    )
    format_success(f"Created task {task.task_id}")
    format_output(task.to_json_dict(), _resolve_output(output))


@app.command("get")
@command_wrapper
async def get_task(
    task_id: Annotated[str, typer.Argument(help="Task ID")],
    output: OutputOption = None,
) -> None:
    """Show a task."""
    service = _get_task_service()
    task = await service.get_task(parse_task_id(task_id))
    format_output(task.to_json_dict(), _resolve_output(output))


@app.command("priority")
@command_wrapper
async def change_priority(
    task_id: Annotated[str, typer.Argument(help="Task ID")],
    priority: Annotated[int, typer.Argument(help="New priority (1-10)")],
    output: OutputOption = None,
) -> None:
    """Change the priority of a task."""
    service = _get_task_service()
    resolved_id = parse_task_id(task_id)
    task = await retry_on_conflict(
        lambda: service.change_priority(resolved_id, priority),
        attempts=_conflict_attempts(),
    )
    format_success(f"Priority of {task.task_id} set to {task.priority}")
    format_output(task.to_json_dict(), _resolve_output(output))


@app.command("cancel")
@command_wrapper
async def cancel_task(
    task_id: Annotated[str, typer.Argument(help="Task ID")],
    output: OutputOption = None,
) -> None:
    """Cancel a pending or running task."""
    service = _get_task_service()
    resolved_id = parse_task_id(task_id)
    task = await retry_on_conflict(
        lambda: service.cancel_task(resolved_id),
        attempts=_conflict_attempts(),
    )
    format_success(f"Cancelled task {task.task_id}")
    format_output(task.to_json_dict(), _resolve_output(output))
