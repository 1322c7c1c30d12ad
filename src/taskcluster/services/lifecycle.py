"""Task lifecycle state machine.

Transitions are declared as data: each target status maps to the set of
statuses a task may move from. Adding a transition is an edit to
ALLOWED_TRANSITIONS.

    pending -> running -> completed
                       -> failed
    pending | running -> cancelled
"""

from __future__ import annotations

from types import MappingProxyType

from taskcluster.models import InvalidTransitionError, TaskStatus

ALLOWED_TRANSITIONS: MappingProxyType[TaskStatus, frozenset[TaskStatus]] = MappingProxyType(
    {
        TaskStatus.RUNNING: frozenset({TaskStatus.PENDING}),
        TaskStatus.COMPLETED: frozenset({TaskStatus.RUNNING}),
        TaskStatus.FAILED: frozenset({TaskStatus.RUNNING}),
        TaskStatus.CANCELLED: frozenset({TaskStatus.PENDING, TaskStatus.RUNNING}),
    }
)


def allowed_sources(target: TaskStatus) -> frozenset[TaskStatus]:
    """Statuses from which a task may move to *target*."""
    return ALLOWED_TRANSITIONS.get(target, frozenset())


def can_transition(current: TaskStatus, target: TaskStatus) -> bool:
    """Return True if a task in *current* may move to *target*."""
    return current in allowed_sources(target)


def ensure_transition(current: TaskStatus, target: TaskStatus) -> None:
    """Raise InvalidTransitionError unless *current* -> *target* is allowed."""
    if not can_transition(current, target):
        raise InvalidTransitionError(current, target)
