"""Named, dependency-ordered tasks for the site repository."""

from formulae_site.tasks.graph import (
    Task,
    TaskArgumentError,
    TaskGraph,
    TaskGraphError,
    TaskParameter,
    TaskState,
    UnknownTaskError,
    parse_task_spec,
)

__all__ = [
    "Task",
    "TaskArgumentError",
    "TaskGraph",
    "TaskGraphError",
    "TaskParameter",
    "TaskState",
    "UnknownTaskError",
    "parse_task_spec",
]
