"""Static graph of named tasks with dependency-ordered, at-most-once execution."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from formulae_site.errors import FormulaeSiteError

if TYPE_CHECKING:
    from formulae_site.tasks.context import TaskContext

logger = logging.getLogger(__name__)

TaskAction = Callable[["TaskContext", Mapping[str, str]], None]

_TASK_SPEC_RE = re.compile(r"^(?P<name>[^\[\]]+)(?:\[(?P<args>[^\]]*)\])?$")


class TaskGraphError(FormulaeSiteError):
    """Task table is inconsistent."""


class UnknownTaskError(FormulaeSiteError):
    """No task with the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Don't know how to build task '{name}'")
        self.name = name


class TaskArgumentError(FormulaeSiteError):
    """Arguments do not fit the task's declared parameters."""


class TaskState(str, Enum):
    """Per-process execution state of a task."""

    PENDING = "pending"
    INVOKED = "invoked"


@dataclass(frozen=True, slots=True)
class TaskParameter:
    name: str
    default: str | None = None


@dataclass(frozen=True, slots=True)
class Task:
    """A named unit of work."""

    name: str
    action: TaskAction | None = None
    description: str | None = None
    dependencies: tuple[str, ...] = ()
    parameters: tuple[TaskParameter, ...] = ()

    def bind(self, args: Sequence[str]) -> dict[str, str]:
        """Bind positional arguments to parameters, filling in defaults."""

        if len(args) > len(self.parameters):
            raise TaskArgumentError(
                f"Task '{self.name}' takes {len(self.parameters)} argument(s), got {len(args)}",
            )
        bound: dict[str, str] = {}
        for index, parameter in enumerate(self.parameters):
            if index < len(args) and args[index] != "":
                bound[parameter.name] = args[index]
            elif parameter.default is not None:
                bound[parameter.name] = parameter.default
        return bound

    @property
    def signature(self) -> str:
        if not self.parameters:
            return self.name
        return f"{self.name}[{','.join(parameter.name for parameter in self.parameters)}]"


def parse_task_spec(spec: str) -> tuple[str, tuple[str, ...]]:
    """Split ``name[arg1,arg2]`` into the task name and its arguments."""

    match = _TASK_SPEC_RE.match(spec.strip())
    if match is None:
        raise TaskArgumentError(f"Invalid task spec: {spec!r}")
    raw_args = match.group("args")
    if raw_args is None or not raw_args.strip():
        return match.group("name"), ()
    return match.group("name"), tuple(part.strip() for part in raw_args.split(","))


class TaskGraph:
    """Acyclic task table plus the state map for one process run."""

    def __init__(self, tasks: Iterable[Task], *, default: str | None = None) -> None:
        self._tasks: dict[str, Task] = {}
        for task in tasks:
            if task.name in self._tasks:
                raise TaskGraphError(f"Duplicate task name: {task.name}")
            self._tasks[task.name] = task
        if default is not None and default not in self._tasks:
            raise TaskGraphError(f"Default task is not defined: {default}")
        self.default = default
        self._validate_dependencies()
        self._states = {name: TaskState.PENDING for name in self._tasks}

    def __contains__(self, name: object) -> bool:
        return name in self._tasks

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks.values())

    def get(self, name: str) -> Task:
        try:
            return self._tasks[name]
        except KeyError:
            raise UnknownTaskError(name) from None

    def state(self, name: str) -> TaskState:
        self.get(name)
        return self._states[name]

    def reset(self, name: str) -> None:
        self.get(name)
        self._states[name] = TaskState.PENDING

    def invoke(
        self,
        name: str,
        context: TaskContext,
        args: Sequence[str] = (),
        *,
        force: bool = False,
    ) -> bool:
        """Run ``name`` after its dependencies. Returns False if it was already invoked."""

        task = self.get(name)
        if self._states[name] is TaskState.INVOKED and not force:
            logger.debug("Skipping already invoked task %s", name)
            return False
        bound = task.bind(args)
        self._states[name] = TaskState.INVOKED
        for dependency in task.dependencies:
            self.invoke(dependency, context)
        if task.action is not None:
            logger.info("** Execute %s%s", name, _format_args(bound))
            task.action(context, bound)
        return True

    def _validate_dependencies(self) -> None:
        for task in self._tasks.values():
            for dependency in task.dependencies:
                if dependency not in self._tasks:
                    raise TaskGraphError(
                        f"Task '{task.name}' depends on undefined task '{dependency}'",
                    )

        visiting: set[str] = set()
        done: set[str] = set()

        def visit(name: str, path: tuple[str, ...]) -> None:
            if name in done:
                return
            if name in visiting:
                cycle = " => ".join((*path, name))
                raise TaskGraphError(f"Circular dependency detected: {cycle}")
            visiting.add(name)
            for dependency in self._tasks[name].dependencies:
                visit(dependency, (*path, name))
            visiting.discard(name)
            done.add(name)

        for name in self._tasks:
            visit(name, ())


def _format_args(bound: Mapping[str, str]) -> str:
    if not bound:
        return ""
    return "[" + ",".join(f"{key}={value}" for key, value in bound.items()) + "]"
