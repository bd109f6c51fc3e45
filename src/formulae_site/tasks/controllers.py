"""Controllers for task CLI commands."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import click

from formulae_site.config import Settings, SiteConfig
from formulae_site.execution import Runner
from formulae_site.tasks.context import TaskContext, build_context
from formulae_site.tasks.definitions import build_cleanup_registry, build_task_graph
from formulae_site.tasks.graph import parse_task_spec


@dataclass(slots=True)
class RunTasksCommand:
    """CLI inputs for running tasks."""

    root_dir: Path | None
    config_path: Path | None
    task_specs: tuple[str, ...]


@dataclass(slots=True)
class ListTasksCommand:
    """CLI inputs for task listing."""

    root_dir: Path | None


class TaskCliController:
    """Coordinates task execution for CLI commands."""

    def __init__(
        self,
        *,
        runner_factory: Callable[[Settings], Runner] | None = None,
        sleep: Callable[[float], None] = time.sleep,
        echo: Callable[[str], None] = click.echo,
    ) -> None:
        self.runner_factory = runner_factory
        self.sleep = sleep
        self.echo = echo

    def run(self, command: RunTasksCommand) -> list[str]:
        context = self._context(root_dir=command.root_dir, config_path=command.config_path)
        specs = command.task_specs or (context.graph.default or "",)
        invocations = [parse_task_spec(spec) for spec in specs]
        for name, args in invocations:
            context.graph.get(name).bind(args)

        for name, args in invocations:
            context.graph.invoke(name, context, args)

        return [f"Completed: {', '.join(specs)}"]

    def list_tasks(self, command: ListTasksCommand) -> list[str]:
        settings = _settings(command.root_dir, None)
        graph = build_task_graph()
        described = [task for task in graph if task.description]
        width = max((len(task.signature) for task in described), default=0)
        lines = [f"{task.signature.ljust(width)}  # {task.description}" for task in described]
        if graph.default is not None:
            lines.append(f"Default task: {graph.default}")
        lines.append(f"Root: {settings.root_dir}")
        return lines

    def _context(self, *, root_dir: Path | None, config_path: Path | None) -> TaskContext:
        settings = _settings(root_dir, config_path)
        site_config = SiteConfig.load(settings.resolve(settings.site.config_path))
        return build_context(
            settings=settings,
            site_config=site_config,
            graph=build_task_graph(),
            cleanup=build_cleanup_registry(settings.root_dir, site_config.destination),
            runner=self.runner_factory(settings) if self.runner_factory is not None else None,
            sleep=self.sleep,
            echo=self.echo,
        )


def _settings(root_dir: Path | None, config_path: Path | None) -> Settings:
    settings = Settings.from_env(root_dir=root_dir, config_path=config_path)
    settings.validate()
    return settings
