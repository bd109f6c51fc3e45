"""Collaborators shared by every task of one run."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import click

from formulae_site.cleanup import CleanupRegistry
from formulae_site.config import Settings, SiteConfig
from formulae_site.execution import (
    CommandRunner,
    RetryCounter,
    RetryingExecutor,
    RetryPolicy,
    Runner,
)
from formulae_site.tasks.graph import TaskGraph


@dataclass(slots=True)
class TaskContext:
    """Settings, runners and the task graph for one process run."""

    settings: Settings
    site_config: SiteConfig
    graph: TaskGraph
    runner: Runner
    executor: RetryingExecutor
    cleanup: CleanupRegistry
    echo: Callable[[str], None] = click.echo

    @property
    def site_dir(self) -> Path:
        return self.settings.resolve(self.site_config.destination)

    def invoke(self, name: str, *args: str, force: bool = False) -> bool:
        return self.graph.invoke(name, self, args, force=force)


def build_context(  # noqa: PLR0913
    *,
    settings: Settings,
    graph: TaskGraph,
    cleanup: CleanupRegistry,
    runner: Runner | None = None,
    site_config: SiteConfig | None = None,
    sleep: Callable[[float], None] | None = None,
    echo: Callable[[str], None] = click.echo,
) -> TaskContext:
    """Load the site config once and wire the runner, retry executor and registry."""

    effective_runner = runner if runner is not None else CommandRunner(cwd=settings.root_dir)
    policy = RetryPolicy(
        max_retries=settings.retry.max_retries,
        base_delay_exponent=settings.retry.base_delay_exponent,
    )
    executor = RetryingExecutor(
        effective_runner,
        policy=policy,
        counter=RetryCounter(),
        sleep=sleep or time.sleep,
    )
    return TaskContext(
        settings=settings,
        site_config=(
            site_config
            if site_config is not None
            else SiteConfig.load(settings.resolve(settings.site.config_path))
        ),
        graph=graph,
        runner=effective_runner,
        executor=executor,
        cleanup=cleanup,
        echo=echo,
    )
