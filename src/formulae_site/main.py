"""CLI entrypoint for formulae-site."""

import logging
from pathlib import Path

import rich_click as click

from formulae_site import __version__
from formulae_site.errors import FormulaeSiteError
from formulae_site.tasks.controllers import (
    ListTasksCommand,
    RunTasksCommand,
    TaskCliController,
)

click.rich_click.USE_MARKDOWN = True
TASK_CONTROLLER = TaskCliController()


@click.group()
@click.version_option(version=__version__, prog_name="formulae-site")
@click.option("--verbose", "-v", is_flag=True, help="Log skipped tasks and removed paths too.")
@click.option("--quiet", "-q", is_flag=True, help="Log only warnings and errors.")
def formulae_site(verbose: bool, quiet: bool) -> None:
    """Formulae site data generation, build and validation tasks."""

    level = logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger("formulae_site").setLevel(level)


@formulae_site.command("run")
@click.option(
    "--root",
    "root_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Site repository root. Defaults to FORMULAE_SITE_ROOT or the current directory.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Site generator config, relative to the root. Defaults to _config.yml.",
)
@click.argument("task_specs", nargs=-1)
def run_tasks(root_dir: Path | None, config_path: Path | None, task_specs: tuple[str, ...]) -> None:
    """Run tasks in order, for example `formulae` or `analytics[linux]`.

    Runs `formula_and_analytics` when no task is given.
    """

    try:
        lines = TASK_CONTROLLER.run(
            RunTasksCommand(
                root_dir=root_dir,
                config_path=config_path,
                task_specs=task_specs,
            ),
        )
    except (FormulaeSiteError, ValueError) as error:
        raise click.ClickException(str(error)) from error
    _emit_lines(lines)


@formulae_site.command("tasks")
@click.option(
    "--root",
    "root_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Site repository root. Defaults to FORMULAE_SITE_ROOT or the current directory.",
)
def list_tasks(root_dir: Path | None) -> None:
    """List tasks with their descriptions."""

    try:
        lines = TASK_CONTROLLER.list_tasks(ListTasksCommand(root_dir=root_dir))
    except ValueError as error:
        raise click.ClickException(str(error)) from error
    _emit_lines(lines)


def _emit_lines(lines: list[str]) -> None:
    for line in lines:
        click.echo(line)


if __name__ == "__main__":  # pragma: no cover
    formulae_site()
