"""Task table for the formulae site repository."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from formulae_site.analytics import AnalyticsMatrixGenerator, TargetOs, setup_analytics
from formulae_site.cleanup import CleanupKind, CleanupRegistry
from formulae_site.execution import ExternalCommand
from formulae_site.tasks.context import TaskContext
from formulae_site.tasks.graph import Task, TaskGraph, TaskParameter
from formulae_site.website.jekyll import build_command, serve_command
from formulae_site.website.validators import (
    JsonLintError,
    htmlproofer_command,
    json_files,
    lint_json_files,
)

DEFAULT_TASK = "formula_and_analytics"

FORMULAE_OUTPUTS = ("_data/formula", "api/formula", "formula", "_data/formula_canonical.json")
CASK_OUTPUTS = ("_data/cask", "api/cask", "api/cask-source", "cask")
ANALYTICS_OUTPUTS = (
    "_data/analytics",
    "_data/analytics-linux",
    "api/analytics",
    "api/analytics-linux",
)
API_SAMPLES_OUTPUTS = ("_includes/api-sample",)


def formulae(context: TaskContext, _args: Mapping[str, str]) -> None:
    context.runner.run(
        ExternalCommand.of(context.settings.brew.executable, "generate-formula-api"),
    )


def cask(context: TaskContext, _args: Mapping[str, str]) -> None:
    context.runner.run(
        ExternalCommand.of(context.settings.brew.executable, "generate-cask-api"),
    )


def analytics(context: TaskContext, args: Mapping[str, str]) -> None:
    target = TargetOs.parse(args.get("os", TargetOs.MAC.value))
    setup_analytics(context.settings, context.runner)
    generator = AnalyticsMatrixGenerator(
        executor=context.executor,
        root_dir=context.settings.root_dir,
        brew_executable=context.settings.brew.executable,
    )
    generator.generate(target)


def api_samples(context: TaskContext, _args: Mapping[str, str]) -> None:
    context.runner.run(
        ExternalCommand.of(
            context.settings.brew.executable,
            "ruby",
            "script/generate-api-samples.rb",
        ),
    )


def linux_analytics(context: TaskContext, _args: Mapping[str, str]) -> None:
    context.invoke("analytics", TargetOs.LINUX.value, force=True)


def build(context: TaskContext, _args: Mapping[str, str]) -> None:
    context.runner.run(build_command(context.settings))


def serve(context: TaskContext, _args: Mapping[str, str]) -> None:
    context.runner.run(serve_command(context.settings))


def html_proofer(context: TaskContext, _args: Mapping[str, str]) -> None:
    context.runner.run(
        htmlproofer_command(context.settings.site.htmlproofer_command, context.site_dir),
    )


def jsonlint(context: TaskContext, _args: Mapping[str, str]) -> None:
    files = json_files(context.site_dir)
    context.echo(f"Running JSON Lint on {len(files)} files...")
    report = lint_json_files(files)
    if report.has_errors():
        for issue in report.issues:
            context.echo(str(issue))
        raise JsonLintError(report)
    context.echo("JSON Lint finished successfully.")


def clean(context: TaskContext, _args: Mapping[str, str]) -> None:
    _echo_removed(context, context.cleanup.clean())


def clobber(context: TaskContext, _args: Mapping[str, str]) -> None:
    _echo_removed(context, context.cleanup.clobber())


def _echo_removed(context: TaskContext, removed: list[Path]) -> None:
    for path in removed:
        context.echo(f"rm -r {path}")


def build_task_graph() -> TaskGraph:
    return TaskGraph(
        [
            Task("formulae", formulae, "Dump macOS formulae data"),
            Task("cask", cask, "Dump cask data"),
            Task(
                "analytics",
                analytics,
                "Dump analytics data",
                parameters=(TaskParameter("os", default=TargetOs.MAC.value),),
            ),
            Task("api_samples", api_samples, "Update API samples"),
            Task(
                "formula_and_analytics",
                description="Dump macOS formulae and analytics data",
                dependencies=("formulae", "analytics"),
            ),
            Task(
                "cask_and_analytics",
                description="Dump macOS casks and analytics data",
                dependencies=("cask", "analytics"),
            ),
            Task("linux_analytics", linux_analytics, "Dump Linux analytics data"),
            Task(
                "all_analytics",
                linux_analytics,
                "Dump all analytics (macOS and Linux)",
                dependencies=("analytics",),
            ),
            Task("build", build, "Build the site"),
            Task("serve", serve, "Serve the site"),
            Task(
                "html_proofer",
                html_proofer,
                "Run html proofer to validate the HTML output.",
                dependencies=("build",),
            ),
            Task(
                "jsonlint",
                jsonlint,
                "Run JSON Lint to validate the JSON output.",
                dependencies=("build",),
            ),
            Task("test", dependencies=("html_proofer", "jsonlint")),
            Task("clean", clean, "Remove any temporary products."),
            Task("clobber", clobber, "Remove any generated files."),
        ],
        default=DEFAULT_TASK,
    )


def build_cleanup_registry(root_dir: Path, site_destination: str) -> CleanupRegistry:
    registry = CleanupRegistry(root_dir)
    registry.register(CleanupKind.CLOBBER, "formulae", FORMULAE_OUTPUTS)
    registry.register(CleanupKind.CLOBBER, "cask", CASK_OUTPUTS)
    registry.register(CleanupKind.CLOBBER, "analytics", ANALYTICS_OUTPUTS)
    registry.register(CleanupKind.CLOBBER, "api_samples", API_SAMPLES_OUTPUTS)
    registry.register(CleanupKind.CLEAN, "build", (site_destination,))
    return registry
