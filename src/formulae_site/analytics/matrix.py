"""Enumerate analytics cells and drive their generation."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from formulae_site.analytics.categories import (
    DAY_WINDOWS,
    AnalyticsCategory,
    TargetOs,
    categories_for,
)
from formulae_site.execution import ExternalCommand, RetryingExecutor

logger = logging.getLogger(__name__)

API_LAYOUT = "analytics_json"


@dataclass(frozen=True, slots=True)
class AnalyticsCell:
    """One (category, day window, platform) combination."""

    target: TargetOs
    category: AnalyticsCategory
    days: int

    @property
    def path_suffix(self) -> Path:
        return self.category.subdir / f"{self.days}d.json"

    @property
    def data_path(self) -> Path:
        return self.target.data_root / self.path_suffix

    @property
    def api_path(self) -> Path:
        return self.target.api_root / self.path_suffix

    def command(self, brew_executable: str = "brew") -> ExternalCommand:
        return ExternalCommand(
            args=(
                brew_executable,
                "formula-analytics",
                *self.target.flags,
                f"--days-ago={self.days}",
                *self.category.flags,
            ),
            stdout_path=self.data_path,
        )


def iter_cells(target: TargetOs) -> Iterator[AnalyticsCell]:
    """Yield every cell generated for ``target`` in generation order."""

    for category in categories_for(target):
        for days in DAY_WINDOWS:
            if category.includes_days(days):
                yield AnalyticsCell(target=target, category=category, days=days)


def render_api_file(category: AnalyticsCategory) -> str:
    """Front matter wrapper the site generator fills with the data file."""

    source_line = f"{category.data_source}: true" if category.data_source else ""
    return (
        "---\n"
        f"layout: {API_LAYOUT}\n"
        f"category: {category.name}\n"
        f"{source_line}\n"
        "---\n"
        "{{ content }}\n"
    )


@dataclass(slots=True)
class AnalyticsRunSummary:
    """Cells written by one generation pass."""

    target: TargetOs
    cells: list[AnalyticsCell] = field(default_factory=list)


class AnalyticsMatrixGenerator:
    """Query analytics for every cell and write the data and api files."""

    def __init__(
        self,
        *,
        executor: RetryingExecutor,
        root_dir: Path,
        brew_executable: str = "brew",
    ) -> None:
        self.executor = executor
        self.root_dir = root_dir
        self.brew_executable = brew_executable

    def generate(self, target: TargetOs) -> AnalyticsRunSummary:
        summary = AnalyticsRunSummary(target=target)
        for category in categories_for(target):
            (self.root_dir / target.data_root / category.subdir).mkdir(parents=True, exist_ok=True)
            (self.root_dir / target.api_root / category.subdir).mkdir(parents=True, exist_ok=True)
            for days in DAY_WINDOWS:
                if not category.includes_days(days):
                    continue
                cell = AnalyticsCell(target=target, category=category, days=days)
                self.executor.run(cell.command(self.brew_executable))
                (self.root_dir / cell.api_path).write_text(render_api_file(category), "utf-8")
                summary.cells.append(cell)
        logger.info(
            "Generated %d analytics files for %s",
            len(summary.cells),
            target.value,
        )
        return summary
