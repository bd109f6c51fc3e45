"""Analytics categories, target platforms and their command flags."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

CORE_TAP_NAME = "homebrew-core"
CASK_TAP_NAME = "homebrew-cask"
DAY_WINDOWS: tuple[int, ...] = (30, 90, 365)


class CategoryKind(str, Enum):
    """How a category is requested from ``brew formula-analytics``."""

    PER_CATEGORY_JSON = "json"
    ALL_CORE_FORMULAE = "all-core-formulae-json"


class TargetOs(str, Enum):
    """Platforms analytics are generated for."""

    MAC = "mac"
    LINUX = "linux"

    @classmethod
    def parse(cls, value: str) -> TargetOs:
        try:
            return cls(value.strip().lower())
        except ValueError as error:
            choices = ", ".join(item.value for item in cls)
            raise ValueError(
                f"Unsupported analytics os {value!r}; expected one of: {choices}",
            ) from error

    @property
    def data_root(self) -> Path:
        if self is TargetOs.LINUX:
            return Path("_data/analytics-linux")
        return Path("_data/analytics")

    @property
    def api_root(self) -> Path:
        if self is TargetOs.LINUX:
            return Path("api/analytics-linux")
        return Path("api/analytics")

    @property
    def flags(self) -> tuple[str, ...]:
        if self is TargetOs.LINUX:
            return ("--linux",)
        return ()


@dataclass(frozen=True, slots=True)
class AnalyticsCategory:
    """One analytics category with its resolved name, data source and flags."""

    key: str
    kind: CategoryKind
    name: str
    data_source: str | None = None

    @property
    def flags(self) -> tuple[str, ...]:
        # --json and --all-core-formulae-json are mutually exclusive.
        return (f"--{self.kind.value}", f"--{self.name}")

    @property
    def subdir(self) -> Path:
        if self.data_source is None:
            return Path(self.name)
        return Path(self.name) / self.data_source

    def includes_days(self, days: int) -> bool:
        """Core build errors are only published for the 30 day window."""

        return not (days != 30 and self.name == "build-error" and self.data_source is not None)


def _per_category(key: str) -> AnalyticsCategory:
    return AnalyticsCategory(key=key, kind=CategoryKind.PER_CATEGORY_JSON, name=key)


def _all_core(key: str, data_source: str) -> AnalyticsCategory:
    return AnalyticsCategory(
        key=key,
        kind=CategoryKind.ALL_CORE_FORMULAE,
        name=key.removeprefix("core-"),
        data_source=data_source,
    )


BASE_CATEGORIES: tuple[AnalyticsCategory, ...] = (
    _per_category("build-error"),
    _per_category("install"),
    _per_category("install-on-request"),
    _all_core("core-build-error", CORE_TAP_NAME),
    _all_core("core-install", CORE_TAP_NAME),
    _all_core("core-install-on-request", CORE_TAP_NAME),
)

MAC_CATEGORIES: tuple[AnalyticsCategory, ...] = (
    _per_category("cask-install"),
    _all_core("core-cask-install", CASK_TAP_NAME),
    _per_category("os-version"),
)


def categories_for(target: TargetOs) -> tuple[AnalyticsCategory, ...]:
    if target is TargetOs.MAC:
        return BASE_CATEGORIES + MAC_CATEGORIES
    return BASE_CATEGORIES
