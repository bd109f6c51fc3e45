"""Runtime configuration for site data generation and validation tasks."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

DEFAULT_SITE_DESTINATION = "_site"


@dataclass(slots=True)
class BrewSettings:
    """Package-manager CLI settings."""

    executable: str = "brew"
    analytics_tap: str = "Homebrew/formula-analytics"
    analytics_credentials_file: str = ".homebrew_analytics.json"


@dataclass(slots=True)
class RetrySettings:
    """Retry bounds for flaky analytics queries."""

    max_retries: int = 3
    base_delay_exponent: int = 3


@dataclass(slots=True)
class SiteSettings:
    """Static-site generator and validator settings."""

    config_path: Path = Path("_config.yml")
    jekyll_command: str = "bundle exec jekyll"
    htmlproofer_command: str = "htmlproofer"


@dataclass(slots=True)
class Settings:
    """Application settings grouped by concern."""

    root_dir: Path = Path()
    home_dir: Path = field(default_factory=Path.home)
    brew: BrewSettings = field(default_factory=BrewSettings)
    retry: RetrySettings = field(default_factory=RetrySettings)
    site: SiteSettings = field(default_factory=SiteSettings)

    @classmethod
    def from_env(
        cls,
        root_dir: Path | None = None,
        config_path: Path | None = None,
    ) -> Settings:
        """Load settings from environment with defaults matching the site repository."""

        home = os.getenv("FORMULAE_SITE_HOME", "").strip()
        return cls(
            root_dir=root_dir or Path(os.getenv("FORMULAE_SITE_ROOT", ".")),
            home_dir=Path(home) if home else Path.home(),
            brew=BrewSettings(
                executable=os.getenv("FORMULAE_SITE_BREW", "brew"),
                analytics_credentials_file=os.getenv(
                    "FORMULAE_SITE_ANALYTICS_CREDENTIALS",
                    ".homebrew_analytics.json",
                ),
            ),
            retry=RetrySettings(
                max_retries=int(os.getenv("FORMULAE_SITE_MAX_RETRIES", "3")),
                base_delay_exponent=int(os.getenv("FORMULAE_SITE_RETRY_BASE_EXPONENT", "3")),
            ),
            site=SiteSettings(
                config_path=config_path
                or Path(os.getenv("FORMULAE_SITE_CONFIG_PATH", "_config.yml")),
                jekyll_command=os.getenv("FORMULAE_SITE_JEKYLL_COMMAND", "bundle exec jekyll"),
                htmlproofer_command=os.getenv("FORMULAE_SITE_HTMLPROOFER_COMMAND", "htmlproofer"),
            ),
        )

    def validate(self) -> None:
        """Raise configuration error for values the task runner cannot use."""

        if self.retry.max_retries < 0:
            raise ValueError("FORMULAE_SITE_MAX_RETRIES must be >= 0.")
        if self.retry.base_delay_exponent < 0:
            raise ValueError("FORMULAE_SITE_RETRY_BASE_EXPONENT must be >= 0.")
        if not self.brew.executable.strip():
            raise ValueError("FORMULAE_SITE_BREW must not be empty.")
        if not self.site.jekyll_command.strip():
            raise ValueError("FORMULAE_SITE_JEKYLL_COMMAND must not be empty.")
        if not self.site.htmlproofer_command.strip():
            raise ValueError("FORMULAE_SITE_HTMLPROOFER_COMMAND must not be empty.")

    def resolve(self, path: str | Path) -> Path:
        """Resolve a repository-relative path against the root directory."""

        candidate = Path(path)
        if candidate.is_absolute():
            return candidate
        return self.root_dir / candidate


@dataclass(frozen=True, slots=True)
class SiteConfig:
    """Immutable view of the site generator's YAML configuration."""

    values: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def load(cls, path: Path) -> SiteConfig:
        """Read the YAML config once; a missing file yields an empty config."""

        if not path.exists():
            return cls()
        try:
            with path.open(encoding="utf-8") as handle:
                loaded = yaml.safe_load(handle)
        except yaml.YAMLError as error:
            raise ValueError(f"Invalid site config {path}: {error}") from error
        if loaded is None:
            return cls()
        if not isinstance(loaded, dict):
            raise ValueError(f"Site config must be a mapping: {path}")
        return cls(values=MappingProxyType(loaded))

    def dig(self, *keys: str) -> Any:
        """Return a nested value, or the whole config when no keys are given."""

        if not keys:
            return self.values
        current: Any = self.values
        for key in keys:
            if not isinstance(current, Mapping):
                return None
            current = current.get(key)
            if current is None:
                return None
        return current

    @property
    def destination(self) -> str:
        value = self.dig("destination")
        return str(value) if value else DEFAULT_SITE_DESTINATION
