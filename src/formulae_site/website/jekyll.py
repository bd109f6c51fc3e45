"""Static-site generator entry points."""

from __future__ import annotations

from pathlib import Path

from formulae_site.config import Settings
from formulae_site.execution import ExternalCommand
from formulae_site.execution.runner import split_command

DEFAULT_CONFIG_PATH = Path("_config.yml")


def build_command(settings: Settings) -> ExternalCommand:
    return split_command(settings.site.jekyll_command, "build", *_config_args(settings))


def serve_command(settings: Settings) -> ExternalCommand:
    return split_command(settings.site.jekyll_command, "serve", *_config_args(settings))


def _config_args(settings: Settings) -> tuple[str, ...]:
    if settings.site.config_path == DEFAULT_CONFIG_PATH:
        return ()
    return ("--config", str(settings.site.config_path))
