"""One-time preparation of the analytics command."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from formulae_site.config import Settings
from formulae_site.execution import CommandFailedError, ExternalCommand, Runner

logger = logging.getLogger(__name__)


def setup_analytics_credentials(settings: Settings) -> Path | None:
    """Copy the repository credentials file to the home directory if it is missing there.

    The copy always lands directly in the home directory under the file's base name.
    Returns the destination path when a copy was made.
    """

    name = settings.brew.analytics_credentials_file
    source = settings.resolve(name)
    if not source.exists():
        return None
    destination = settings.home_dir / Path(name).name
    if destination.exists():
        return None
    shutil.copyfile(source, destination)
    logger.info("Copied analytics credentials to %s", destination)
    return destination


def setup_formula_analytics_cmd(settings: Settings, runner: Runner) -> None:
    brew = settings.brew.executable
    runner.set_env("HOMEBREW_NO_AUTO_UPDATE", "1")
    try:
        taps = runner.capture(ExternalCommand.of(brew, "tap"))
    except CommandFailedError as error:
        logger.warning(
            "Could not list taps, tapping %s anyway: %s",
            settings.brew.analytics_tap,
            error,
        )
        taps = ""
    if settings.brew.analytics_tap.lower() not in taps.lower():
        runner.run(ExternalCommand.of(brew, "tap", settings.brew.analytics_tap))
    runner.run(ExternalCommand.of(brew, "formula-analytics", "--setup"))


def setup_analytics(settings: Settings, runner: Runner) -> None:
    setup_analytics_credentials(settings)
    setup_formula_analytics_cmd(settings, runner)
