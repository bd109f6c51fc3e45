"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from formulae_site.config import Settings
from formulae_site.execution import CommandFailedError, CommandResult, ExternalCommand


class FakeRunner:
    """Records commands instead of running them.

    ``failures`` maps a predicate to how many times matching commands fail
    before succeeding. Commands with a stdout path get ``output`` written there.
    """

    def __init__(self, root_dir: Path, *, tap_output: str = "") -> None:
        self.root_dir = root_dir
        self.tap_output = tap_output
        self.commands: list[ExternalCommand] = []
        self.captured: list[ExternalCommand] = []
        self.env: dict[str, str] = {}
        self.failures: list[tuple[Callable[[ExternalCommand], bool], int]] = []
        self.output = "{}\n"

    def fail(self, predicate: Callable[[ExternalCommand], bool], times: int) -> None:
        self.failures.append((predicate, times))

    def set_env(self, name: str, value: str) -> None:
        self.env[name] = value

    def capture(self, command: ExternalCommand) -> str:
        self.captured.append(command)
        self._maybe_fail(command)
        return self.tap_output

    def run(self, command: ExternalCommand) -> CommandResult:
        self.commands.append(command)
        self._maybe_fail(command)
        if command.stdout_path is not None:
            target = self.root_dir / command.stdout_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(self.output, "utf-8")
        return CommandResult(command=command, exit_code=0)

    def _maybe_fail(self, command: ExternalCommand) -> None:
        for index, (predicate, remaining) in enumerate(self.failures):
            if remaining > 0 and predicate(command):
                self.failures[index] = (predicate, remaining - 1)
                raise CommandFailedError(command, 1)


@pytest.fixture()
def fake_runner(tmp_path: Path) -> FakeRunner:
    return FakeRunner(tmp_path)


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    home = tmp_path / "home"
    home.mkdir()
    return Settings(root_dir=tmp_path, home_dir=home)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path: Path) -> None:
    for name in (
        "FORMULAE_SITE_ROOT",
        "FORMULAE_SITE_BREW",
        "FORMULAE_SITE_MAX_RETRIES",
        "FORMULAE_SITE_RETRY_BASE_EXPONENT",
        "FORMULAE_SITE_ANALYTICS_CREDENTIALS",
        "FORMULAE_SITE_CONFIG_PATH",
        "FORMULAE_SITE_JEKYLL_COMMAND",
        "FORMULAE_SITE_HTMLPROOFER_COMMAND",
    ):
        monkeypatch.delenv(name, raising=False)
    home = tmp_path / "env-home"
    home.mkdir(exist_ok=True)
    monkeypatch.setenv("FORMULAE_SITE_HOME", str(home))
