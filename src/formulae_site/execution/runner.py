"""Subprocess-based runner for external tools."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Protocol

from formulae_site.errors import FormulaeSiteError

logger = logging.getLogger(__name__)

COMMAND_NOT_FOUND_EXIT_CODE = 127


@dataclass(frozen=True, slots=True)
class ExternalCommand:
    """Program arguments plus an optional stdout destination."""

    args: tuple[str, ...]
    stdout_path: Path | None = None

    @classmethod
    def of(cls, *args: str, stdout_path: Path | None = None) -> ExternalCommand:
        return cls(args=tuple(args), stdout_path=stdout_path)

    def __str__(self) -> str:
        rendered = shlex.join(self.args)
        if self.stdout_path is not None:
            rendered = f"{rendered} > {shlex.quote(str(self.stdout_path))}"
        return rendered


@dataclass(slots=True)
class CommandResult:
    """Outcome of one successful command execution."""

    command: ExternalCommand
    exit_code: int


class CommandFailedError(FormulaeSiteError):
    """External command exited non-zero or could not be started."""

    def __init__(self, command: ExternalCommand, exit_code: int, detail: str | None = None) -> None:
        message = f"Command failed with status ({exit_code}): [{command}]"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.command = command
        self.exit_code = exit_code


class Runner(Protocol):
    """Protocol implemented by command runners."""

    def run(self, command: ExternalCommand) -> CommandResult:
        """Run the command to completion or raise CommandFailedError."""

    def capture(self, command: ExternalCommand) -> str:
        """Run the command and return its stdout."""

    def set_env(self, name: str, value: str) -> None:
        """Apply an environment override to later child processes."""


class CommandRunner:
    """Execute external commands synchronously, inheriting stderr."""

    def __init__(self, *, cwd: Path | None = None) -> None:
        self.cwd = cwd
        self._env_overrides: dict[str, str] = {}

    def set_env(self, name: str, value: str) -> None:
        self._env_overrides[name] = value

    def run(self, command: ExternalCommand) -> CommandResult:
        logger.info("%s", command)
        if command.stdout_path is None:
            exit_code = self._wait(command, stdout_handle=None)
        else:
            stdout_path = self._resolve(command.stdout_path)
            stdout_path.parent.mkdir(parents=True, exist_ok=True)
            with stdout_path.open("w", encoding="utf-8") as stdout_handle:
                exit_code = self._wait(command, stdout_handle=stdout_handle)
        if exit_code != 0:
            raise CommandFailedError(command, exit_code)
        return CommandResult(command=command, exit_code=exit_code)

    def capture(self, command: ExternalCommand) -> str:
        logger.debug("capture: %s", command)
        try:
            completed = subprocess.run(  # noqa: S603
                list(command.args),
                cwd=self.cwd,
                env=self._environment(),
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as error:
            raise CommandFailedError(
                command,
                COMMAND_NOT_FOUND_EXIT_CODE,
                f"command not found: {command.args[0]}",
            ) from error
        if completed.returncode != 0:
            raise CommandFailedError(command, completed.returncode, completed.stderr.strip())
        return completed.stdout

    def _wait(self, command: ExternalCommand, *, stdout_handle: IO[str] | None) -> int:
        try:
            process = subprocess.Popen(  # noqa: S603
                list(command.args),
                cwd=self.cwd,
                env=self._environment(),
                stdout=stdout_handle,
                text=True,
            )
        except FileNotFoundError as error:
            raise CommandFailedError(
                command,
                COMMAND_NOT_FOUND_EXIT_CODE,
                f"command not found: {command.args[0]}",
            ) from error
        except OSError as error:
            raise CommandFailedError(command, 1, f"failed to start: {error}") from error
        return process.wait()

    def _environment(self) -> dict[str, str]:
        env = os.environ.copy()
        env.update(self._env_overrides)
        return env

    def _resolve(self, path: Path) -> Path:
        if path.is_absolute() or self.cwd is None:
            return path
        return self.cwd / path


def split_command(template: str, *extra: str) -> ExternalCommand:
    """Build a command from a shell-style prefix such as ``bundle exec jekyll``."""

    head: Sequence[str] = shlex.split(template)
    if not head:
        raise ValueError("Command template rendered empty command.")
    return ExternalCommand(args=(*head, *extra))
