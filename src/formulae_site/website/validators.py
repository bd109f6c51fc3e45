"""Validation of the built site output."""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from formulae_site.errors import FormulaeSiteError
from formulae_site.execution import ExternalCommand
from formulae_site.execution.runner import split_command

HTTP_STATUS_IGNORE: tuple[int, ...] = (0, 302, 303, 429, 521)
URL_IGNORE: tuple[str, ...] = ("http://formulae.brew.sh",)


def htmlproofer_command(htmlproofer: str, site_dir: Path) -> ExternalCommand:
    """HTML proofer invocation; pass or fail follows its own exit code."""

    return split_command(
        htmlproofer,
        str(site_dir),
        "--assume-extension",
        "--check-external-hash",
        "--check-favicon",
        "--check-opengraph",
        "--check-img-http",
        "--disable-external",
        "--http-status-ignore",
        ",".join(str(status) for status in HTTP_STATUS_IGNORE),
        "--url-ignore",
        ",".join(URL_IGNORE),
    )


@dataclass(slots=True)
class JsonLintIssue:
    """One invalid JSON file."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


@dataclass(slots=True)
class JsonLintReport:
    """Outcome of linting a set of JSON files."""

    files_checked: int = 0
    issues: list[JsonLintIssue] = field(default_factory=list)

    @property
    def errors_count(self) -> int:
        return len(self.issues)

    def has_errors(self) -> bool:
        return bool(self.issues)


class JsonLintError(FormulaeSiteError):
    """Raised when any linted JSON file is invalid."""

    def __init__(self, report: JsonLintReport) -> None:
        super().__init__(f"JSON Lint found {report.errors_count} errors!")
        self.report = report


class _DuplicateKeyError(ValueError):
    pass


class _InvalidConstantError(ValueError):
    pass


def _reject_duplicate_keys(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in pairs:
        if key in result:
            raise _DuplicateKeyError(f"duplicate key {key!r}")
        result[key] = value
    return result


def _reject_constant(name: str) -> Any:
    raise _InvalidConstantError(f"invalid constant {name!r}")


def json_files(site_dir: Path) -> list[Path]:
    return sorted(path for path in site_dir.rglob("*.json") if path.is_file())


def lint_json_file(path: Path) -> JsonLintIssue | None:
    """Return an issue for an empty, malformed, duplicate-key or NaN/Infinity JSON file."""

    try:
        text = path.read_text("utf-8")
    except UnicodeDecodeError as error:
        return JsonLintIssue(path=path, message=f"not valid UTF-8: {error}")
    if not text.strip():
        return JsonLintIssue(path=path, message="file is empty")
    try:
        json.loads(
            text,
            object_pairs_hook=_reject_duplicate_keys,
            parse_constant=_reject_constant,
        )
    except (_DuplicateKeyError, _InvalidConstantError) as error:
        return JsonLintIssue(path=path, message=str(error))
    except json.JSONDecodeError as error:
        return JsonLintIssue(path=path, message=str(error))
    return None


def lint_json_files(paths: Iterable[Path]) -> JsonLintReport:
    report = JsonLintReport()
    for path in paths:
        report.files_checked += 1
        issue = lint_json_file(path)
        if issue is not None:
            report.issues.append(issue)
    return report
