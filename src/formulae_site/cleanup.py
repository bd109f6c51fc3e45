"""Declarative registry of generated paths removed by clean and clobber."""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)


class CleanupKind(str, Enum):
    """Scope of a cleanup registration."""

    CLEAN = "clean"
    CLOBBER = "clobber"


@dataclass(frozen=True, slots=True)
class CleanupEntry:
    kind: CleanupKind
    task_name: str
    patterns: tuple[str, ...]


class CleanupRegistry:
    """Path globs per generating task, relative to the repository root."""

    def __init__(self, root_dir: Path) -> None:
        self.root_dir = root_dir
        self._entries: list[CleanupEntry] = []

    def register(self, kind: CleanupKind, task_name: str, patterns: Iterable[str]) -> None:
        self._entries.append(
            CleanupEntry(kind=kind, task_name=task_name, patterns=tuple(patterns)),
        )

    def entries(self, kind: CleanupKind | None = None) -> list[CleanupEntry]:
        return [entry for entry in self._entries if kind is None or entry.kind is kind]

    def patterns(self, kind: CleanupKind) -> list[str]:
        return [pattern for entry in self.entries(kind) for pattern in entry.patterns]

    def paths(self, kind: CleanupKind) -> list[Path]:
        """Existing paths matching the globs registered for ``kind``."""

        matched: list[Path] = []
        seen: set[Path] = set()
        for pattern in self.patterns(kind):
            for path in sorted(self._glob(pattern)):
                if path not in seen:
                    seen.add(path)
                    matched.append(path)
        return matched

    def _glob(self, pattern: str) -> Iterable[Path]:
        candidate = Path(pattern)
        if not candidate.is_absolute():
            return self.root_dir.glob(pattern)
        # pathlib only globs relative patterns; search absolute ones from their anchor.
        anchor = Path(candidate.anchor)
        return anchor.glob(str(candidate.relative_to(anchor)))

    def clean(self) -> list[Path]:
        return self._remove(self.paths(CleanupKind.CLEAN))

    def clobber(self) -> list[Path]:
        return self.clean() + self._remove(self.paths(CleanupKind.CLOBBER))

    def _remove(self, paths: list[Path]) -> list[Path]:
        removed: list[Path] = []
        for path in paths:
            if path.is_dir() and not path.is_symlink():
                shutil.rmtree(path)
            elif path.exists() or path.is_symlink():
                path.unlink()
            else:
                continue
            logger.debug("Removed %s", path)
            removed.append(path)
        return removed
