"""Error types shared across task execution."""

from __future__ import annotations


class FormulaeSiteError(RuntimeError):
    """Base error for failures that abort the current task run."""
