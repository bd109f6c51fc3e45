"""External command execution with bounded retries."""

from formulae_site.execution.retry import RetryCounter, RetryingExecutor, RetryPolicy
from formulae_site.execution.runner import (
    CommandFailedError,
    CommandResult,
    CommandRunner,
    ExternalCommand,
    Runner,
)

__all__ = [
    "CommandFailedError",
    "CommandResult",
    "CommandRunner",
    "ExternalCommand",
    "RetryCounter",
    "RetryPolicy",
    "RetryingExecutor",
    "Runner",
]
