"""Bounded exponential-backoff retry around the command runner."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from formulae_site.execution.runner import (
    CommandFailedError,
    CommandResult,
    ExternalCommand,
    Runner,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Retry bound and delay schedule."""

    max_retries: int = 3
    base_delay_exponent: int = 3

    def delay_for(self, retry_count: int) -> int:
        """Seconds to sleep before retry number ``retry_count`` (0-based)."""

        return 2 ** (retry_count + self.base_delay_exponent)


@dataclass(slots=True)
class RetryCounter:
    """Retries consumed so far.

    One counter is shared by every retrying call of a run, so the bound
    applies to the whole analytics generation rather than to each command.
    It is never reset within a run.
    """

    retries: int = 0


class RetryingExecutor:
    """Run commands through a runner, retrying failures with backoff."""

    def __init__(
        self,
        runner: Runner,
        *,
        policy: RetryPolicy | None = None,
        counter: RetryCounter | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.runner = runner
        self.policy = policy or RetryPolicy()
        self.counter = counter if counter is not None else RetryCounter()
        self._sleep = sleep

    def run(self, command: ExternalCommand) -> CommandResult:
        while True:
            try:
                return self.runner.run(command)
            except CommandFailedError as error:
                if self.counter.retries >= self.policy.max_retries:
                    logger.error(
                        "Giving up after %d retries: %s",
                        self.counter.retries,
                        error,
                    )
                    raise
                delay = self.policy.delay_for(self.counter.retries)
                logger.warning(
                    "%s; retrying in %ds (retry %d/%d)",
                    error,
                    delay,
                    self.counter.retries + 1,
                    self.policy.max_retries,
                )
                self._sleep(delay)
                self.counter.retries += 1
