from __future__ import annotations

from pathlib import Path

import allure
import pytest

from formulae_site.execution import (
    CommandFailedError,
    ExternalCommand,
    RetryCounter,
    RetryingExecutor,
    RetryPolicy,
)

pytestmark = [
    allure.epic("Task Execution"),
    allure.feature("Retry With Backoff"),
]


def _always(_command: ExternalCommand) -> bool:
    return True


def test_delay_schedule_doubles_from_eight_seconds() -> None:
    policy = RetryPolicy()

    assert [policy.delay_for(count) for count in range(3)] == [8, 16, 32]


@pytest.mark.parametrize("failures", [0, 1, 2, 3])
def test_succeeds_when_failures_within_bound(fake_runner, failures: int) -> None:
    sleeps: list[float] = []
    fake_runner.fail(_always, failures)
    executor = RetryingExecutor(fake_runner, sleep=sleeps.append)

    result = executor.run(ExternalCommand.of("brew", "formula-analytics"))

    assert result.exit_code == 0
    assert len(fake_runner.commands) == failures + 1
    assert sleeps == [8, 16, 32][:failures]
    assert executor.counter.retries == failures


def test_fails_after_max_retries_plus_one_attempts(fake_runner) -> None:
    sleeps: list[float] = []
    fake_runner.fail(_always, 10)
    executor = RetryingExecutor(fake_runner, sleep=sleeps.append)

    with pytest.raises(CommandFailedError):
        executor.run(ExternalCommand.of("brew", "formula-analytics"))

    assert len(fake_runner.commands) == 4
    assert sleeps == [8, 16, 32]


def test_zero_retries_fails_immediately(fake_runner) -> None:
    sleeps: list[float] = []
    fake_runner.fail(_always, 1)
    executor = RetryingExecutor(
        fake_runner,
        policy=RetryPolicy(max_retries=0),
        sleep=sleeps.append,
    )

    with pytest.raises(CommandFailedError):
        executor.run(ExternalCommand.of("brew"))

    assert len(fake_runner.commands) == 1
    assert sleeps == []


def test_counter_is_shared_across_commands(fake_runner) -> None:
    sleeps: list[float] = []
    counter = RetryCounter()
    first = ExternalCommand.of("brew", "first")
    second = ExternalCommand.of("brew", "second", stdout_path=Path("second.json"))
    fake_runner.fail(lambda command: command == first, 2)
    fake_runner.fail(lambda command: command == second, 2)
    executor = RetryingExecutor(fake_runner, counter=counter, sleep=sleeps.append)

    executor.run(first)
    with pytest.raises(CommandFailedError):
        executor.run(second)

    assert counter.retries == 3
    assert sleeps == [8, 16, 32]
    assert fake_runner.commands == [first, first, first, second, second]


def test_executors_sharing_a_counter_share_the_bound(fake_runner) -> None:
    counter = RetryCounter(retries=3)
    fake_runner.fail(_always, 1)
    executor = RetryingExecutor(fake_runner, counter=counter, sleep=lambda _seconds: None)

    with pytest.raises(CommandFailedError):
        executor.run(ExternalCommand.of("brew"))

    assert len(fake_runner.commands) == 1
