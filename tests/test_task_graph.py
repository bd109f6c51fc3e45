from __future__ import annotations

from collections.abc import Mapping

import allure
import pytest

from formulae_site.tasks import (
    Task,
    TaskArgumentError,
    TaskGraph,
    TaskGraphError,
    TaskParameter,
    TaskState,
    UnknownTaskError,
    parse_task_spec,
)

pytestmark = [
    allure.epic("Task Execution"),
    allure.feature("Task Graph"),
]


class _Recorder:
    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, str]]] = []

    def action(self, name: str):
        def _run(_context, args: Mapping[str, str]) -> None:
            self.calls.append((name, dict(args)))

        return _run


def _diamond(recorder: _Recorder) -> TaskGraph:
    return TaskGraph(
        [
            Task("build", recorder.action("build")),
            Task("html", recorder.action("html"), dependencies=("build",)),
            Task("json", recorder.action("json"), dependencies=("build",)),
            Task("test", dependencies=("html", "json")),
            Task(
                "analytics",
                recorder.action("analytics"),
                parameters=(TaskParameter("os", default="mac"),),
            ),
        ],
        default="test",
    )


def test_dependencies_run_once_in_declaration_order() -> None:
    recorder = _Recorder()
    graph = _diamond(recorder)

    assert graph.invoke("test", None) is True

    assert [name for name, _ in recorder.calls] == ["build", "html", "json"]
    assert graph.state("test") is TaskState.INVOKED
    assert graph.state("analytics") is TaskState.PENDING


def test_second_invoke_is_a_no_op_unless_forced() -> None:
    recorder = _Recorder()
    graph = _diamond(recorder)

    graph.invoke("analytics", None)
    assert graph.invoke("analytics", None, ("linux",)) is False
    assert graph.invoke("analytics", None, ("linux",), force=True) is True

    assert recorder.calls == [("analytics", {"os": "mac"}), ("analytics", {"os": "linux"})]


def test_forced_invoke_does_not_rerun_dependencies() -> None:
    recorder = _Recorder()
    graph = _diamond(recorder)

    graph.invoke("html", None)
    graph.invoke("html", None, force=True)

    assert [name for name, _ in recorder.calls] == ["build", "html", "html"]


def test_reset_allows_rerun() -> None:
    recorder = _Recorder()
    graph = _diamond(recorder)

    graph.invoke("build", None)
    graph.reset("build")
    graph.invoke("build", None)

    assert [name for name, _ in recorder.calls] == ["build", "build"]


def test_too_many_arguments_are_rejected() -> None:
    graph = _diamond(_Recorder())

    with pytest.raises(TaskArgumentError, match="takes 1 argument"):
        graph.invoke("analytics", None, ("linux", "extra"))
    assert graph.state("analytics") is TaskState.PENDING


def test_unknown_task() -> None:
    graph = _diamond(_Recorder())

    with pytest.raises(UnknownTaskError, match="Don't know how to build task 'nope'"):
        graph.invoke("nope", None)


def test_undefined_dependency_is_rejected() -> None:
    with pytest.raises(TaskGraphError, match="undefined task 'missing'"):
        TaskGraph([Task("a", dependencies=("missing",))])


def test_cycles_are_rejected() -> None:
    with pytest.raises(TaskGraphError, match="Circular dependency detected"):
        TaskGraph(
            [
                Task("a", dependencies=("b",)),
                Task("b", dependencies=("c",)),
                Task("c", dependencies=("a",)),
            ],
        )


def test_duplicate_names_are_rejected() -> None:
    with pytest.raises(TaskGraphError, match="Duplicate task name"):
        TaskGraph([Task("a"), Task("a")])


def test_undefined_default_is_rejected() -> None:
    with pytest.raises(TaskGraphError, match="Default task"):
        TaskGraph([Task("a")], default="b")


@pytest.mark.parametrize(
    ("spec", "expected"),
    [
        ("formulae", ("formulae", ())),
        ("analytics[linux]", ("analytics", ("linux",))),
        ("analytics[]", ("analytics", ())),
        ("task[a, b]", ("task", ("a", "b"))),
    ],
)
def test_parse_task_spec(spec: str, expected: tuple[str, tuple[str, ...]]) -> None:
    assert parse_task_spec(spec) == expected


def test_parse_task_spec_rejects_malformed_brackets() -> None:
    with pytest.raises(TaskArgumentError, match="Invalid task spec"):
        parse_task_spec("analytics[linux")


def test_signature_lists_parameters() -> None:
    graph = _diamond(_Recorder())

    assert graph.get("analytics").signature == "analytics[os]"
    assert graph.get("build").signature == "build"
