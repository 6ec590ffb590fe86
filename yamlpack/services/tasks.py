"""Task graph for the build commands.

Each command is a named task with declared prerequisites. Running a task runs
its transitive prerequisites first (leaf-first, each once, in declaration
order) and stops at the first failure, so e.g. a compile error prevents any
release output from being written.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from yamlpack.core.result import Err, Ok, Result

if TYPE_CHECKING:
    from yamlpack.services.compile import CompileService
    from yamlpack.services.release import ReleaseService
    from yamlpack.services.release_errors import ReleaseError

__all__ = [
    "Task",
    "TaskGraph",
    "TaskGraphError",
    "build_task_graph",
]


class TaskGraphError(ValueError):
    """Raised when the graph is malformed (unknown task, cycle, duplicate)."""


@dataclass(frozen=True, slots=True)
class Task[E]:
    """A named unit of work.

    Attributes:
        name: Task name, as used on the command line
        action: Callable returning Ok(...) or Err(error)
        prerequisites: Tasks that must succeed first
    """

    name: str
    action: Callable[[], Result[object, E]]
    prerequisites: tuple[str, ...] = ()


class TaskGraph[E]:
    """Directed acyclic graph of tasks, validated at construction."""

    def __init__(self, tasks: Iterable[Task[E]]) -> None:
        self._tasks: dict[str, Task[E]] = {}
        for task in tasks:
            if task.name in self._tasks:
                raise TaskGraphError(f"duplicate task: {task.name}")
            self._tasks[task.name] = task

        for task in self._tasks.values():
            for prereq in task.prerequisites:
                if prereq not in self._tasks:
                    raise TaskGraphError(f"{task.name}: unknown prerequisite {prereq}")

        for name in self._tasks:
            self.plan(name)

    @property
    def names(self) -> list[str]:
        return list(self._tasks)

    def plan(self, target: str) -> list[str]:
        """Execution order for target: prerequisites first, target last."""
        if target not in self._tasks:
            raise TaskGraphError(f"unknown task: {target}")

        order: list[str] = []
        visiting: list[str] = []

        def visit(name: str) -> None:
            if name in order:
                return
            if name in visiting:
                cycle = " -> ".join([*visiting[visiting.index(name) :], name])
                raise TaskGraphError(f"cycle: {cycle}")
            visiting.append(name)
            for prereq in self._tasks[name].prerequisites:
                visit(prereq)
            visiting.pop()
            order.append(name)

        visit(target)
        return order

    def run(
        self,
        target: str,
        on_start: Callable[[str], None] | None = None,
    ) -> Result[list[str], E]:
        """Run target and its prerequisites.

        Returns Ok(names of tasks run) or the first Err encountered.
        """
        done: list[str] = []
        for name in self.plan(target):
            if on_start is not None:
                on_start(name)
            result = self._tasks[name].action()
            if isinstance(result, Err):
                return result
            done.append(name)
        return Ok(done)


def build_task_graph(
    compile_svc: CompileService,
    release_svc: ReleaseService,
) -> TaskGraph[ReleaseError]:
    """The standard graph behind the CLI commands."""
    return TaskGraph(
        [
            Task("clean-out", compile_svc.clean_out),
            Task("compile", compile_svc.compile, ("clean-out",)),
            Task("compile-incremental", compile_svc.compile),
            Task("clean-release", release_svc.clean_release),
            Task("release", release_svc.release, ("clean-release", "compile")),
        ]
    )
