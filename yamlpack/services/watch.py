"""Source watching by polling modification times."""

from __future__ import annotations

import time
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from yamlpack.core.result import Err

if TYPE_CHECKING:
    from yamlpack.core.result import Result
    from yamlpack.output.console import ConsoleProtocol

__all__ = ["Snapshot", "snapshot", "watch"]

Snapshot = dict[Path, int]


def snapshot(files: list[Path]) -> Snapshot:
    """Map each existing file to its mtime in nanoseconds."""
    state: Snapshot = {}
    for path in files:
        try:
            state[path] = path.stat().st_mtime_ns
        except FileNotFoundError:
            continue
    return state


def watch[E](
    list_files: Callable[[], list[Path]],
    rebuild: Callable[[], Result[object, E]],
    *,
    console: ConsoleProtocol,
    on_error: Callable[[E], None],
    interval: float,
    sleep: Callable[[float], None] = time.sleep,
    max_polls: int | None = None,
) -> int:
    """Poll the watched files and rebuild on any add, remove or change.

    Rebuild failures are reported through on_error and watching continues.
    Runs until interrupted (or max_polls polls). Returns the rebuild count.
    """
    previous = snapshot(list_files())
    rebuilds = 0
    polls = 0
    while max_polls is None or polls < max_polls:
        sleep(interval)
        polls += 1
        current = snapshot(list_files())
        if current == previous:
            continue
        previous = current
        rebuilds += 1
        console.info("change detected, recompiling")
        result = rebuild()
        if isinstance(result, Err):
            on_error(result.error)
    return rebuilds
