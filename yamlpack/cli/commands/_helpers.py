"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer

from yamlpack.core.result import Err
from yamlpack.output.console import Style
from yamlpack.output.errors import print_release_error, release_error_exit_code
from yamlpack.services.compile import CompileService
from yamlpack.services.release import ReleaseService
from yamlpack.services.tasks import TaskGraph, build_task_graph

if TYPE_CHECKING:
    from yamlpack.cli.context import CLIContext
    from yamlpack.services.release_errors import ReleaseError


def task_graph(ctx: CLIContext) -> TaskGraph[ReleaseError]:
    return build_task_graph(
        CompileService(project=ctx.project, config=ctx.config, console=ctx.console),
        ReleaseService(project=ctx.project, config=ctx.config, console=ctx.console),
    )


def run_task(ctx: CLIContext, target: str) -> None:
    """Run a task and its prerequisites, exiting non-zero on failure."""

    def announce(name: str) -> None:
        ctx.console.print(f"> {name}", Style.DIM)

    result = task_graph(ctx).run(target, on_start=announce)
    if isinstance(result, Err):
        print_release_error(result.error, ctx.console)
        raise typer.Exit(code=release_error_exit_code(result.error))
