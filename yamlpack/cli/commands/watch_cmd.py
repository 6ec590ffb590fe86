"""Watch command - recompile on source changes."""

from __future__ import annotations

import typer

from yamlpack.cli.commands._helpers import run_task, task_graph
from yamlpack.cli.context import build_context
from yamlpack.output.console import Style
from yamlpack.output.errors import print_release_error
from yamlpack.services.watch import watch as watch_sources


def watch(
    interval: float | None = typer.Option(
        None, "--interval", min=0.05, help="Polling interval in seconds", show_default=False
    ),
) -> None:
    """Compile, then recompile whenever a source file changes."""
    ctx = build_context()
    run_task(ctx, "compile")

    graph = task_graph(ctx)
    poll = interval or ctx.config.watch.interval
    ctx.console.print(f"watching {ctx.project.src_dir} (Ctrl+C to stop)", Style.DIM)
    try:
        watch_sources(
            ctx.project.source_files,
            lambda: graph.run("compile-incremental"),
            console=ctx.console,
            on_error=lambda error: print_release_error(error, ctx.console),
            interval=poll,
        )
    except KeyboardInterrupt:
        ctx.console.print("stopped", Style.DIM)
