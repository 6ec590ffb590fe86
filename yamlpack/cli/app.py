from __future__ import annotations

import os
from pathlib import Path

import typer

from yamlpack import __version__
from yamlpack.cli.commands.build import (
    clean_out,
    clean_release,
    compile_cmd,
    compile_incremental,
    release,
)
from yamlpack.cli.commands.version_cmd import version_info
from yamlpack.cli.commands.watch_cmd import watch
from yamlpack.core.errors import ErrorCode
from yamlpack.core.project import ROOT_ENV_VAR, is_project_root


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# Commands
app.command("clean-out")(clean_out)
app.command("compile")(compile_cmd)
app.command("compile-incremental")(compile_incremental)
app.command()(watch)
app.command("clean-release")(clean_release)
app.command()(release)
app.command("version")(version_info)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    root: Path | None = typer.Option(
        None,
        "--root",
        help="Project root (overrides auto detection)",
    ),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if root is not None:
        try:
            resolved = root.expanduser().resolve()
        except OSError as e:
            typer.echo(f"error: invalid --root: {e}", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

        if not resolved.is_dir() or not is_project_root(resolved):
            typer.echo(
                f"error: --root '{resolved}' is not a project root (missing package.json)",
                err=True,
            )
            raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

        os.environ[ROOT_ENV_VAR] = str(resolved)


def main() -> None:
    app()
