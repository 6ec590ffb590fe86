"""Version command - show the version string a release would carry."""

from __future__ import annotations

import typer

from yamlpack.cli.context import build_context
from yamlpack.core.result import Err
from yamlpack.git.head import read_head
from yamlpack.output.console import Style
from yamlpack.output.errors import print_release_error, release_error_exit_code
from yamlpack.services.banner import format_version
from yamlpack.services.metadata import read_semver


def version_info() -> None:
    """Print `<semver>(<commit>)` and how HEAD was resolved."""
    ctx = build_context()

    semver = read_semver(ctx.project.package_json_path)
    if isinstance(semver, Err):
        print_release_error(semver.error, ctx.console)
        raise typer.Exit(code=release_error_exit_code(semver.error))

    head = read_head(ctx.project.root)
    commit = head.commit if head else None
    ctx.console.print(format_version(semver.value, commit))

    if head is None:
        ctx.console.print(f"no readable HEAD in {ctx.project.git_dir}", Style.DIM)
    elif head.ref is None:
        state = "detached" if head.is_detached else f"unrecognised HEAD: {head.raw}"
        ctx.console.print(state, Style.DIM)
    else:
        resolved = head.ref.commit or "no commit"
        ctx.console.print(f"{head.ref.name} -> {resolved}", Style.DIM)
