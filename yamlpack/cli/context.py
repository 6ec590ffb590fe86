from __future__ import annotations

from dataclasses import dataclass

import typer

from yamlpack.core.config import CONFIG_FILE_NAME, Config, load_config_or_default
from yamlpack.core.errors import ErrorCode
from yamlpack.core.project import Project, detect_project
from yamlpack.core.result import Err
from yamlpack.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    project: Project
    config: Config
    console: ConsoleProtocol


def build_context() -> CLIContext:
    root_result = detect_project()
    if isinstance(root_result, Err):
        typer.echo(f"error: {root_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    root = root_result.value
    config_result = load_config_or_default(root / CONFIG_FILE_NAME)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    config = config_result.value
    return CLIContext(
        project=Project(root=root, paths=config.paths),
        config=config,
        console=RichConsole(),
    )
