"""Compile service: TypeScript sources -> out/."""

from __future__ import annotations

from typing import TYPE_CHECKING

from yamlpack.core.result import Err, Ok, Result
from yamlpack.output.console import Style
from yamlpack.platform.files import remove_tree
from yamlpack.services.base import BaseService
from yamlpack.services.metadata import read_compiler_options
from yamlpack.services.release_errors import ReleaseError, SourcesMissing, WriteFailed
from yamlpack.services.toolchain import CompilerOptions, TscCompiler

if TYPE_CHECKING:
    from pathlib import Path

    from yamlpack.core.config import Config
    from yamlpack.core.project import Project
    from yamlpack.output.console import ConsoleProtocol
    from yamlpack.services.toolchain import Compiler


class CompileService(BaseService):
    """Clean and compile the project's sources."""

    def __init__(
        self,
        *,
        project: Project,
        config: Config,
        console: ConsoleProtocol,
        compiler: Compiler | None = None,
    ) -> None:
        super().__init__(project=project, config=config, console=console)
        self._compiler = compiler or TscCompiler(
            tool=config.tools.tsc,
            bin_dir=project.tools_bin_dir,
            config_dir=project.src_dir,
            console=console,
        )

    def clean_out(self) -> Result[None, ReleaseError]:
        """Remove the compiled-output directory."""
        return clean_dir(self._project.out_dir, self._console)

    def compile(self) -> Result[None, ReleaseError]:
        """Compile every src/**/*.ts into out/ (no clean)."""
        src_dir = self._project.src_dir
        if not src_dir.is_dir():
            return Err(SourcesMissing(path=src_dir))

        options = read_compiler_options(self._project.tsconfig_path)
        if isinstance(options, Err):
            return options

        sources = self._project.source_files()
        if not sources:
            return Err(SourcesMissing(path=src_dir / "**" / "*.ts"))

        self._console.header(f"Compiling {len(sources)} sources")
        result = self._compiler.compile(
            sources,
            CompilerOptions(verbose=True, compiler_options=options.value),
            self._project.out_dir,
        )
        if isinstance(result, Err):
            return result

        self._console.success(str(self._project.out_dir))
        return Ok(None)


def clean_dir(path: Path, console: ConsoleProtocol) -> Result[None, ReleaseError]:
    """Remove a generated directory tree if present."""
    try:
        removed = remove_tree(path)
    except OSError as e:
        return Err(WriteFailed(path=path, reason=str(e)))
    if removed:
        console.print(f"removed {path}", Style.DIM)
    return Ok(None)
