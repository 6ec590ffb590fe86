"""External build tools: compiler, bundler, minifier.

The pipeline only sees the Compiler, Bundler and Minifier protocols. The
implementations here drive the npm-installed tools (tsc, r.js, uglifyjs)
as subprocesses; tests substitute in-memory fakes.
"""

from __future__ import annotations

import json
import os
import shutil
import tempfile
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Protocol

from yamlpack.core.result import Err, Ok, Result
from yamlpack.output.console import ConsoleProtocol, Style
from yamlpack.platform.process import run
from yamlpack.services.artifacts import Artifact, Variant
from yamlpack.services.bundle_spec import BundleConfiguration
from yamlpack.services.release_errors import (
    BundleFailed,
    CompileFailed,
    MinifyFailed,
    ReleaseError,
    ToolMissing,
)

__all__ = [
    "CommentPolicy",
    "CompilerOptions",
    "Compiler",
    "Bundler",
    "Minifier",
    "RequireJsBundler",
    "TscCompiler",
    "UglifyMinifier",
    "resolve_tool",
]

_COMPILE_TIMEOUT_SECONDS = 10 * 60.0
_BUNDLE_TIMEOUT_SECONDS = 10 * 60.0
_MINIFY_TIMEOUT_SECONDS = 5 * 60.0


class CommentPolicy(StrEnum):
    """Which comments survive minification."""

    NONE = "none"
    SOME = "some"  # license-style: /*! ... */, @license, @preserve
    ALL = "all"


def _empty_options() -> dict[str, object]:
    return {}


@dataclass(frozen=True, slots=True)
class CompilerOptions:
    verbose: bool = True
    compiler_options: dict[str, object] = field(default_factory=_empty_options)


class Compiler(Protocol):
    def compile(
        self, sources: list[Path], options: CompilerOptions, out_dir: Path
    ) -> Result[None, ReleaseError]: ...


class Bundler(Protocol):
    def bundle(self, config: BundleConfiguration) -> Result[Artifact, ReleaseError]: ...


class Minifier(Protocol):
    def minify(
        self, artifact: Artifact, policy: CommentPolicy
    ) -> Result[Artifact, ReleaseError]: ...


def resolve_tool(name: str, bin_dir: Path) -> Result[str, ToolMissing]:
    """Find an executable, preferring node_modules/.bin over PATH.

    A name containing a path separator is taken as a path to the tool.
    """
    if os.sep in name or "/" in name:
        return Ok(name) if Path(name).is_file() else Err(ToolMissing(tool_id=name))

    local = shutil.which(name, path=str(bin_dir)) if bin_dir.is_dir() else None
    found = local or shutil.which(name)
    if found is None:
        return Err(ToolMissing(tool_id=name))
    return Ok(found)


class TscCompiler:
    """TypeScript compiler driven through a generated project file.

    The generated tsconfig sits next to the project's own so relative
    compiler options (typeRoots, paths) resolve the same way.
    """

    def __init__(
        self,
        *,
        tool: str,
        bin_dir: Path,
        config_dir: Path,
        console: ConsoleProtocol,
    ) -> None:
        self._tool = tool
        self._bin_dir = bin_dir
        self._config_dir = config_dir
        self._console = console

    def compile(
        self, sources: list[Path], options: CompilerOptions, out_dir: Path
    ) -> Result[None, ReleaseError]:
        tsc = resolve_tool(self._tool, self._bin_dir)
        if isinstance(tsc, Err):
            return tsc

        project_file = {
            "compilerOptions": {**options.compiler_options, "outDir": out_dir.as_posix()},
            "files": [s.as_posix() for s in sources],
        }
        fd, tmp_name = tempfile.mkstemp(
            prefix=".tsconfig.", suffix=".json", dir=str(self._config_dir)
        )
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(project_file, handle, indent=2)

            cmd = [tsc.value, "-p", str(tmp_path)]
            if options.verbose:
                cmd.append("--listEmittedFiles")
            result = run(cmd, cwd=self._config_dir, timeout=_COMPILE_TIMEOUT_SECONDS)
        finally:
            tmp_path.unlink(missing_ok=True)

        match result:
            case Err(e):
                # tsc reports diagnostics on stdout
                return Err(CompileFailed(returncode=e.returncode, detail=e.detail))
            case Ok(stdout):
                if options.verbose:
                    for line in stdout.splitlines():
                        self._console.print(line, Style.DIM)
                return Ok(None)


class RequireJsBundler:
    """AMD bundler using the r.js optimizer (no minification)."""

    def __init__(self, *, tool: str, bin_dir: Path, cwd: Path) -> None:
        self._tool = tool
        self._bin_dir = bin_dir
        self._cwd = cwd

    def bundle(self, config: BundleConfiguration) -> Result[Artifact, ReleaseError]:
        rjs = resolve_tool(self._tool, self._bin_dir)
        if isinstance(rjs, Err):
            return rjs

        with tempfile.TemporaryDirectory(prefix="yamlpack-") as tmp:
            out_path = Path(tmp) / config.out_name
            profile_path = Path(tmp) / "build.json"
            profile = {**config.to_requirejs(), "out": out_path.as_posix(), "optimize": "none"}
            profile_path.write_text(json.dumps(profile, indent=2), encoding="utf-8")

            result = run(
                [rjs.value, "-o", str(profile_path)],
                cwd=self._cwd,
                timeout=_BUNDLE_TIMEOUT_SECONDS,
            )
            if isinstance(result, Err):
                e = result.error
                return Err(
                    BundleFailed(
                        module_id=config.module_id, returncode=e.returncode, detail=e.detail
                    )
                )

            try:
                contents = out_path.read_text(encoding="utf-8")
            except OSError as e:
                return Err(BundleFailed(module_id=config.module_id, returncode=0, detail=str(e)))

        return Ok(Artifact(name=config.out_name, contents=contents, variant=Variant.DEV))


class UglifyMinifier:
    """Minifier piping artifact text through uglifyjs."""

    def __init__(self, *, tool: str, bin_dir: Path, cwd: Path) -> None:
        self._tool = tool
        self._bin_dir = bin_dir
        self._cwd = cwd

    @staticmethod
    def comment_args(policy: CommentPolicy) -> list[str]:
        match policy:
            case CommentPolicy.NONE:
                return []
            case CommentPolicy.SOME:
                return ["--comments"]
            case CommentPolicy.ALL:
                return ["--comments", "all"]

    def minify(self, artifact: Artifact, policy: CommentPolicy) -> Result[Artifact, ReleaseError]:
        uglify = resolve_tool(self._tool, self._bin_dir)
        if isinstance(uglify, Err):
            return uglify

        cmd = [uglify.value, "--compress", "--mangle", *self.comment_args(policy)]
        result = run(
            cmd,
            cwd=self._cwd,
            input_text=artifact.contents,
            timeout=_MINIFY_TIMEOUT_SECONDS,
        )
        match result:
            case Err(e):
                return Err(
                    MinifyFailed(name=artifact.name, returncode=e.returncode, detail=e.detail)
                )
            case Ok(stdout):
                return Ok(Artifact(name=artifact.name, contents=stdout, variant=Variant.MIN))
