"""Error presentation utilities.

Centralized release error formatting and exit code mapping.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from yamlpack.core.errors import ErrorCode
from yamlpack.output.console import Style
from yamlpack.services.release_errors import (
    BundleFailed,
    CompileFailed,
    MetadataInvalid,
    MinifyFailed,
    ReleaseError,
    SourcesMissing,
    ToolMissing,
    WriteFailed,
)

if TYPE_CHECKING:
    from yamlpack.output.console import ConsoleProtocol

__all__ = ["print_release_error", "release_error_exit_code"]


def _print_detail(detail: str, console: ConsoleProtocol) -> None:
    for line in detail.splitlines():
        console.print(f"  {line}", Style.DIM)


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    """Print a release error to the console."""
    match error:
        case SourcesMissing(path=path):
            console.error(f"not found: {path}")
        case MetadataInvalid(path=path, reason=reason):
            console.error(f"invalid project metadata: {path} ({reason})")
        case ToolMissing(tool_id=tool_id, hint=hint):
            console.error(f"{tool_id}: missing")
            console.print(f"hint: {hint}", Style.DIM)
        case CompileFailed(returncode=rc, detail=detail):
            console.error(f"compile failed (exit {rc})")
            _print_detail(detail, console)
        case BundleFailed(module_id=module_id, returncode=rc, detail=detail):
            console.error(f"bundling {module_id} failed (exit {rc})")
            _print_detail(detail, console)
        case MinifyFailed(name=name, returncode=rc, detail=detail):
            console.error(f"minifying {name} failed (exit {rc})")
            _print_detail(detail, console)
        case WriteFailed(path=path, reason=reason):
            console.error(f"cannot write {path}: {reason}")


def release_error_exit_code(error: ReleaseError) -> int:
    """Get the process exit code for a release error."""
    match error:
        case ToolMissing() | MetadataInvalid():
            return int(ErrorCode.ENV_ERROR)
        case CompileFailed() | BundleFailed() | MinifyFailed():
            return int(ErrorCode.BUILD_ERROR)
        case SourcesMissing() | WriteFailed():
            return int(ErrorCode.IO_ERROR)
