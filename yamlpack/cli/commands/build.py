"""Build commands - clean, compile and release."""

from __future__ import annotations

from yamlpack.cli.commands._helpers import run_task
from yamlpack.cli.context import build_context


def clean_out() -> None:
    """Remove compiled modules (out/)."""
    run_task(build_context(), "clean-out")


def compile_cmd() -> None:
    """Clean out/ and compile all sources."""
    run_task(build_context(), "compile")


def compile_incremental() -> None:
    """Compile all sources into out/ without cleaning first."""
    run_task(build_context(), "compile-incremental")


def clean_release() -> None:
    """Remove release artifacts (release/)."""
    run_task(build_context(), "clean-release")


def release() -> None:
    """Clean, compile, bundle and minify the release artifacts."""
    run_task(build_context(), "release")
