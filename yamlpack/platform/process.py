"""Run the external build tools (tsc, r.js, uglifyjs).

Tools are run to completion with captured text output. A non-zero exit,
a launch failure or a timeout comes back as Err(ProcessError) so callers can
turn it into their own error type:

    match run([tsc, "-p", str(tsconfig)], cwd=project.src_dir):
        case Ok(listing):
            ...
        case Err(failure):
            return Err(CompileFailed(failure.returncode, failure.detail))
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from yamlpack.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run"]

NOT_STARTED = -1


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A tool invocation that did not succeed.

    returncode is NOT_STARTED when the process could not be launched or was
    killed on timeout; stderr then carries the reason.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def detail(self) -> str:
        """Best available failure text (stderr, then stdout)."""
        return self.stderr.strip() or self.stdout.strip()

    def __str__(self) -> str:
        shown = " ".join(self.command[:3])
        if len(self.command) > 3:
            shown += " ..."
        return f"{shown} failed (exit {self.returncode})"


def _not_started(cmd: Sequence[str], reason: str, stdout: str = "") -> Err[ProcessError]:
    return Err(ProcessError(tuple(cmd), NOT_STARTED, stdout, reason))


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    input_text: str | None = None,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Run cmd in cwd, feeding input_text on stdin. Returns stdout."""
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            input=input_text,
            capture_output=True,
            text=True,
            encoding="utf-8",
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        partial = e.stdout if isinstance(e.stdout, str) else ""
        return _not_started(cmd, f"Command timed out after {timeout}s", partial)
    except OSError as e:
        return _not_started(cmd, str(e))

    if proc.returncode != 0:
        return Err(ProcessError(tuple(cmd), proc.returncode, proc.stdout, proc.stderr))
    return Ok(proc.stdout)
