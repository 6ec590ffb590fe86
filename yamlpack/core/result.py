"""Result type for explicit error handling.

Pipeline stages return ``Ok(value)`` or ``Err(error)`` instead of raising, so
a failing compile or bundle step is handled where the task graph decides
whether to continue.

Usage:
    match compiler.compile(sources, options, out_dir):
        case Ok(_):
            console.success("compiled")
        case Err(error):
            print_release_error(error, console)
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["Ok", "Err", "Result"]


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """A successful result.

    Attributes:
        value: The success value.
    """

    value: T


@dataclass(frozen=True, slots=True)
class Err[E]:
    """A failed result.

    Attributes:
        error: The error value.
    """

    error: E


type Result[T, E] = Ok[T] | Err[E]
