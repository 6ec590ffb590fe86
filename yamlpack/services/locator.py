"""Runtime package location.

A package installed by npm may sit flat under node_modules/, or nested
inside the package that depends on it (older npm versions, or a version
conflict that prevented deduplication):

    node_modules/<name>/<lib>
    node_modules/<container>/node_modules/<name>/<lib>

DependencyLocator tries these candidates in order and returns the first one
that exists. A package found nowhere is reported and located as None; the
bundle built without it is incomplete but the release still runs.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from yamlpack.output.console import ConsoleProtocol

__all__ = ["CandidateGenerator", "DependencyLocator"]

CandidateGenerator = Callable[[Path, str, str, str | None], Iterator[Path]]


def _flat(modules_dir: Path, name: str, lib: str, _container: str | None) -> Iterator[Path]:
    yield modules_dir / name / lib


def _nested(modules_dir: Path, name: str, lib: str, container: str | None) -> Iterator[Path]:
    if container:
        yield modules_dir / container / modules_dir.name / name / lib


DEFAULT_GENERATORS: tuple[CandidateGenerator, ...] = (_flat, _nested)


class DependencyLocator:
    """Find the on-disk directory of a runtime package.

    Attributes:
        modules_dir: The node_modules directory searched
    """

    def __init__(
        self,
        modules_dir: Path,
        console: ConsoleProtocol,
        *,
        exists: Callable[[Path], bool] = Path.exists,
        generators: tuple[CandidateGenerator, ...] = DEFAULT_GENERATORS,
    ) -> None:
        self.modules_dir = modules_dir
        self._console = console
        self._exists = exists
        self._generators = generators

    def candidates(self, name: str, lib: str, container: str | None = None) -> list[Path]:
        """All candidate directories for a package, in search order."""
        return [
            path
            for generate in self._generators
            for path in generate(self.modules_dir, name, lib, container)
        ]

    def locate(self, name: str, lib: str, container: str | None = None) -> Path | None:
        """Return the first existing candidate, or None after a warning."""
        searched = self.candidates(name, lib, container)
        for path in searched:
            if self._exists(path):
                return path

        self._console.warning(
            f"Unable to find {name} node module at {' or '.join(str(p) for p in searched)}"
        )
        return None
