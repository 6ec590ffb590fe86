"""Project detection and paths.

The project is the root of the language-service checkout being packaged.
It is identified by the presence of a `package.json` file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from .config import PathsConfig
from .result import Err, Ok, Result

__all__ = [
    "Project",
    "ProjectError",
    "detect_project",
    "find_project_upward",
    "is_project_root",
]

ROOT_ENV_VAR = "YAMLPACK_ROOT"


@dataclass(frozen=True)
class ProjectError:
    """Error when the project root cannot be detected."""

    message: str
    searched_from: Path | None = None


@dataclass(frozen=True, slots=True)
class Project:
    """A detected project checkout.

    The root contains:
    - package.json (required, carries the semantic version)
    - src/ with tsconfig.json, the TypeScript sources and monaco.d.ts
    - node_modules/ with the runtime packages that get bundled
    - out/ and release/ generated by yamlpack (gitignored)
    """

    root: Path
    paths: PathsConfig = field(default_factory=PathsConfig)

    @property
    def package_json_path(self) -> Path:
        return self.root / "package.json"

    @property
    def git_dir(self) -> Path:
        return self.root / ".git"

    @property
    def src_dir(self) -> Path:
        return self.root / self.paths.src

    @property
    def tsconfig_path(self) -> Path:
        """Path to the compiler configuration (src/tsconfig.json)."""
        return self.src_dir / "tsconfig.json"

    @property
    def out_dir(self) -> Path:
        """Path to compiled modules."""
        return self.root / self.paths.out

    @property
    def release_dir(self) -> Path:
        return self.root / self.paths.release

    @property
    def dev_dir(self) -> Path:
        """Path to unminified release artifacts."""
        return self.release_dir / "dev"

    @property
    def min_dir(self) -> Path:
        """Path to minified release artifacts and the type declarations."""
        return self.release_dir / "min"

    @property
    def declaration_path(self) -> Path:
        return self.root / self.paths.declaration

    @property
    def modules_dir(self) -> Path:
        """Path to installed packages (node_modules/)."""
        return self.root / self.paths.modules

    @property
    def tools_bin_dir(self) -> Path:
        """Path to package-local executables (node_modules/.bin)."""
        return self.modules_dir / ".bin"

    def source_files(self) -> list[Path]:
        """All TypeScript sources under src/, sorted."""
        return sorted(p for p in self.src_dir.rglob("*.ts") if p.is_file())

    def __str__(self) -> str:
        return str(self.root)


def is_project_root(path: Path) -> bool:
    return (path / "package.json").is_file()


def find_project_upward(start: Path) -> Path | None:
    """Search upward from start directory for a project root."""
    for parent in (start, *start.parents):
        if is_project_root(parent):
            return parent
    return None


def detect_project(
    *,
    start_dir: Path | None = None,
    env_var: str = ROOT_ENV_VAR,
) -> Result[Path, ProjectError]:
    """Detect the project root directory.

    Detection order:
    1. Environment variable (if set it must point at a valid root)
    2. Search upward from start_dir (or cwd) for package.json
    """
    env_value = os.environ.get(env_var)
    if env_value:
        env_path = Path(env_value).expanduser().resolve()
        if env_path.is_dir() and is_project_root(env_path):
            return Ok(env_path)
        return Err(
            ProjectError(
                message=f"${env_var} is set to '{env_value}' but it is not a project root",
                searched_from=env_path if env_path.is_dir() else None,
            )
        )

    search_start = (start_dir or Path.cwd()).resolve()
    found = find_project_upward(search_start)
    if found is None:
        return Err(
            ProjectError(
                message="Could not find project root (package.json not found)",
                searched_from=search_start,
            )
        )
    return Ok(found)
