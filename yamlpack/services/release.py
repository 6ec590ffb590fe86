"""Release service: bundle, stamp, minify and emit the distributable artifacts.

Expects out/ to hold a fresh compile (the release task depends on compile):

    release/dev/<entry>.js      banner + bundled module
    release/min/<entry>.js      the same, minified (banner kept)
    release/min/monaco.d.ts     public type declarations
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from yamlpack.core.result import Err, Ok, Result
from yamlpack.git.head import resolve_version
from yamlpack.platform.files import atomic_write_text
from yamlpack.services.artifacts import Artifact
from yamlpack.services.banner import build_banner, format_version, prepend_banner
from yamlpack.services.base import BaseService
from yamlpack.services.bundle_spec import MODULE_NAMESPACE, BundleSpecBuilder
from yamlpack.services.compile import clean_dir
from yamlpack.services.locator import DependencyLocator
from yamlpack.services.metadata import read_semver
from yamlpack.services.release_errors import ReleaseError, SourcesMissing, WriteFailed
from yamlpack.services.toolchain import CommentPolicy, RequireJsBundler, UglifyMinifier

if TYPE_CHECKING:
    from yamlpack.core.config import Config
    from yamlpack.core.project import Project
    from yamlpack.output.console import ConsoleProtocol
    from yamlpack.services.toolchain import Bundler, Minifier

__all__ = ["RELEASE_ENTRIES", "ReleaseService", "ReleaseSummary"]

# (entry module, modules left out of its bundle)
RELEASE_ENTRIES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("monaco.contribution", (f"{MODULE_NAMESPACE}/yamlMode",)),
    ("yamlMode", ()),
    ("yamlWorker", ()),
)


def _empty_paths() -> list[Path]:
    return []


@dataclass(frozen=True, slots=True)
class ReleaseSummary:
    """What a release run wrote."""

    version: str
    written: list[Path] = field(default_factory=_empty_paths)
    unresolved: tuple[str, ...] = ()


class ReleaseService(BaseService):
    """Produce the dev and min release directories."""

    def __init__(
        self,
        *,
        project: Project,
        config: Config,
        console: ConsoleProtocol,
        bundler: Bundler | None = None,
        minifier: Minifier | None = None,
        locator: DependencyLocator | None = None,
    ) -> None:
        super().__init__(project=project, config=config, console=console)
        tools = config.tools
        self._bundler = bundler or RequireJsBundler(
            tool=tools.rjs, bin_dir=project.tools_bin_dir, cwd=project.root
        )
        self._minifier = minifier or UglifyMinifier(
            tool=tools.uglifyjs, bin_dir=project.tools_bin_dir, cwd=project.root
        )
        self._locator = locator or DependencyLocator(project.modules_dir, console)

    def clean_release(self) -> Result[None, ReleaseError]:
        return clean_dir(self._project.release_dir, self._console)

    def banner(self) -> Result[tuple[str, str], ReleaseError]:
        """Return (version string, banner text) for the current checkout."""
        semver = read_semver(self._project.package_json_path)
        if isinstance(semver, Err):
            return semver
        commit = resolve_version(self._project.root)
        return Ok(
            (
                format_version(semver.value, commit),
                build_banner(semver.value, commit, self._config.banner),
            )
        )

    def bundle_all(self) -> Result[tuple[list[Artifact], tuple[str, ...]], ReleaseError]:
        """Bundle each release entry into its own artifact.

        Returns the artifacts in entry order and the names of packages that
        could not be located.
        """
        builder = BundleSpecBuilder(self._project.out_dir, self._locator)
        artifacts: list[Artifact] = []
        unresolved: list[str] = []
        for module_id, exclude in RELEASE_ENTRIES:
            config = builder.build(module_id, exclude)
            unresolved.extend(n for n in config.unresolved if n not in unresolved)
            self._console.info(f"bundling {config.module_id}")
            result = self._bundler.bundle(config)
            if isinstance(result, Err):
                return result
            artifacts.append(result.value)
        return Ok((artifacts, tuple(unresolved)))

    def release(self) -> Result[ReleaseSummary, ReleaseError]:
        """Run the release steps after compile.

        Stops at the first bundling, minification or write failure. Missing
        packages only degrade the affected bundles.
        """
        stamp = self.banner()
        if isinstance(stamp, Err):
            return stamp
        version, banner = stamp.value
        self._console.header(f"Release {version}")

        bundled = self.bundle_all()
        if isinstance(bundled, Err):
            return bundled
        artifacts, unresolved = bundled.value

        stamped = [prepend_banner(a, banner) for a in artifacts]
        written: list[Path] = []

        for artifact in stamped:
            result = self._write(artifact, self._project.dev_dir)
            if isinstance(result, Err):
                return result
            written.append(result.value)

        for artifact in stamped:
            minified = self._minifier.minify(artifact, CommentPolicy.SOME)
            if isinstance(minified, Err):
                return minified
            result = self._write(minified.value, self._project.min_dir)
            if isinstance(result, Err):
                return result
            written.append(result.value)

        declaration = self._copy_declaration()
        if isinstance(declaration, Err):
            return declaration
        written.append(declaration.value)

        for path in written:
            self._console.success(str(path))
        if unresolved:
            missing = ", ".join(unresolved)
            self._console.warning(f"bundles are incomplete, unresolved packages: {missing}")
        return Ok(ReleaseSummary(version=version, written=written, unresolved=unresolved))

    def _write(self, artifact: Artifact, dest_dir: Path) -> Result[Path, ReleaseError]:
        path = dest_dir / artifact.name
        try:
            atomic_write_text(path, artifact.contents)
        except OSError as e:
            return Err(WriteFailed(path=path, reason=str(e)))
        return Ok(path)

    def _copy_declaration(self) -> Result[Path, ReleaseError]:
        source = self._project.declaration_path
        if not source.is_file():
            return Err(SourcesMissing(path=source))

        target = self._project.min_dir / source.name
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, target)
        except OSError as e:
            return Err(WriteFailed(path=target, reason=str(e)))
        return Ok(target)

