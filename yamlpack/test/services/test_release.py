"""End-to-end tests for the compile + release pipeline with fake tools."""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from yamlpack.core.config import Config
from yamlpack.core.project import Project
from yamlpack.core.result import Err, Ok, Result
from yamlpack.output.console import MockConsole
from yamlpack.services.artifacts import Artifact, Variant
from yamlpack.services.bundle_spec import BundleConfiguration
from yamlpack.services.compile import CompileService
from yamlpack.services.release import ReleaseService
from yamlpack.services.release_errors import (
    BundleFailed,
    CompileFailed,
    MetadataInvalid,
    MinifyFailed,
    ReleaseError,
    SourcesMissing,
    WriteFailed,
)
from yamlpack.services.tasks import TaskGraph, build_task_graph
from yamlpack.services.toolchain import CommentPolicy, CompilerOptions

SHA_A = "a1b2c3d4e5f60718293a4b5c6d7e8f9001122334"
SHA_C = "c3d4e5f60718293a4b5c6d7e8f90011223344556"
JSON_SERVICE = "vscode-json-languageservice"


# =============================================================================
# Fakes
# =============================================================================


@dataclass
class FakeCompiler:
    fail: bool = False
    calls: list[tuple[list[Path], CompilerOptions, Path]] = field(default_factory=list)

    def compile(
        self, sources: list[Path], options: CompilerOptions, out_dir: Path
    ) -> Result[None, ReleaseError]:
        self.calls.append((sources, options, out_dir))
        if self.fail:
            return Err(CompileFailed(returncode=2, detail="src/yamlMode.ts(1,1): error TS1005"))
        out_dir.mkdir(parents=True, exist_ok=True)
        for src in sources:
            (out_dir / src.with_suffix(".js").name).write_text("define([], 0);", encoding="utf-8")
        return Ok(None)


@dataclass
class FakeBundler:
    fail_on: str | None = None
    on_bundle: Callable[[], None] | None = None
    configs: list[BundleConfiguration] = field(default_factory=list)

    def bundle(self, config: BundleConfiguration) -> Result[Artifact, ReleaseError]:
        self.configs.append(config)
        if self.on_bundle is not None:
            self.on_bundle()
        if config.module_id == self.fail_on:
            return Err(BundleFailed(module_id=config.module_id, returncode=1, detail="boom"))
        return Ok(Artifact(name=config.out_name, contents=f"define('{config.module_id}');\n"))


@dataclass
class FakeMinifier:
    fail: bool = False
    policies: list[CommentPolicy] = field(default_factory=list)

    def minify(self, artifact: Artifact, policy: CommentPolicy) -> Result[Artifact, ReleaseError]:
        self.policies.append(policy)
        if self.fail:
            return Err(MinifyFailed(name=artifact.name, returncode=1, detail="parse error"))
        # Keep only the /*! banner and squash the code.
        banner, _, code = artifact.contents.partition("*/\n")
        minified = f"{banner}*/\n{code.replace(' ', '').strip()}"
        return Ok(Artifact(name=artifact.name, contents=minified, variant=Variant.MIN))


@dataclass
class Pipeline:
    project: Project
    console: MockConsole
    compiler: FakeCompiler
    bundler: FakeBundler
    minifier: FakeMinifier
    graph: TaskGraph[ReleaseError]


def _make_project(root: Path, *, nested: bool = False) -> Project:
    (root / "package.json").write_text(json.dumps({"version": "0.5.0"}), encoding="utf-8")
    src = root / "src"
    src.mkdir()
    (src / "tsconfig.json").write_text(
        json.dumps({"compilerOptions": {"module": "amd", "target": "es5"}}), encoding="utf-8"
    )
    for name in ("monaco.contribution.ts", "yamlMode.ts", "yamlWorker.ts"):
        (src / name).write_text("export {};\n", encoding="utf-8")
    (src / "monaco.d.ts").write_text("declare module monaco.languages.yaml {}\n", encoding="utf-8")

    modules = root / "node_modules"
    flat = ["js-yaml/dist", JSON_SERVICE, "vscode-languageserver-types/lib"]
    if nested:
        flat += [f"{JSON_SERVICE}/node_modules/vscode-uri/lib"]
        flat += [f"{JSON_SERVICE}/node_modules/jsonc-parser/lib"]
    else:
        flat += ["vscode-uri/lib", "jsonc-parser/lib"]
    for rel in flat:
        (modules / rel).mkdir(parents=True, exist_ok=True)
    return Project(root=root)


def _pipeline(
    project: Project,
    *,
    compiler: FakeCompiler | None = None,
    bundler: FakeBundler | None = None,
    minifier: FakeMinifier | None = None,
) -> Pipeline:
    console = MockConsole()
    config = Config()
    compiler = compiler or FakeCompiler()
    bundler = bundler or FakeBundler()
    minifier = minifier or FakeMinifier()
    graph = build_task_graph(
        CompileService(project=project, config=config, console=console, compiler=compiler),
        ReleaseService(
            project=project,
            config=config,
            console=console,
            bundler=bundler,
            minifier=minifier,
        ),
    )
    return Pipeline(project, console, compiler, bundler, minifier, graph)


def _git(root: Path, head: str) -> Path:
    git = root / ".git"
    git.mkdir()
    (git / "HEAD").write_text(head, encoding="utf-8")
    return git


def _read(path: Path) -> str:
    return path.read_text(encoding="utf-8")


# =============================================================================
# Release
# =============================================================================


class TestRelease:
    def test_emits_all_artifacts(self, tmp_path: Path) -> None:
        p = _pipeline(_make_project(tmp_path))
        _git(tmp_path, SHA_A)

        result = p.graph.run("release")

        assert result == Ok(["clean-release", "clean-out", "compile", "release"])
        dev = sorted(f.name for f in (tmp_path / "release" / "dev").iterdir())
        mini = sorted(f.name for f in (tmp_path / "release" / "min").iterdir())
        assert dev == ["monaco.contribution.js", "yamlMode.js", "yamlWorker.js"]
        assert mini == ["monaco.contribution.js", "monaco.d.ts", "yamlMode.js", "yamlWorker.js"]
        assert _read(tmp_path / "release" / "min" / "monaco.d.ts") == _read(
            tmp_path / "src" / "monaco.d.ts"
        )

    def test_bundle_configurations(self, tmp_path: Path) -> None:
        p = _pipeline(_make_project(tmp_path))

        assert isinstance(p.graph.run("release"), Ok)

        configs = {c.module_id: c for c in p.bundler.configs}
        assert list(configs) == [
            "vs/languages/yaml/monaco.contribution",
            "vs/languages/yaml/yamlMode",
            "vs/languages/yaml/yamlWorker",
        ]
        assert configs["vs/languages/yaml/monaco.contribution"].exclude == (
            "vs/languages/yaml/yamlMode",
        )
        assert configs["vs/languages/yaml/yamlMode"].exclude == ()
        assert configs["vs/languages/yaml/yamlWorker"].exclude == ()
        assert all(c.base_url == tmp_path / "out" for c in configs.values())
        assert all(c.unresolved == [] for c in configs.values())

    def test_banner_on_every_artifact(self, tmp_path: Path) -> None:
        p = _pipeline(_make_project(tmp_path))
        _git(tmp_path, SHA_A)

        assert isinstance(p.graph.run("release"), Ok)

        for variant in ("dev", "min"):
            for name in ("monaco.contribution.js", "yamlMode.js", "yamlWorker.js"):
                text = _read(tmp_path / "release" / variant / name)
                assert text.startswith("/*!")
                assert f" * monaco-yaml version: 0.5.0({SHA_A})\n" in text
        dev = _read(tmp_path / "release" / "dev" / "yamlMode.js")
        assert dev.endswith("define('vs/languages/yaml/yamlMode');\n")

    def test_minifier_keeps_license_comments(self, tmp_path: Path) -> None:
        p = _pipeline(_make_project(tmp_path))
        assert isinstance(p.graph.run("release"), Ok)
        assert p.minifier.policies == [CommentPolicy.SOME] * 3

    def test_compiler_receives_all_sources(self, tmp_path: Path) -> None:
        p = _pipeline(_make_project(tmp_path))

        assert isinstance(p.graph.run("release"), Ok)

        (sources, options, out_dir) = p.compiler.calls[0]
        assert [s.name for s in sources] == [
            "monaco.contribution.ts",
            "monaco.d.ts",
            "yamlMode.ts",
            "yamlWorker.ts",
        ]
        assert options.verbose is True
        assert options.compiler_options == {"module": "amd", "target": "es5"}
        assert out_dir == tmp_path / "out"

    def test_clean_release_removes_stale_files(self, tmp_path: Path) -> None:
        p = _pipeline(_make_project(tmp_path))
        stale = tmp_path / "release" / "dev" / "old.js"
        stale.parent.mkdir(parents=True)
        stale.write_text("old", encoding="utf-8")

        assert isinstance(p.graph.run("release"), Ok)
        assert not stale.exists()


class TestVersionScenarios:
    def test_detached_head(self, tmp_path: Path) -> None:
        p = _pipeline(_make_project(tmp_path))
        _git(tmp_path, f"{SHA_A}\n")

        assert isinstance(p.graph.run("release"), Ok)
        assert SHA_A in _read(tmp_path / "release" / "dev" / "yamlWorker.js")

    def test_packed_ref(self, tmp_path: Path) -> None:
        p = _pipeline(_make_project(tmp_path))
        git = _git(tmp_path, "ref: refs/heads/main\n")
        (git / "packed-refs").write_text(f"{SHA_C} refs/heads/main\n", encoding="utf-8")

        assert isinstance(p.graph.run("release"), Ok)
        assert f"0.5.0({SHA_C})" in _read(tmp_path / "release" / "dev" / "yamlWorker.js")

    def test_no_repository(self, tmp_path: Path) -> None:
        p = _pipeline(_make_project(tmp_path))

        result = p.graph.run("release")

        assert isinstance(result, Ok)
        text = _read(tmp_path / "release" / "min" / "yamlMode.js")
        assert " * monaco-yaml version: 0.5.0(unknown)\n" in text
        assert not p.console.has_error()
        assert not p.console.has_warning()


class TestDegradedDependencies:
    def test_nested_layout_resolves(self, tmp_path: Path) -> None:
        p = _pipeline(_make_project(tmp_path, nested=True))

        assert isinstance(p.graph.run("release"), Ok)

        nested = tmp_path / "node_modules" / JSON_SERVICE / "node_modules"
        locations = {e.name: e.location for e in p.bundler.configs[0].packages}
        assert locations["vscode-uri"] == nested / "vscode-uri" / "lib"
        assert locations["jsonc-parser"] == nested / "jsonc-parser" / "lib"
        assert not p.console.has_warning()

    def test_missing_dependency_completes(self, tmp_path: Path) -> None:
        project = _make_project(tmp_path)
        (tmp_path / "node_modules" / "jsonc-parser" / "lib").rmdir()
        p = _pipeline(project)

        result = p.graph.run("release")

        assert isinstance(result, Ok)
        assert len(p.console.find("Unable to find jsonc-parser")) == 1
        for config in p.bundler.configs:
            jsonc = [e for e in config.packages if e.name == "jsonc-parser"]
            assert [e.location for e in jsonc] == [None]
        assert (tmp_path / "release" / "min" / "yamlWorker.js").exists()
        assert p.console.find("unresolved packages: jsonc-parser")


class TestFailures:
    def test_compile_error_aborts(self, tmp_path: Path) -> None:
        p = _pipeline(_make_project(tmp_path), compiler=FakeCompiler(fail=True))

        result = p.graph.run("release")

        assert isinstance(result, Err)
        assert isinstance(result.error, CompileFailed)
        assert p.bundler.configs == []
        assert not (tmp_path / "release").exists()

    def test_bundle_error_aborts(self, tmp_path: Path) -> None:
        p = _pipeline(
            _make_project(tmp_path), bundler=FakeBundler(fail_on="vs/languages/yaml/yamlMode")
        )

        result = p.graph.run("release")

        assert result == Err(
            BundleFailed(module_id="vs/languages/yaml/yamlMode", returncode=1, detail="boom")
        )
        assert not (tmp_path / "release" / "dev").exists()

    def test_minify_error_aborts(self, tmp_path: Path) -> None:
        p = _pipeline(_make_project(tmp_path), minifier=FakeMinifier(fail=True))

        result = p.graph.run("release")

        assert isinstance(result, Err)
        assert isinstance(result.error, MinifyFailed)
        assert not (tmp_path / "release" / "min").exists()

    def test_missing_sources(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text('{"version": "1.0.0"}', encoding="utf-8")
        p = _pipeline(Project(root=tmp_path))

        assert p.graph.run("compile") == Err(SourcesMissing(path=tmp_path / "src"))
        assert p.compiler.calls == []

    def test_missing_version(self, tmp_path: Path) -> None:
        project = _make_project(tmp_path)
        (tmp_path / "package.json").write_text("{}", encoding="utf-8")
        p = _pipeline(project)

        result = p.graph.run("release")

        assert result == Err(
            MetadataInvalid(path=tmp_path / "package.json", reason="missing 'version'")
        )

    def test_missing_declaration(self, tmp_path: Path) -> None:
        project = _make_project(tmp_path)
        (tmp_path / "src" / "monaco.d.ts").unlink()
        p = _pipeline(project)

        assert p.graph.run("release") == Err(SourcesMissing(path=tmp_path / "src" / "monaco.d.ts"))

    def test_unwritable_dev_dir_aborts(self, tmp_path: Path) -> None:
        dev = tmp_path / "release" / "dev"

        def block_dev_dir() -> None:
            dev.parent.mkdir(parents=True, exist_ok=True)
            dev.write_text("not a directory", encoding="utf-8")

        p = _pipeline(_make_project(tmp_path), bundler=FakeBundler(on_bundle=block_dev_dir))

        result = p.graph.run("release")

        assert isinstance(result, Err)
        assert isinstance(result.error, WriteFailed)
        assert result.error.path == dev / "monaco.contribution.js"
        assert p.minifier.policies == []
        assert not (tmp_path / "release" / "min").exists()
        assert not p.console.find(f"OK {tmp_path / 'release'}")

    def test_unwritable_declaration_aborts(self, tmp_path: Path) -> None:
        target = tmp_path / "release" / "min" / "monaco.d.ts"

        def block_declaration() -> None:
            target.mkdir(parents=True, exist_ok=True)

        p = _pipeline(_make_project(tmp_path), bundler=FakeBundler(on_bundle=block_declaration))

        result = p.graph.run("release")

        assert isinstance(result, Err)
        assert isinstance(result.error, WriteFailed)
        assert result.error.path == target
        assert p.minifier.policies == [CommentPolicy.SOME] * 3
        assert not p.console.find(f"OK {tmp_path / 'release'}")

    @pytest.mark.parametrize("task", ["clean-out", "clean-release"])
    def test_clean_nothing_to_remove(self, tmp_path: Path, task: str) -> None:
        p = _pipeline(_make_project(tmp_path))
        assert p.graph.run(task) == Ok([task])
