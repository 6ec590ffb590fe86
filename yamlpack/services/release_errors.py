from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class SourcesMissing:
    path: Path


@dataclass(frozen=True, slots=True)
class MetadataInvalid:
    path: Path
    reason: str


@dataclass(frozen=True, slots=True)
class ToolMissing:
    tool_id: str
    hint: str = "Run: npm install"


@dataclass(frozen=True, slots=True)
class CompileFailed:
    returncode: int
    detail: str = ""


@dataclass(frozen=True, slots=True)
class BundleFailed:
    module_id: str
    returncode: int
    detail: str = ""


@dataclass(frozen=True, slots=True)
class MinifyFailed:
    name: str
    returncode: int
    detail: str = ""


@dataclass(frozen=True, slots=True)
class WriteFailed:
    path: Path
    reason: str


ReleaseError = (
    SourcesMissing
    | MetadataInvalid
    | ToolMissing
    | CompileFailed
    | BundleFailed
    | MinifyFailed
    | WriteFailed
)
