"""Project metadata: package.json version and tsconfig compiler options."""

from __future__ import annotations

import json
from pathlib import Path

from yamlpack.core.result import Err, Ok, Result
from yamlpack.core.structured import StrDict, as_str_dict, get_str, get_table
from yamlpack.services.release_errors import MetadataInvalid, SourcesMissing

__all__ = ["read_compiler_options", "read_semver"]


def _read_json(path: Path) -> Result[StrDict, MetadataInvalid | SourcesMissing]:
    try:
        data = as_str_dict(json.loads(path.read_text(encoding="utf-8")))
    except FileNotFoundError:
        return Err(SourcesMissing(path=path))
    except (OSError, UnicodeDecodeError) as e:
        return Err(MetadataInvalid(path=path, reason=str(e)))
    except json.JSONDecodeError as e:
        return Err(MetadataInvalid(path=path, reason=f"invalid JSON: {e}"))

    if data is None:
        return Err(MetadataInvalid(path=path, reason="root must be an object"))
    return Ok(data)


def read_semver(package_json: Path) -> Result[str, MetadataInvalid | SourcesMissing]:
    """Read the `version` field of package.json."""
    data = _read_json(package_json)
    if isinstance(data, Err):
        return data

    version = get_str(data.value, "version")
    if version is None:
        return Err(MetadataInvalid(path=package_json, reason="missing 'version'"))
    return Ok(version)


def read_compiler_options(tsconfig: Path) -> Result[StrDict, MetadataInvalid | SourcesMissing]:
    """Read `compilerOptions` from tsconfig.json (empty if absent)."""
    data = _read_json(tsconfig)
    if isinstance(data, Err):
        return data
    return Ok(get_table(data.value, "compilerOptions") or {})
