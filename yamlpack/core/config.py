"""Typed configuration loading and access.

This module provides dataclasses for the optional yamlpack.toml file found at
the project root. Every value has a default matching the monaco-yaml layout,
so a project without the file builds as-is.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_float, get_str, get_table

__all__ = [
    "BannerConfig",
    "Config",
    "ConfigError",
    "PathsConfig",
    "ToolsConfig",
    "WatchConfig",
    "CONFIG_FILE_NAME",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILE_NAME = "yamlpack.toml"

DEFAULT_PRODUCT = "monaco-yaml"
DEFAULT_LICENSE_URL = "https://github.com/pengx17/monaco-yaml/blob/master/LICENSE.md"
DEFAULT_WATCH_INTERVAL = 1.0


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class PathsConfig:
    """Paths relative to the project root."""

    src: str = "src"
    out: str = "out"
    release: str = "release"
    declaration: str = "src/monaco.d.ts"
    modules: str = "node_modules"


@dataclass(frozen=True, slots=True)
class BannerConfig:
    """Text stamped into the release banner."""

    product: str = DEFAULT_PRODUCT
    license_url: str = DEFAULT_LICENSE_URL


@dataclass(frozen=True, slots=True)
class ToolsConfig:
    """Executable names (or paths) of the external build tools."""

    tsc: str = "tsc"
    rjs: str = "r.js"
    uglifyjs: str = "uglifyjs"


@dataclass(frozen=True, slots=True)
class WatchConfig:
    interval: float = DEFAULT_WATCH_INTERVAL


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    paths: PathsConfig = field(default_factory=PathsConfig)
    banner: BannerConfig = field(default_factory=BannerConfig)
    tools: ToolsConfig = field(default_factory=ToolsConfig)
    watch: WatchConfig = field(default_factory=WatchConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        paths: StrDict = get_table(data, "paths") or {}
        banner: StrDict = get_table(data, "banner") or {}
        tools: StrDict = get_table(data, "tools") or {}
        watch: StrDict = get_table(data, "watch") or {}

        interval = get_float(watch, "interval")
        if interval is not None and interval <= 0:
            raise ValueError(f"watch.interval must be positive, got {interval}")

        return cls(
            paths=PathsConfig(
                src=get_str(paths, "src") or "src",
                out=get_str(paths, "out") or "out",
                release=get_str(paths, "release") or "release",
                declaration=get_str(paths, "declaration") or "src/monaco.d.ts",
                modules=get_str(paths, "modules") or "node_modules",
            ),
            banner=BannerConfig(
                product=get_str(banner, "product") or DEFAULT_PRODUCT,
                license_url=get_str(banner, "license_url") or DEFAULT_LICENSE_URL,
            ),
            tools=ToolsConfig(
                tsc=get_str(tools, "tsc") or "tsc",
                rjs=get_str(tools, "rjs") or "r.js",
                uglifyjs=get_str(tools, "uglifyjs") or "uglifyjs",
            ),
            watch=WatchConfig(interval=interval or DEFAULT_WATCH_INTERVAL),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to yamlpack.toml

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Result[Config, ConfigError]:
    """Load config if the file exists, otherwise return the defaults.

    A file that exists but is invalid is still an error.
    """
    if not path.exists():
        return Ok(Config())
    return load_config(path)
