"""Release banner.

The banner opens with `/*!` so minifiers that keep "important" comments
leave it in the minified artifacts.
"""

from __future__ import annotations

from dataclasses import replace

from yamlpack.core.config import BannerConfig
from yamlpack.services.artifacts import Artifact

__all__ = ["UNKNOWN_VERSION", "build_banner", "format_version", "prepend_banner"]

UNKNOWN_VERSION = "unknown"

_RULE = "-" * 77


def format_version(semver: str, commit: str | None) -> str:
    """`<semver>(<commit>)`, with a placeholder for an unknown commit."""
    return f"{semver}({commit or UNKNOWN_VERSION})"


def build_banner(semver: str, commit: str | None, banner: BannerConfig | None = None) -> str:
    """Return the banner text, ending with a newline."""
    banner = banner or BannerConfig()
    return "\n".join(
        [
            f"/*!{_RULE}",
            " * Copyright (c) Microsoft Corporation. All rights reserved.",
            f" * {banner.product} version: {format_version(semver, commit)}",
            " * Released under the MIT license",
            f" * {banner.license_url}",
            f" *{_RULE}*/",
            "",
        ]
    )


def prepend_banner(artifact: Artifact, banner: str) -> Artifact:
    return replace(artifact, contents=banner + artifact.contents)
