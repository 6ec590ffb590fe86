from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class Variant(StrEnum):
    """Release destination of an artifact."""

    DEV = "dev"
    MIN = "min"


@dataclass(frozen=True, slots=True)
class Artifact:
    """A release file held in memory.

    Attributes:
        name: File name inside the release directory (e.g. "yamlMode.js")
        contents: File text, treated as opaque by the pipeline
        variant: Which release directory it is written to
    """

    name: str
    contents: str
    variant: Variant = Variant.DEV
