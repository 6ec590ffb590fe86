"""Read-only access to a checkout's .git control files.

Usage:
    from yamlpack.git import resolve_version

    commit = resolve_version(project.root)
"""

from yamlpack.git.head import (
    RepositoryHead,
    SymbolicRef,
    parse_packed_refs,
    read_head,
    resolve_version,
)

__all__ = [
    "RepositoryHead",
    "SymbolicRef",
    "parse_packed_refs",
    "read_head",
    "resolve_version",
]
