"""Checked-out commit resolution from the .git control files.

The release banner embeds the commit a release was built from. It is read
directly from the files git maintains, so packaging works on machines without
a git binary:

    .git/HEAD          "<sha1>" (detached) or "ref: refs/heads/<branch>"
    .git/<ref>         loose ref, "<sha1>"
    .git/packed-refs   "<sha1> <ref>" lines, plus "#" headers and "^" peels

Every failure mode (no repository, unreadable files, unborn branch,
unrecognised HEAD) resolves to None, meaning "version unknown".

Usage:
    commit = resolve_version(Path("/path/to/checkout"))
    print(commit or "unknown")
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

__all__ = [
    "RepositoryHead",
    "SymbolicRef",
    "parse_packed_refs",
    "read_head",
    "resolve_version",
]

_SHA1_RE = re.compile(r"[0-9a-f]{40}", re.IGNORECASE)
_REF_RE = re.compile(r"ref: (.*)")
_PACKED_REF_RE = re.compile(r"([0-9a-f]{40})\s+(.+)")


@dataclass(frozen=True, slots=True)
class SymbolicRef:
    """A named ref HEAD points at.

    Attributes:
        name: Ref path relative to .git (e.g. "refs/heads/main")
        commit: Resolved commit id, None if the ref has no entry
    """

    name: str
    commit: str | None = None


@dataclass(frozen=True, slots=True)
class RepositoryHead:
    """Resolved state of HEAD.

    Attributes:
        raw: Trimmed contents of .git/HEAD
        ref: The symbolic ref, None for a detached or unrecognised HEAD
        commit: The checked-out commit id, None if it cannot be determined
    """

    raw: str
    ref: SymbolicRef | None = None
    commit: str | None = None

    @property
    def is_detached(self) -> bool:
        return self.ref is None and self.commit is not None


def _read_trimmed(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError):
        return None


def parse_packed_refs(text: str) -> dict[str, str]:
    """Parse packed-refs content into a ref name -> commit id mapping.

    Each line contributes at most one entry. Lines that don't match
    `<sha1><whitespace><ref>` (the "# pack-refs" header, "^" peeled tag
    lines, garbage) are skipped. A repeated ref keeps the last commit.
    """
    refs: dict[str, str] = {}
    for line in text.splitlines():
        match = _PACKED_REF_RE.fullmatch(line)
        if match:
            refs[match.group(2)] = match.group(1)
    return refs


def _loose_ref_path(git_dir: Path, ref: str) -> Path | None:
    """Path of the loose ref file, or None if ref would leave git_dir."""
    if Path(ref).is_absolute():
        return None
    path = git_dir / ref
    if not path.resolve().is_relative_to(git_dir.resolve()):
        return None
    return path


def _resolve_ref(git_dir: Path, ref: str) -> str | None:
    loose_path = _loose_ref_path(git_dir, ref)
    loose = _read_trimmed(loose_path) if loose_path else None
    if loose:
        return loose

    packed = _read_trimmed(git_dir / "packed-refs")
    if packed is None:
        return None
    return parse_packed_refs(packed).get(ref)


def read_head(repo_root: Path) -> RepositoryHead | None:
    """Read and resolve HEAD of the repository at repo_root.

    Returns None when .git/HEAD cannot be read. Performs no writes.
    """
    git_dir = repo_root / ".git"
    head = _read_trimmed(git_dir / "HEAD")
    if head is None:
        return None

    if _SHA1_RE.fullmatch(head):
        return RepositoryHead(raw=head, commit=head)

    ref_match = _REF_RE.fullmatch(head)
    if not ref_match:
        return RepositoryHead(raw=head)

    ref = ref_match.group(1)
    commit = _resolve_ref(git_dir, ref)
    return RepositoryHead(raw=head, ref=SymbolicRef(name=ref, commit=commit), commit=commit)


def resolve_version(repo_root: Path) -> str | None:
    """Return the checked-out commit id of repo_root, or None if unknown."""
    head = read_head(repo_root)
    if head is None:
        return None
    return head.commit
