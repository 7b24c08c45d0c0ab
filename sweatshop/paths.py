"""Parse and compose workspace addresses."""

from __future__ import annotations

from pathlib import Path

from .exceptions import PathFormatError
from .models import PathComponents, Target

WORKTREES_DIR = "worktrees"
REPOS_DIR = "repos"


def parse_target(raw: str) -> Target:
    """Split ``host:path`` at the first colon; a bare path is local."""

    host, sep, path = raw.partition(":")
    if not sep:
        return Target(host=None, path=raw)
    return Target(host=host, path=path)


def parse_path(raw: str) -> PathComponents:
    parts = raw.split("/")
    if len(parts) < 4 or parts[1] != WORKTREES_DIR:
        raise PathFormatError(
            f"invalid worktree path: {raw} (expected <eng_area>/worktrees/<repo>/<branch>)"
        )
    return PathComponents(eng_area=parts[0], repo=parts[2], worktree=parts[3])


def repo_path(home: Path, comp: PathComponents) -> Path:
    return home / comp.eng_area / REPOS_DIR / comp.repo


def worktree_path(home: Path, relative: str) -> Path:
    return home / relative


__all__ = ["parse_target", "parse_path", "repo_path", "worktree_path"]
