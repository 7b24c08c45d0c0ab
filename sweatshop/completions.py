"""Enumerate local workspace candidates."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, TextIO

import typer

from .models import WorkspaceCandidate
from .paths import REPOS_DIR, WORKTREES_DIR
from .workspace import is_worktree

ENG_AREA_GLOB = "eng*"


def eng_areas(home: Path) -> list[Path]:
    return sorted(path for path in home.glob(ENG_AREA_GLOB) if path.is_dir())


def local_candidates(home: Path) -> list[WorkspaceCandidate]:
    """List a new-worktree slot per repository and every existing worktree."""

    found: list[WorkspaceCandidate] = []
    for area_path in eng_areas(home):
        area = area_path.name
        repos_dir = area_path / REPOS_DIR
        if not repos_dir.is_dir():
            continue
        for repo in sorted(child for child in repos_dir.iterdir() if child.is_dir()):
            found.append(
                WorkspaceCandidate(f"{area}/{WORKTREES_DIR}/{repo.name}/", "new worktree")
            )
            worktree_dir = area_path / WORKTREES_DIR / repo.name
            if not worktree_dir.is_dir():
                continue
            for child in sorted(worktree_dir.iterdir()):
                if not is_worktree(child):
                    continue
                found.append(
                    WorkspaceCandidate(
                        f"{area}/{WORKTREES_DIR}/{repo.name}/{child.name}",
                        "existing worktree",
                    )
                )
    return found


def write_candidates(candidates: Iterable[WorkspaceCandidate], out: TextIO) -> None:
    for candidate in candidates:
        typer.echo(candidate.line, file=out)


__all__ = ["eng_areas", "local_candidates", "write_candidates"]
