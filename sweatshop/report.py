"""Collect status rows for the status report."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Iterable

from .completions import local_candidates
from .git import GitClient
from .models import BranchStatus, WorkspaceCandidate
from .paths import REPOS_DIR, parse_path, worktree_path
from .status import format_remote_marker, parse_porcelain, summarize_dirty

UNKNOWN = "?"


def collect_local(home: Path, git: GitClient) -> list[BranchStatus]:
    rows: list[BranchStatus] = []
    for candidate in local_candidates(home):
        if candidate.is_new:
            continue
        comp = parse_path(candidate.address)
        target = worktree_path(home, candidate.address)
        porcelain = git.status_porcelain(target)
        upstream = git.upstream_counts(target)
        rows.append(
            BranchStatus(
                repo=f"{comp.eng_area}/{REPOS_DIR}/{comp.repo}",
                branch=comp.worktree,
                dirty=summarize_dirty(porcelain) or "clean",
                remote=format_remote_marker(*upstream) if upstream else "",
                last_commit=git.last_commit_date(target),
                last_modified=last_modified(target, porcelain),
            )
        )
    return rows


def remote_rows(candidates: Iterable[WorkspaceCandidate]) -> list[BranchStatus]:
    rows: list[BranchStatus] = []
    for candidate in candidates:
        if candidate.is_new:
            continue
        comp = parse_path(candidate.address)
        rows.append(
            BranchStatus(
                repo=f"{candidate.host}:{comp.eng_area}/{REPOS_DIR}/{comp.repo}",
                branch=comp.worktree,
                dirty=UNKNOWN,
                remote=UNKNOWN,
                last_commit=UNKNOWN,
                last_modified=UNKNOWN,
            )
        )
    return rows


def last_modified(target: Path, porcelain: str) -> str:
    """Date of the newest change among the workspace directory and its dirty files."""

    mtimes = [target.stat().st_mtime]
    for record in parse_porcelain(porcelain):
        candidate = target / record.path
        if candidate.exists():
            mtimes.append(candidate.stat().st_mtime)
    return datetime.fromtimestamp(max(mtimes)).strftime("%Y-%m-%d")


__all__ = ["collect_local", "remote_rows", "last_modified"]
