"""Thin wrappers around the git CLI."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Sequence

from .exceptions import ExternalCommandError

logger = logging.getLogger(__name__)

GitRunner = Callable[..., "subprocess.CompletedProcess[str]"]


def run_git(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    check: bool = True,
    passthrough: bool = False,
) -> subprocess.CompletedProcess[str]:
    """Execute a git command and optionally raise on failure.

    With ``passthrough`` the child writes straight to our stdout/stderr
    instead of being captured.
    """

    command = ["git", *args]
    logger.debug("running %s in %s", " ".join(command), cwd or ".")
    try:
        result = subprocess.run(
            command,
            cwd=str(cwd) if cwd else None,
            text=True,
            capture_output=not passthrough,
        )
    except OSError as exc:
        raise ExternalCommandError(command, 127, stderr=str(exc)) from exc
    if check and result.returncode != 0:
        raise ExternalCommandError(
            command,
            result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )
    return result


@dataclass
class GitClient:
    """The git operations sweatshop needs, bound to an injectable runner."""

    runner: GitRunner = field(default=run_git)

    def worktree_add(self, repo: Path, target: Path) -> None:
        self.runner(["worktree", "add", str(target)], cwd=repo, passthrough=True)

    def worktree_remove(self, repo: Path, target: Path) -> None:
        self.runner(["worktree", "remove", str(target)], cwd=repo, passthrough=True)

    def merge_no_ff(self, repo: Path, branch: str) -> None:
        self.runner(
            ["merge", "--no-ff", branch, "-m", f"Merge worktree: {branch}"],
            cwd=repo,
            passthrough=True,
        )

    def current_branch(self, repo: Path) -> str | None:
        try:
            result = self.runner(["rev-parse", "--abbrev-ref", "HEAD"], cwd=repo)
        except ExternalCommandError:
            return None
        branch = result.stdout.strip()
        if not branch or branch == "HEAD":
            return None
        return branch

    def commits_ahead(self, path: Path, base: str, branch: str) -> int:
        try:
            result = self.runner(["rev-list", "--count", f"{base}..{branch}"], cwd=path)
            return int(result.stdout.strip() or 0)
        except (ExternalCommandError, ValueError):
            return 0

    def status_porcelain(self, path: Path) -> str:
        try:
            result = self.runner(["status", "--porcelain"], cwd=path)
        except ExternalCommandError:
            return ""
        return result.stdout.rstrip("\n")

    def upstream_counts(self, path: Path) -> tuple[str, int, int] | None:
        """Return ``(upstream, ahead, behind)`` or None without an upstream."""

        upstream = self.runner(
            ["rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{upstream}"],
            cwd=path,
            check=False,
        )
        if upstream.returncode != 0 or not upstream.stdout.strip():
            return None
        counts = self.runner(
            ["rev-list", "--left-right", "--count", "@{upstream}...HEAD"],
            cwd=path,
            check=False,
        )
        try:
            behind, ahead = (int(value) for value in counts.stdout.split())
        except ValueError:
            return None
        return upstream.stdout.strip(), ahead, behind

    def last_commit_date(self, path: Path) -> str:
        result = self.runner(["log", "-1", "--format=%cs"], cwd=path, check=False)
        if result.returncode != 0:
            return ""
        return result.stdout.strip()


__all__ = ["run_git", "GitClient"]
