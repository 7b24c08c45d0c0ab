"""Merge the current workspace back into its repository and remove it."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .config import SweatshopConfig
from .exceptions import ExternalCommandError, PathFormatError, WorkspaceLookupError
from .git import GitClient
from .paths import parse_path, repo_path, worktree_path
from .session import ZmxSession

logger = logging.getLogger(__name__)


@dataclass
class MergeCoordinator:
    config: SweatshopConfig
    git: GitClient = field(default_factory=GitClient)
    session: ZmxSession = field(default_factory=ZmxSession)

    def run(self, cwd: Path) -> Path:
        """Merge the workspace containing ``cwd`` and remove it on success.

        A failed merge leaves the workspace and the repository's merge state
        in place for manual resolution. Returns the removed workspace path.
        """

        home = self.config.home
        try:
            relative = cwd.resolve().relative_to(home.resolve())
        except ValueError as exc:
            raise WorkspaceLookupError(f"not in a subdirectory of home: {cwd}") from exc
        if not relative.parts:
            raise WorkspaceLookupError(f"not in a subdirectory of home: {cwd}")

        try:
            comp = parse_path(relative.as_posix())
        except PathFormatError as exc:
            raise PathFormatError(f"not in a worktree directory: {cwd}") from exc

        repo = repo_path(home, comp)
        if not repo.is_dir():
            raise WorkspaceLookupError(f"repository not found: {repo}")

        logger.info("merging worktree %s", comp.worktree)
        try:
            self.git.merge_no_ff(repo, comp.worktree)
        except ExternalCommandError:
            logger.error("merge failed, not removing worktree")
            raise

        target = worktree_path(home, comp.address)
        logger.info("removing worktree %s", target)
        self.git.worktree_remove(repo, target)

        logger.info("detaching from zmx session")
        self.session.detach()
        return target


__all__ = ["MergeCoordinator"]
