"""Create workspaces and mirror the dotfile overlay into them."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from .git import GitClient

logger = logging.getLogger(__name__)

OVERLAY_DIR = "rcm-worktrees"


@dataclass
class WorkspaceManager:
    home: Path
    git: GitClient = field(default_factory=GitClient)

    def create(self, eng_area: str, repo_path: Path, worktree_path: Path) -> None:
        """Create the directory, register the git worktree, then link the overlay."""

        worktree_path.mkdir(parents=True, exist_ok=True)
        logger.info("creating worktree %s", worktree_path)
        self.git.worktree_add(repo_path, worktree_path)
        self.apply_overlay(eng_area, worktree_path)

    def overlay_source(self, eng_area: str) -> Path:
        return self.home / eng_area / OVERLAY_DIR

    def apply_overlay(self, eng_area: str, worktree_path: Path) -> list[Path]:
        """Symlink every file under the overlay tree into the workspace as a dotfile.

        ``rcm-worktrees/config/git/ignore`` becomes ``<worktree>/.config/git/ignore``.
        Existing destinations are never touched. Returns the links created.
        """

        source_root = self.overlay_source(eng_area)
        if not source_root.is_dir():
            return []
        created: list[Path] = []
        for dirpath, _dirnames, filenames in os.walk(source_root):
            for name in sorted(filenames):
                source = Path(os.path.abspath(os.path.join(dirpath, name)))
                relative = source.relative_to(os.path.abspath(source_root))
                dest = worktree_path / f".{relative}"
                if dest.exists() or dest.is_symlink():
                    logger.debug("overlay: keeping existing %s", dest)
                    continue
                dest.parent.mkdir(parents=True, exist_ok=True)
                dest.symlink_to(source)
                created.append(dest)
        return created


def is_worktree(path: Path) -> bool:
    return path.is_dir() and (path / ".git").exists()


__all__ = ["WorkspaceManager", "is_worktree", "OVERLAY_DIR"]
