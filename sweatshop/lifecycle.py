"""Open, attach to and close workspaces."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence, TextIO

from .config import SweatshopConfig
from .exceptions import PathFormatError, WorkspaceLookupError
from .git import GitClient
from .models import OutputFormat, PathComponents
from .paths import parse_path, repo_path, worktree_path
from .session import ZmxSession, build_attach_command, has_dev_shell
from .status import status_description, write_tap
from .workspace import WorkspaceManager

logger = logging.getLogger(__name__)


@dataclass
class SessionLifecycle:
    """Drives a workspace from creation through attach to the close report.

    ``open_new`` creates the workspace before attaching, ``open_existing``
    expects it on disk already. Both hand the terminal to zmx and, once the
    session returns, print the close report for the workspace.
    """

    config: SweatshopConfig
    git: GitClient = field(default_factory=GitClient)
    session: ZmxSession = field(default_factory=ZmxSession)
    workspaces: WorkspaceManager | None = None
    out: TextIO | None = None

    def __post_init__(self) -> None:
        if self.workspaces is None:
            self.workspaces = WorkspaceManager(self.config.home, self.git)

    def open_new(
        self,
        address: str,
        output_format: OutputFormat = OutputFormat.LOG,
        skip_attach: bool = False,
        extra_args: Sequence[str] = (),
    ) -> None:
        comp = parse_path(address)
        home = self.config.home
        target = worktree_path(home, address)
        self.workspaces.create(comp.eng_area, repo_path(home, comp), target)
        self._enter(address, comp, target, output_format, skip_attach, extra_args)

    def open_existing(
        self,
        address: str,
        output_format: OutputFormat = OutputFormat.LOG,
        skip_attach: bool = False,
        extra_args: Sequence[str] = (),
    ) -> None:
        comp = parse_path(address)
        target = worktree_path(self.config.home, address)
        if not target.is_dir():
            raise WorkspaceLookupError(f"Worktree does not exist: {target}")
        self._enter(address, comp, target, output_format, skip_attach, extra_args)

    def _enter(
        self,
        address: str,
        comp: PathComponents,
        target: Path,
        output_format: OutputFormat,
        skip_attach: bool,
        extra_args: Sequence[str],
    ) -> None:
        os.chdir(target)
        if skip_attach:
            return
        dev_shell = has_dev_shell(target)
        if dev_shell:
            logger.info("flake.nix detected, starting session in nix develop")
        command = build_attach_command(extra_args, dev_shell, self.config.shell)
        returncode = self.session.attach(comp.session_key, command)
        if returncode != 0:
            logger.warning("session %s exited with status %d", comp.session_key, returncode)
        self.close(address, output_format)

    def close(self, address: str, output_format: OutputFormat = OutputFormat.LOG) -> str | None:
        """Report how the workspace relates to the repository's default branch.

        Returns the description, or None when there is nothing to report.
        """

        try:
            comp = parse_path(address)
        except PathFormatError:
            return None
        home = self.config.home
        repo = repo_path(home, comp)
        target = worktree_path(home, address)

        default_branch = self.git.current_branch(repo)
        if not default_branch:
            logger.warning("could not determine default branch for %s", repo)
            return None

        commits_ahead = self.git.commits_ahead(target, default_branch, comp.worktree)
        porcelain = self.git.status_porcelain(target)
        description = status_description(default_branch, commits_ahead, porcelain)

        if output_format is OutputFormat.TAP:
            write_tap(self.out or sys.stdout, [f"close {comp.worktree} # {description}"])
        else:
            logger.info("%s: %s", address, description)
        return description


__all__ = ["SessionLifecycle"]
