"""Attach to and detach from zmx terminal sessions."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Sequence

from .exceptions import ExternalCommandError

logger = logging.getLogger(__name__)

FLAKE_FILE = "flake.nix"


def run_interactive(command: Sequence[str]) -> int:
    """Run a command attached to our terminal and return its exit status."""

    logger.debug("running %s", " ".join(command))
    try:
        return subprocess.run(list(command)).returncode
    except OSError as exc:
        raise ExternalCommandError(command, 127, stderr=str(exc)) from exc


@dataclass
class ZmxSession:
    runner: Callable[[Sequence[str]], int] = field(default=run_interactive)

    def attach(self, key: str, command: Sequence[str] = ()) -> int:
        return self.runner(["zmx", "attach", key, *command])

    def detach(self) -> None:
        args = ["zmx", "detach"]
        returncode = self.runner(args)
        if returncode != 0:
            raise ExternalCommandError(args, returncode)


def has_dev_shell(worktree: Path) -> bool:
    """Return True when the workspace ships a nix flake exposing a dev shell."""

    flake = worktree / FLAKE_FILE
    if not flake.is_file():
        return False
    try:
        return "devShell" in flake.read_text()
    except OSError:
        return False


def build_attach_command(extra_args: Sequence[str], dev_shell: bool, shell: str) -> list[str]:
    if extra_args:
        if dev_shell:
            return ["nix", "develop", "--command", *extra_args]
        return list(extra_args)
    if dev_shell:
        return ["nix", "develop", "--command", shell]
    return []


__all__ = ["ZmxSession", "run_interactive", "has_dev_shell", "build_attach_command"]
