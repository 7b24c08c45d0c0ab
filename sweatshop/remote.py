"""Enumerate and open workspaces on remote hosts over ssh."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from typing import Callable, Iterable, Sequence, TextIO

import typer

from .exceptions import ExternalCommandError
from .models import WorkspaceCandidate
from .session import run_interactive

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT = 2
LIST_COMMAND = (
    'find ~/eng*/worktrees -mindepth 2 -maxdepth 3 -type d 2>/dev/null | sed "s|^$HOME/||"'
)


def run_ssh(host: str, command: str) -> str:
    args = ["ssh", "-o", f"ConnectTimeout={CONNECT_TIMEOUT}", host, command]
    try:
        result = subprocess.run(args, text=True, errors="replace", capture_output=True)
    except OSError as exc:
        raise ExternalCommandError(args, 127, stderr=str(exc)) from exc
    if result.returncode != 0:
        raise ExternalCommandError(
            args,
            result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )
    return result.stdout


def open_remote(
    host: str,
    path: str,
    runner: Callable[[Sequence[str]], int] = run_interactive,
) -> int:
    logger.info("opening remote shop %s on %s", path, host)
    return runner(["ssh", "-t", host, f"zmx attach {path}"])


def classify_remote_path(host: str, remote_path: str) -> WorkspaceCandidate | None:
    parts = remote_path.split("/")
    if len(parts) == 3:
        return WorkspaceCandidate(f"{remote_path}/", "remote: new worktree", host)
    if len(parts) == 4:
        return WorkspaceCandidate(remote_path, "remote: existing worktree", host)
    return None


@dataclass
class RemoteScanner:
    runner: Callable[[str, str], str] = field(default=run_ssh)

    def candidates(self, hosts: Iterable[str]) -> list[WorkspaceCandidate]:
        found: list[WorkspaceCandidate] = []
        for host in hosts:
            try:
                output = self.runner(host, LIST_COMMAND)
            except (ExternalCommandError, UnicodeDecodeError, OSError) as exc:
                logger.debug("skipping %s: %s", host, exc)
                continue
            for line in output.splitlines():
                remote_path = line.strip()
                if not remote_path:
                    continue
                candidate = classify_remote_path(host, remote_path)
                if candidate is not None:
                    found.append(candidate)
        return found

    def scan(self, hosts: Iterable[str], out: TextIO) -> None:
        for candidate in self.candidates(hosts):
            typer.echo(candidate.line, file=out)


__all__ = ["RemoteScanner", "run_ssh", "open_remote", "classify_remote_path"]
