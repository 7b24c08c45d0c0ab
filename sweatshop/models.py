"""Dataclasses shared across modules."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Target:
    """A workspace address, optionally on a remote host."""

    host: str | None
    path: str

    @property
    def is_remote(self) -> bool:
        return bool(self.host)


@dataclass(frozen=True)
class PathComponents:
    """The parts of an <eng_area>/worktrees/<repo>/<branch> address."""

    eng_area: str
    repo: str
    worktree: str

    @property
    def address(self) -> str:
        return f"{self.eng_area}/worktrees/{self.repo}/{self.worktree}"

    @property
    def session_key(self) -> str:
        return f"{self.repo}/{self.worktree}"


class ChangeKind(str, Enum):
    """Classification of a single porcelain change record."""

    MODIFIED = "modified"
    UNTRACKED = "untracked"
    ADDED = "added"
    DELETED = "deleted"
    RENAMED = "renamed"

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]


_SYMBOLS = {
    ChangeKind.MODIFIED: "M",
    ChangeKind.UNTRACKED: "?",
    ChangeKind.ADDED: "A",
    ChangeKind.DELETED: "D",
    ChangeKind.RENAMED: "R",
}


@dataclass(frozen=True)
class ChangeRecord:
    """One line of `git status --porcelain` output."""

    code: str
    path: str


@dataclass(frozen=True)
class BranchStatus:
    """A single row of the status report."""

    repo: str
    branch: str
    dirty: str
    remote: str
    last_commit: str
    last_modified: str


@dataclass(frozen=True)
class WorkspaceCandidate:
    """A workspace slot discovered locally or on a remote host."""

    address: str
    description: str
    host: str | None = None

    @property
    def target(self) -> str:
        if self.host:
            return f"{self.host}:{self.address}"
        return self.address

    @property
    def is_new(self) -> bool:
        return self.address.endswith("/")

    @property
    def line(self) -> str:
        return f"{self.target}\t{self.description}"


class OutputFormat(str, Enum):
    """How close reports are written."""

    LOG = "log"
    TAP = "tap"
