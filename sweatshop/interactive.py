"""Interactive prompt helpers built on InquirerPy."""

from __future__ import annotations

import sys
from typing import Any, Sequence

from InquirerPy import inquirer
from InquirerPy.base.control import Choice

from .exceptions import PathFormatError, UserAbort
from .models import WorkspaceCandidate


def _ensure_tty() -> None:
    if not sys.stdin.isatty():
        raise UserAbort(
            "Interactive mode requires a TTY. Pass a workspace address to run non-interactively."
        )


def fuzzy_select(message: str, choices: Sequence[Choice | str]) -> Any:
    _ensure_tty()
    if not choices:
        raise UserAbort("No options available for selection.")
    try:
        return inquirer.fuzzy(message=message, choices=list(choices)).execute()
    except KeyboardInterrupt as exc:  # pragma: no cover - user cancel
        raise UserAbort("User cancelled the prompt.") from exc


def text_input(message: str, default: str | None = None) -> str:
    _ensure_tty()
    try:
        return inquirer.text(message=message, default=default or "").execute().strip()
    except KeyboardInterrupt as exc:  # pragma: no cover - user cancel
        raise UserAbort("User cancelled the prompt.") from exc


def build_candidate_choices(candidates: Sequence[WorkspaceCandidate]) -> list[Choice]:
    """Existing worktrees first, then the new-worktree slots."""

    ordered = sorted(candidates, key=lambda candidate: candidate.is_new)
    return [
        Choice(value=candidate, name=f"{candidate.target} · {candidate.description}")
        for candidate in ordered
    ]


def prompt_workspace(candidates: Sequence[WorkspaceCandidate]) -> str:
    """Pick a workspace target, asking for a branch when a new slot is chosen."""

    selection: WorkspaceCandidate = fuzzy_select("Select worktree", build_candidate_choices(candidates))
    if not selection.is_new:
        return selection.target
    branch = text_input("Branch name")
    if not branch or "/" in branch:
        raise PathFormatError("Branch name must be non-empty and cannot contain '/'.")
    return f"{selection.target}{branch}"


__all__ = ["fuzzy_select", "text_input", "build_candidate_choices", "prompt_workspace"]
