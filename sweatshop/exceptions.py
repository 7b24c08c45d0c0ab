"""Custom error hierarchy for sweatshop."""

from __future__ import annotations

from typing import Sequence


class SweatshopError(RuntimeError):
    """Base error for the CLI."""


class PathFormatError(SweatshopError, ValueError):
    """Raised when an address does not look like <eng_area>/worktrees/<repo>/<branch>."""


class WorkspaceLookupError(SweatshopError, LookupError):
    """Raised when a home, repository or workspace directory cannot be found."""


class ExternalCommandError(SweatshopError):
    """Raised when a subprocess fails or cannot be started."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        *,
        stdout: str | None = None,
        stderr: str | None = None,
    ):
        self.command = list(command)
        self.returncode = returncode
        self.stdout = stdout or ""
        self.stderr = stderr or ""
        message = f"command failed (exit {returncode}): {' '.join(self.command)}"
        details = "\n".join(
            section
            for section in (self.stdout.strip(), self.stderr.strip())
            if section
        )
        if details:
            message = f"{message}\n{details}"
        super().__init__(message)


class UserAbort(SweatshopError):
    """Raised when the user cancels an interactive flow."""


__all__ = [
    "SweatshopError",
    "PathFormatError",
    "WorkspaceLookupError",
    "ExternalCommandError",
    "UserAbort",
]
