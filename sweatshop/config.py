"""Resolve the runtime configuration from the process environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .exceptions import WorkspaceLookupError

REMOTE_HOSTS_ENV = "SWEATSHOP_REMOTE_HOSTS"
DEFAULT_SHELL = "/bin/sh"


@dataclass(frozen=True)
class SweatshopConfig:
    """Ambient lookups, resolved once at the CLI boundary."""

    home: Path
    remote_hosts: tuple[str, ...] = ()
    shell: str = DEFAULT_SHELL


def load_config(
    environ: Mapping[str, str] | None = None,
    home: Path | None = None,
) -> SweatshopConfig:
    env = os.environ if environ is None else environ
    resolved_home = home or _resolve_home()
    return SweatshopConfig(
        home=resolved_home,
        remote_hosts=resolve_remote_hosts(resolved_home, env),
        shell=env.get("SHELL") or DEFAULT_SHELL,
    )


def resolve_remote_hosts(home: Path, environ: Mapping[str, str]) -> tuple[str, ...]:
    """Hosts from $SWEATSHOP_REMOTE_HOSTS, else ~/.config/sweatshop/remotes."""

    raw = environ.get(REMOTE_HOSTS_ENV)
    if raw:
        return tuple(host for host in raw.split(":") if host)
    config_file = remotes_file(home)
    try:
        text = config_file.read_text()
    except OSError:
        return ()
    return tuple(line.strip() for line in text.splitlines() if line.strip())


def remotes_file(home: Path) -> Path:
    return home / ".config" / "sweatshop" / "remotes"


def _resolve_home() -> Path:
    try:
        return Path.home()
    except RuntimeError as exc:
        raise WorkspaceLookupError("Unable to determine the home directory.") from exc


__all__ = ["SweatshopConfig", "load_config", "resolve_remote_hosts", "remotes_file"]
