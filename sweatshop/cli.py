"""Typer CLI entrypoint for sweatshop."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .completions import local_candidates, write_candidates
from .config import SweatshopConfig, load_config
from .exceptions import SweatshopError
from .git import GitClient
from .interactive import prompt_workspace
from .lifecycle import SessionLifecycle
from .merge import MergeCoordinator
from .models import OutputFormat
from .paths import parse_target, worktree_path
from .remote import RemoteScanner, open_remote
from .report import collect_local, remote_rows
from .session import ZmxSession
from .status import render

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Manage ephemeral git worktrees bound to zmx sessions.",
)


@dataclass
class AppState:
    config: SweatshopConfig
    git: GitClient
    session: ZmxSession
    scanner: RemoteScanner

    def lifecycle(self) -> SessionLifecycle:
        return SessionLifecycle(self.config, git=self.git, session=self.session)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"sweatshop {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the sweatshop version and exit.",
    ),
) -> None:
    _ = version  # handled via callback
    _configure_logging(verbose)
    try:
        config = load_config()
    except SweatshopError as exc:
        _fail(str(exc))
    ctx.obj = AppState(
        config=config,
        git=GitClient(),
        session=ZmxSession(),
        scanner=RemoteScanner(),
    )


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_time=False, show_path=False)],
        force=True,
    )


def _require_state(ctx: typer.Context) -> AppState:
    state = ctx.obj
    if not isinstance(state, AppState):  # pragma: no cover
        raise typer.Exit(1)
    return state


@app.command("open")
def open_(
    ctx: typer.Context,
    target: Optional[str] = typer.Argument(
        None,
        help="Workspace address <eng_area>/worktrees/<repo>/<branch>, optionally prefixed with <host>:.",
    ),
    extra_args: Optional[list[str]] = typer.Argument(
        None,
        help="Command to run inside the session (pass after --).",
    ),
    output_format: OutputFormat = typer.Option(OutputFormat.LOG, "--format", help="Close report format."),
    no_attach: bool = typer.Option(False, "--no-attach", help="Create the workspace without attaching."),
) -> None:
    state = _require_state(ctx)
    try:
        if target is None:
            candidates = local_candidates(state.config.home)
            candidates += state.scanner.candidates(state.config.remote_hosts)
            target = prompt_workspace(candidates)
        parsed = parse_target(target)
        if parsed.is_remote:
            returncode = open_remote(parsed.host, parsed.path)
            raise typer.Exit(returncode)
        lifecycle = state.lifecycle()
        args = extra_args or []
        if worktree_path(state.config.home, parsed.path).is_dir():
            lifecycle.open_existing(parsed.path, output_format, no_attach, args)
        else:
            lifecycle.open_new(parsed.path, output_format, no_attach, args)
    except SweatshopError as exc:
        _fail(str(exc))


@app.command()
def close(
    ctx: typer.Context,
    target: str = typer.Argument(..., help="Workspace address to report on."),
    output_format: OutputFormat = typer.Option(OutputFormat.LOG, "--format", help="Report format."),
) -> None:
    state = _require_state(ctx)
    try:
        state.lifecycle().close(parse_target(target).path, output_format)
    except SweatshopError as exc:
        _fail(str(exc))


@app.command()
def merge(ctx: typer.Context) -> None:
    """Merge the workspace containing the current directory and remove it."""

    state = _require_state(ctx)
    coordinator = MergeCoordinator(state.config, git=state.git, session=state.session)
    try:
        coordinator.run(Path.cwd())
    except SweatshopError as exc:
        _fail(str(exc))


@app.command()
def status(ctx: typer.Context) -> None:
    """Show a status table for local and remote workspaces."""

    state = _require_state(ctx)
    try:
        rows = collect_local(state.config.home, state.git)
        rows += remote_rows(state.scanner.candidates(state.config.remote_hosts))
    except SweatshopError as exc:
        _fail(str(exc))
    typer.echo(render(rows), nl=False)


@app.command()
def completions(ctx: typer.Context) -> None:
    """Print workspace candidates as tab-separated lines."""

    state = _require_state(ctx)
    write_candidates(local_candidates(state.config.home), sys.stdout)
    state.scanner.scan(state.config.remote_hosts, sys.stdout)


def _fail(message: str, code: int = 1) -> None:
    typer.secho(message, err=True, fg=typer.colors.RED)
    raise typer.Exit(code)


__all__ = ["app"]
