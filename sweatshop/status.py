"""Porcelain parsing, dirty summaries and the status table."""

from __future__ import annotations

import io
from collections import Counter
from typing import Iterable, Sequence, TextIO

import typer
from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .models import BranchStatus, ChangeKind, ChangeRecord

RENAME_SEPARATOR = " -> "
HEADERS = ("Repo", "Branch", "Dirty", "Remote", "LastCommit", "LastModified")

# Order of tokens in a dirty summary.
_SUMMARY_ORDER = (
    ChangeKind.MODIFIED,
    ChangeKind.UNTRACKED,
    ChangeKind.ADDED,
    ChangeKind.DELETED,
    ChangeKind.RENAMED,
)


def parse_porcelain(text: str) -> list[ChangeRecord]:
    records: list[ChangeRecord] = []
    for line in text.splitlines():
        if len(line) < 3:
            continue
        code = line[:2]
        _, sep, renamed_to = line.partition(RENAME_SEPARATOR)
        path = renamed_to if sep else line[3:]
        records.append(ChangeRecord(code=code, path=path))
    return records


def classify_change(code: str) -> ChangeKind:
    """Map a two character status code to a change kind; first match wins."""

    if "?" in code:
        return ChangeKind.UNTRACKED
    if "R" in code:
        return ChangeKind.RENAMED
    if "A" in code:
        return ChangeKind.ADDED
    if "D" in code:
        return ChangeKind.DELETED
    return ChangeKind.MODIFIED


def summarize_dirty(text: str) -> str:
    """Return a compact counter string such as ``2M 1?`` for a porcelain dump."""

    counts = Counter(classify_change(record.code) for record in parse_porcelain(text))
    return " ".join(
        f"{counts[kind]}{kind.symbol}" for kind in _SUMMARY_ORDER if counts[kind]
    )


def status_description(default_branch: str, commits_ahead: int, porcelain: str) -> str:
    parts: list[str] = []
    if commits_ahead == 1:
        parts.append(f"1 commit ahead of {default_branch}")
    else:
        parts.append(f"{commits_ahead} commits ahead of {default_branch}")
    parts.append("clean" if porcelain == "" else "dirty")
    if commits_ahead == 0 and porcelain == "":
        parts.append("(merged)")
    return ", ".join(parts)


def format_remote_marker(upstream: str | None, ahead: int, behind: int) -> str:
    if not upstream:
        return ""
    if not ahead and not behind:
        return f"≡ {upstream}"
    marker = ""
    if ahead:
        marker += f"↑{ahead}"
    if behind:
        marker += f"↓{behind}"
    return f"{marker} {upstream}"


def render(rows: Sequence[BranchStatus]) -> str:
    """Render status rows as a plain fixed-column table."""

    table = Table(box=box.SIMPLE_HEAD, show_edge=False, pad_edge=False)
    for header in HEADERS:
        table.add_column(header, no_wrap=True)
    for row in rows:
        cells = (row.repo, row.branch, row.dirty, row.remote, row.last_commit, row.last_modified)
        # Text cells are never parsed as console markup.
        table.add_row(*(Text(cell) for cell in cells))
    buffer = io.StringIO()
    console = Console(
        file=buffer,
        width=_table_width(rows),
        color_system=None,
        force_terminal=False,
        highlight=False,
    )
    console.print(table)
    lines = [line.rstrip() for line in buffer.getvalue().splitlines()]
    return "\n".join(line for line in lines if line) + "\n"


def _table_width(rows: Sequence[BranchStatus]) -> int:
    widths = [len(header) for header in HEADERS]
    for row in rows:
        cells = (row.repo, row.branch, row.dirty, row.remote, row.last_commit, row.last_modified)
        widths = [max(width, len(cell)) for width, cell in zip(widths, cells)]
    # two columns of padding per cell plus slack for the separators
    return max(80, sum(widths) + 3 * len(widths) + 4)


def write_tap(out: TextIO, results: Iterable[str]) -> None:
    """Write a TAP plan followed by one ``ok`` line per result."""

    items = list(results)
    typer.echo(f"1..{len(items)}", file=out)
    for index, result in enumerate(items, start=1):
        typer.echo(f"ok {index} - {result}", file=out)


__all__ = [
    "parse_porcelain",
    "classify_change",
    "summarize_dirty",
    "status_description",
    "format_remote_marker",
    "render",
    "write_tap",
]
