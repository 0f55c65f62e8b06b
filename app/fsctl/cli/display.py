"""Shared Rich display functions for entries and operation outcomes.

Provides table builders and summary printers used across CLI commands,
plus a progress reporter that plugs into the engine's progress callback.
"""

from collections.abc import Iterable
from pathlib import Path
from types import TracebackType

from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TaskID,
    TextColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)
from rich.markup import escape
from rich.table import Table

from fsctl.filesystem.models import (
    EntryFailure,
    EntryKind,
    FileSystemEntry,
    OperationKind,
    OperationOutcome,
)
from fsctl.filesystem.permissions import Ownership
from fsctl.filesystem.walker import DirectorySummary
from fsctl.utils.formatting import (
    console,
    err_console,
    format_mode,
    format_size,
    print_success,
    print_warning,
)

_PAST_TENSE: dict[OperationKind, str] = {
    OperationKind.CREATE: "Created",
    OperationKind.DELETE: "Deleted",
    OperationKind.COPY: "Copied",
    OperationKind.MOVE: "Moved",
    OperationKind.RENAME: "Renamed",
}


def _styled_name(entry: FileSystemEntry, text: str | None = None) -> str:
    label = escape(text if text is not None else entry.name)
    if entry.kind == EntryKind.DIRECTORY:
        return f"[directory]{label}/[/directory]"
    if entry.kind == EntryKind.OTHER:
        return f"[other]{label}[/other]"
    return f"[file]{label}[/file]"


def _plural(count: int, word: str, plural: str | None = None) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {plural or word + 's'}"


def create_listing_table(
    entries: Iterable[FileSystemEntry],
    title: str,
    *,
    root: Path | None = None,
) -> Table:
    """Create a Rich table listing entries in walk order.

    Nested entries are indented by their depth below the listed folder,
    unless a root is given, in which case paths relative to it are shown.

    Args:
        entries: Entries to list.
        title: Table title.
        root: Show each entry's path relative to this folder.

    Returns:
        Rich Table configured for listing display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Name", no_wrap=True)
    table.add_column("Kind", width=9)
    table.add_column("Size", style="entry.size", justify="right")
    table.add_column("Modified", style="muted")
    table.add_column("Mode", style="entry.mode")

    for entry in entries:
        if root is not None:
            label = _styled_name(entry, str(entry.path.relative_to(root)))
        else:
            label = "  " * max(entry.depth - 1, 0) + _styled_name(entry)
        table.add_row(
            label,
            entry.kind.value,
            format_size(entry.size),
            entry.modified.astimezone().strftime("%Y-%m-%d %H:%M"),
            format_mode(entry.mode),
        )

    return table


def create_info_table(
    entry: FileSystemEntry,
    owner: Ownership | None = None,
    summary: DirectorySummary | None = None,
) -> Table:
    """Create a two-column metadata table for a single entry.

    Args:
        entry: Entry to describe.
        owner: Owner and group, where the platform supports them.
        summary: Aggregate counts for a folder.

    Returns:
        Rich Table with one property per row.
    """
    table = Table(
        title=str(entry.path),
        show_header=False,
        border_style="border",
    )
    table.add_column("Property", style="bold_header")
    table.add_column("Value")

    table.add_row("Kind", _styled_name(entry, entry.kind.value))
    if summary is not None:
        table.add_row("Size", f"{format_size(summary.total_bytes)} (total)")
        table.add_row(
            "Contains",
            f"{_plural(summary.files, 'file')}, {_plural(summary.directories, 'folder')}"
            + (f", {summary.others} other" if summary.others else ""),
        )
    else:
        table.add_row("Size", format_size(entry.size))
    table.add_row("Modified", entry.modified.astimezone().strftime("%Y-%m-%d %H:%M:%S %Z"))
    table.add_row("Permissions", format_mode(entry.mode))
    if owner is not None:
        table.add_row("Owner", f"{owner.user}:{owner.group}")

    return table


def create_failures_table(failures: Iterable[EntryFailure]) -> Table:
    """Create a Rich table listing per-entry failures of a bulk operation.

    Args:
        failures: Failures to display.

    Returns:
        Rich Table configured for failure display.
    """
    table = Table(
        title="Failures",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=8, justify="center")
    table.add_column("Path", no_wrap=True)
    table.add_column("Reason")

    for failure in failures:
        table.add_row(
            "[error]FAIL[/error]",
            str(failure.path),
            f"[muted]{failure.message} ({failure.kind.value})[/muted]",
        )

    return table


def describe_outcome(outcome: OperationOutcome) -> str:
    """Build a one-line summary of an outcome.

    Args:
        outcome: Outcome to summarize.

    Returns:
        Plain-text summary such as "Copied 3 files, 1 folder (2.0 KiB)".
    """
    parts: list[str] = []
    if outcome.files:
        parts.append(_plural(outcome.files, "file"))
    if outcome.directories:
        parts.append(_plural(outcome.directories, "folder"))
    counts = ", ".join(parts) if parts else "nothing"

    text = f"{_PAST_TENSE[outcome.kind]} {counts}"
    if outcome.size_bytes:
        text += f" ({format_size(outcome.size_bytes)})"
    if outcome.kind == OperationKind.DELETE:
        text += " to trash" if outcome.trash_records else " permanently"
    elif outcome.kind == OperationKind.CREATE:
        text += f": {outcome.destination or outcome.source}"
    elif outcome.destination is not None:
        text += f" -> {outcome.destination}"
    return text


def print_outcome(outcome: OperationOutcome) -> None:
    """Print the summary, skip count and failures of an outcome.

    Args:
        outcome: Outcome to display.
    """
    if outcome.touched == 0 and outcome.skipped and not outcome.failures:
        print_warning(f"Skipped {outcome.source}: destination left untouched")
        return

    summary = describe_outcome(outcome)
    if outcome.success:
        print_success(summary)
    else:
        console.print(f"[warning]{summary}[/warning]")

    if outcome.skipped:
        console.print(f"[dim]{_plural(outcome.skipped, 'entry', 'entries')} skipped[/dim]")
    if outcome.failures:
        err_console.print(create_failures_table(outcome.failures))


class CopyProgress:
    """Rich progress bar driven by the engine's progress callback.

    Used as a context manager around an engine call. The bar is shown only
    while a reported file is being copied, so conflict prompts between
    files never run under a live display.
    """

    def __init__(self) -> None:
        self._progress = Progress(
            TextColumn("[info]{task.description}"),
            BarColumn(),
            DownloadColumn(binary_units=True),
            TransferSpeedColumn(),
            TimeRemainingColumn(),
            console=err_console,
            transient=True,
        )
        self._task: TaskID | None = None
        self._path: Path | None = None

    def __enter__(self) -> "CopyProgress":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._finish()

    def __call__(self, path: Path, done: int, total: int) -> None:
        if self._task is None or path != self._path:
            self._finish()
            self._progress.start()
            self._task = self._progress.add_task(escape(path.name), total=total)
            self._path = path
        self._progress.update(self._task, completed=done)
        if done >= total:
            self._finish()

    def _finish(self) -> None:
        if self._task is None:
            return
        self._progress.remove_task(self._task)
        self._progress.stop()
        self._task = None
        self._path = None
