"""Show the total size of a file or folder."""

from pathlib import Path
from typing import Annotated

import typer

from fsctl.cli.types import fail, require_entry
from fsctl.filesystem.errors import FsError
from fsctl.filesystem.walker import summarize
from fsctl.utils.formatting import console, format_size, print_warning


def size(
    path: Annotated[
        Path,
        typer.Argument(help="File or folder to measure."),
    ],
) -> None:
    """Show the size of a file, or the total size of a folder tree.

    Symlinks are not followed and count as zero bytes.
    """
    try:
        entry = require_entry(path)
        if entry.is_dir:
            summary = summarize(path)
            total = summary.total_bytes
            failures = summary.failures
        else:
            total = entry.size or 0
            failures = []
    except FsError as e:
        fail(e)

    console.print(f"[entry.size]{format_size(total)}[/] [muted]({total} bytes)[/]  {path}")
    if failures:
        print_warning(f"{len(failures)} entries could not be read; the total is incomplete")
