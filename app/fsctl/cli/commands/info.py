"""Show metadata for a single entry."""

from pathlib import Path
from typing import Annotated

import typer

from fsctl.cli.display import create_info_table
from fsctl.cli.types import fail, require_entry
from fsctl.filesystem.errors import FsError
from fsctl.filesystem.permissions import get_permission_adapter
from fsctl.filesystem.walker import aggregate_size, summarize
from fsctl.utils.formatting import console, print_warning


def info(
    path: Annotated[
        Path,
        typer.Argument(help="File or folder to describe."),
    ],
) -> None:
    """Show kind, size, timestamps, permissions and owner of an entry.

    For folders the size is the total of everything below it and the
    counts cover its immediate children.
    """
    adapter = get_permission_adapter()
    try:
        entry = require_entry(path)
        owner = adapter.get_owner(path) if adapter.supported else None
        summary = None
        if entry.is_dir:
            summary = summarize(path, max_depth=1)
            summary.total_bytes = aggregate_size(path)
    except FsError as e:
        fail(e)

    console.print(create_info_table(entry, owner=owner, summary=summary))
    if summary is not None and summary.failures:
        print_warning(f"{len(summary.failures)} entries could not be read")
