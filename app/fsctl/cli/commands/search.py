"""Search a folder tree by name."""

from pathlib import Path
from typing import Annotated

import typer

from fsctl.cli.display import create_listing_table
from fsctl.cli.types import EntryTypeChoice, fail
from fsctl.filesystem.errors import FsError
from fsctl.filesystem.models import FileSystemEntry
from fsctl.filesystem.validator import validate_path
from fsctl.filesystem.walker import iter_matches
from fsctl.utils.formatting import console, print_info


def search(
    pattern: Annotated[
        str,
        typer.Argument(help="Glob pattern (*.txt) or part of a name."),
    ],
    root: Annotated[
        Path,
        typer.Option("--root", "-r", help="Folder to search in."),
    ] = Path("."),
    entry_type: Annotated[
        EntryTypeChoice | None,
        typer.Option("--type", "-t", help="Only files or only folders.", case_sensitive=False),
    ] = None,
    depth: Annotated[
        int | None,
        typer.Option("--depth", "-d", min=1, help="How many levels to descend."),
    ] = None,
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-l", min=1, help="Stop after this many matches."),
    ] = None,
) -> None:
    """Find entries whose name matches a pattern (case-insensitive).

    Examples:
        fsctl search report               # Names containing "report"
        fsctl search "*.py" -r src -t file
    """
    kind = entry_type.to_kind() if entry_type is not None else None
    matches: list[FileSystemEntry] = []
    try:
        validate_path(root)
        for entry in iter_matches(root, pattern, kind=kind, max_depth=depth):
            matches.append(entry)
            if limit is not None and len(matches) >= limit:
                break
    except FsError as e:
        fail(e)

    if not matches:
        print_info(f"No matches for '{pattern}' in {root}.")
        return

    console.print(create_listing_table(matches, title=f"Matches for '{pattern}'", root=root))
    console.print(f"\n[dim]{len(matches)} match(es)[/dim]")
