"""List the contents of a folder."""

from pathlib import Path
from typing import Annotated

import typer

from fsctl.cli.display import create_listing_table
from fsctl.cli.types import fail, get_config
from fsctl.filesystem.errors import FsError
from fsctl.filesystem.models import FileSystemEntry
from fsctl.filesystem.validator import validate_path
from fsctl.filesystem.walker import DirectoryWalker
from fsctl.utils.formatting import console, print_info, print_warning


def _is_hidden(entry: FileSystemEntry, root: Path) -> bool:
    return any(part.startswith(".") for part in entry.path.relative_to(root).parts)


def ls(
    ctx: typer.Context,
    path: Annotated[
        Path,
        typer.Argument(help="Folder to list."),
    ] = Path("."),
    show_all: Annotated[
        bool,
        typer.Option("--all", "-a", help="Include hidden entries."),
    ] = False,
    depth: Annotated[
        int,
        typer.Option("--depth", "-d", min=1, help="How many levels to descend."),
    ] = 1,
) -> None:
    """List a folder, folders first, each group sorted by name."""
    show_hidden = show_all or get_config(ctx).show_hidden
    walker = DirectoryWalker(path, max_depth=depth)
    try:
        validate_path(path)
        entries = [e for e in walker.walk() if show_hidden or not _is_hidden(e, path)]
    except FsError as e:
        fail(e)

    if entries:
        console.print(create_listing_table(entries, title=str(path)))
    else:
        print_info(f"{path} is empty.")
    for failure in walker.failures:
        print_warning(f"{failure.path}: {failure.message}")
