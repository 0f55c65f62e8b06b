"""Delete files and folders, to the trash or permanently."""

import dataclasses
from pathlib import Path
from typing import Annotated

import typer

from fsctl.cli.display import print_outcome
from fsctl.cli.prompts import confirm
from fsctl.cli.types import exit_for, fail, get_config, get_engine, require_entry
from fsctl.filesystem.engine import OperationEngine
from fsctl.filesystem.errors import FsError, TrashUnavailableError
from fsctl.filesystem.models import OperationOutcome, OperationRequest
from fsctl.filesystem.walker import summarize
from fsctl.utils.formatting import print_info, print_warning


def delete(
    ctx: typer.Context,
    path: Annotated[
        Path,
        typer.Argument(help="File or folder to delete."),
    ],
    permanent: Annotated[
        bool,
        typer.Option("--permanent", help="Delete permanently instead of moving to the trash."),
    ] = False,
    recursive: Annotated[
        bool,
        typer.Option("--recursive", "-r", help="Delete a non-empty folder with its contents."),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompts."),
    ] = False,
) -> None:
    """Delete a file or folder.

    Entries go to the trash unless --permanent is given or trash use is
    disabled in the config. A non-empty folder needs --recursive or an
    explicit confirmation.

    Examples:
        fsctl delete notes.txt           # Move to trash after confirming
        fsctl delete build -r -y         # Trash a folder without asking
        fsctl delete cache --permanent   # Remove for good
    """
    config = get_config(ctx)
    use_trash = config.use_trash and not permanent
    confirmed = yes

    try:
        entry = require_entry(path)
        if entry.is_dir and not recursive:
            summary = summarize(path)
            if summary.entries:
                question = f"'{path}' contains {summary.entries} entries. Delete them all?"
                if not confirm(question, assume_yes=yes):
                    print_info("Aborted.")
                    raise typer.Exit(code=0)
                recursive = confirmed = True
    except FsError as e:
        fail(e)

    where = "to the trash" if use_trash else "permanently"
    if config.confirm_destructive and not confirm(f"Delete {path} {where}?", assume_yes=confirmed):
        print_info("Aborted.")
        raise typer.Exit(code=0)

    request = OperationRequest.delete(path, recursive=recursive, trash=use_trash)
    outcome = _execute(get_engine(ctx), request)

    print_outcome(outcome)
    exit_for(outcome)


def _execute(engine: OperationEngine, request: OperationRequest) -> OperationOutcome:
    """Run a delete, offering a permanent delete if the trash refuses it."""
    try:
        return engine.delete(request)
    except TrashUnavailableError as e:
        print_warning(str(e))
        if not typer.confirm("Delete permanently instead?", default=False):
            print_info("Nothing was deleted.")
            raise typer.Exit(code=1) from e
    except FsError as e:
        fail(e)

    try:
        return engine.delete(dataclasses.replace(request, trash=False))
    except FsError as e:
        fail(e)
