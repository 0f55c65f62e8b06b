"""Copy files and folder trees."""

from pathlib import Path
from typing import Annotated

import typer

from fsctl.cli.display import CopyProgress, print_outcome
from fsctl.cli.prompts import ConflictChoice, PromptResolver, decide
from fsctl.cli.types import exit_for, fail, get_engine, require_entry, resolve_target
from fsctl.filesystem.errors import FsError
from fsctl.filesystem.models import OperationRequest


def copy(
    ctx: typer.Context,
    source: Annotated[
        Path,
        typer.Argument(help="File or folder to copy."),
    ],
    destination: Annotated[
        Path,
        typer.Argument(help="Target path, or an existing folder for a file."),
    ],
    on_conflict: Annotated[
        ConflictChoice,
        typer.Option(
            "--on-conflict",
            help="What to do with existing destinations.",
            case_sensitive=False,
        ),
    ] = ConflictChoice.ASK,
) -> None:
    """Copy a file or folder.

    Copying a folder onto an existing folder merges them; entries that
    exist on both sides are resolved one by one.

    Examples:
        fsctl copy report.pdf backup/           # Into an existing folder
        fsctl copy photos photos-2024           # Copy a whole tree
        fsctl copy src dst --on-conflict skip   # Never overwrite
    """
    try:
        entry = require_entry(source)
        target, existing = resolve_target(entry, destination)
        merge = entry.is_dir and existing is not None and existing.is_dir
        decision = decide(on_conflict, target, existing, merge=merge)
        request = OperationRequest.copy(source, target, decision=decision)
        with CopyProgress() as progress:
            outcome = get_engine(ctx).copy(
                request, resolver=PromptResolver(on_conflict), progress=progress
            )
    except FsError as e:
        fail(e)

    print_outcome(outcome)
    exit_for(outcome)
