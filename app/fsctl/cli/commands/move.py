"""Move files and folders."""

from pathlib import Path
from typing import Annotated

import typer

from fsctl.cli.display import CopyProgress, print_outcome
from fsctl.cli.prompts import ConflictChoice, PromptResolver, decide
from fsctl.cli.types import exit_for, fail, get_engine, require_entry, resolve_target
from fsctl.filesystem.errors import FsError
from fsctl.filesystem.models import OperationRequest


def move(
    ctx: typer.Context,
    source: Annotated[
        Path,
        typer.Argument(help="File or folder to move."),
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
    """Move a file or folder.

    Moves within one volume are a single rename. Across volumes the entry
    is copied first and the source removed only after the copy succeeded.

    Examples:
        fsctl move draft.txt archive/        # Into an existing folder
        fsctl move old-name new-name         # Move to a new path
    """
    try:
        entry = require_entry(source)
        target, existing = resolve_target(entry, destination)
        merge = entry.is_dir and existing is not None and existing.is_dir
        decision = decide(on_conflict, target, existing, merge=merge)
        request = OperationRequest.move(source, target, decision=decision)
        with CopyProgress() as progress:
            outcome = get_engine(ctx).move(
                request, resolver=PromptResolver(on_conflict), progress=progress
            )
    except FsError as e:
        fail(e)

    print_outcome(outcome)
    exit_for(outcome)
