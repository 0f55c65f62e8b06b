"""Rename a file or folder in place."""

from pathlib import Path
from typing import Annotated

import typer

from fsctl.cli.display import print_outcome
from fsctl.cli.prompts import ConflictChoice, PromptResolver, decide
from fsctl.cli.types import exit_for, fail, get_engine, probe, require_entry
from fsctl.filesystem.errors import FsError
from fsctl.filesystem.models import OperationRequest
from fsctl.filesystem.validator import validate_name


def rename(
    ctx: typer.Context,
    path: Annotated[
        Path,
        typer.Argument(help="File or folder to rename."),
    ],
    new_name: Annotated[
        str,
        typer.Argument(help="New name (no folder part)."),
    ],
    on_conflict: Annotated[
        ConflictChoice,
        typer.Option(
            "--on-conflict",
            help="What to do if the new name is taken.",
            case_sensitive=False,
        ),
    ] = ConflictChoice.ASK,
) -> None:
    """Rename a file or folder within its folder."""
    try:
        entry = require_entry(path)
        validate_name(new_name)
        target = path.parent / new_name
        existing = probe(target)
        merge = entry.is_dir and existing is not None and existing.is_dir
        decision = decide(on_conflict, target, existing, merge=merge)
        request = OperationRequest.rename(path, new_name, decision=decision)
        outcome = get_engine(ctx).rename(request, resolver=PromptResolver(on_conflict))
    except FsError as e:
        fail(e)

    print_outcome(outcome)
    exit_for(outcome)
