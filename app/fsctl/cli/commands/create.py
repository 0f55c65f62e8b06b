"""Create files and folders."""

from pathlib import Path
from typing import Annotated

import typer

from fsctl.cli.display import print_outcome
from fsctl.cli.prompts import ConflictChoice, decide, resolve_filename
from fsctl.cli.types import fail, get_engine, parse_mode_option, probe
from fsctl.filesystem.errors import FsError
from fsctl.filesystem.models import OperationRequest
from fsctl.filesystem.validator import validate_path
from fsctl.utils.formatting import print_info

app = typer.Typer(
    help="Create files and folders.",
    no_args_is_help=True,
)


@app.command("file")
def create_file(
    ctx: typer.Context,
    name: Annotated[
        str | None,
        typer.Argument(help="File name without extension (prompted if omitted)."),
    ] = None,
    directory: Annotated[
        Path,
        typer.Option("--dir", "-d", help="Folder to create the file in."),
    ] = Path("."),
    extension: Annotated[
        str | None,
        typer.Option("--ext", "-e", help="File extension, without the dot."),
    ] = None,
    content: Annotated[
        str | None,
        typer.Option("--content", "-c", help="Initial text content."),
    ] = None,
    mode: Annotated[
        str | None,
        typer.Option("--mode", "-m", help="Octal permissions, e.g. 644."),
    ] = None,
    on_conflict: Annotated[
        ConflictChoice,
        typer.Option("--on-conflict", help="What to do if the file exists.", case_sensitive=False),
    ] = ConflictChoice.ASK,
) -> None:
    """Create a new file.

    Examples:
        fsctl create file                       # Prompt for name and extension
        fsctl create file notes --ext txt       # Create ./notes.txt
        fsctl create file todo -d docs -c "- x" # Create docs/todo with content
    """
    mode_bits = parse_mode_option(mode)
    try:
        filename = resolve_filename(name, extension, ask_extension=name is None)
        path = directory / filename
        validate_path(path)
        decision = decide(on_conflict, path, probe(path))
        request = OperationRequest.create_file(path, content, mode=mode_bits, decision=decision)
        outcome = get_engine(ctx).create(request)
    except FsError as e:
        fail(e)

    print_outcome(outcome)


@app.command("dir")
def create_dir(
    ctx: typer.Context,
    path: Annotated[
        Path,
        typer.Argument(help="Folder to create."),
    ],
    parents: Annotated[
        bool,
        typer.Option("--parents", "-p", help="Create missing parent folders too."),
    ] = False,
    mode: Annotated[
        str | None,
        typer.Option("--mode", "-m", help="Octal permissions, e.g. 755."),
    ] = None,
) -> None:
    """Create a new folder."""
    mode_bits = parse_mode_option(mode)
    try:
        request = OperationRequest.create_directory(path, parents=parents, mode=mode_bits)
        outcome = get_engine(ctx).create(request)
    except FsError as e:
        fail(e)

    if outcome.directories == 0:
        print_info(f"Folder already exists: {path}")
        return
    print_outcome(outcome)
