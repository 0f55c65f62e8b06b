"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
import sys
from typing import Annotated

import typer

from fsctl import __version__
from fsctl.cli.commands import config, copy, create, delete, info, ls, move, rename, search, size
from fsctl.core.config import ConfigError, FsctlConfig, load_config
from fsctl.utils.formatting import print_error, print_info, print_warning

# Create main Typer app
app = typer.Typer(
    name="fsctl",
    help="Interactive file manager for the command line.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"fsctl version {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
) -> None:
    """fsctl - Interactive file manager for the command line.

    Create, delete, copy, move and rename files and folders with
    validation, conflict prompts and trash support.
    """
    _configure_logging(verbose)

    try:
        loaded = load_config()
    except ConfigError as e:
        if ctx.invoked_subcommand != "config":
            print_error(str(e))
            print_info("Fix the file or run 'fsctl config init --force' to reset it.")
            raise typer.Exit(code=1) from e
        print_warning(str(e))
        loaded = FsctlConfig()

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config"] = loaded


# Register commands
app.add_typer(create.app, name="create")
app.command(name="delete")(delete.delete)
app.command(name="copy")(copy.copy)
app.command(name="move")(move.move)
app.command(name="rename")(rename.rename)
app.command(name="info")(info.info)
app.command(name="ls")(ls.ls)
app.command(name="size")(size.size)
app.command(name="search")(search.search)
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
