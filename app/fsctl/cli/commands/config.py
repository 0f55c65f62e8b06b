"""Configuration commands.

Show, initialize and locate the fsctl configuration file.
"""

from typing import Annotated

import typer
from rich.table import Table

from fsctl.cli.types import get_config
from fsctl.core.config import ConfigError, FsctlConfig, save_config
from fsctl.core.paths import get_config_path
from fsctl.utils.formatting import console, format_size, print_error, print_info, print_success

app = typer.Typer(
    help="Show and manage the configuration.",
    no_args_is_help=True,
)

_SIZE_FIELDS = frozenset({"chunk_size_bytes", "progress_threshold_bytes"})


@app.command()
def show(ctx: typer.Context) -> None:
    """Show the effective configuration."""
    config = get_config(ctx)
    defaults = FsctlConfig()

    table = Table(
        title=str(get_config_path()),
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Setting", no_wrap=True)
    table.add_column("Value")
    table.add_column("Source", style="muted")

    for name, value in config.model_dump().items():
        shown = f"{format_size(value)} ({value})" if name in _SIZE_FIELDS else str(value).lower()
        source = "default" if getattr(defaults, name) == value else "config"
        table.add_row(name, shown, source)

    console.print(table)


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a config file with every setting at its default."""
    path = get_config_path()
    if path.exists() and not force:
        print_error(f"Config already exists: {path}")
        print_info("Use --force to overwrite it.")
        raise typer.Exit(code=1)

    try:
        save_config(FsctlConfig(), path, include_defaults=True)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Config written to {path}")


@app.command()
def path() -> None:
    """Print the config file location."""
    typer.echo(str(get_config_path()))
