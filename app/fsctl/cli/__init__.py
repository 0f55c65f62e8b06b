"""CLI package for fsctl.

This package contains the Typer application and all subcommands.
"""

from fsctl.cli.main import app

__all__ = ["app"]
