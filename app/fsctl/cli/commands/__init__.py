"""CLI commands for fsctl.

This package contains all subcommand implementations.
"""

from fsctl.cli.commands import config, copy, create, delete, info, ls, move, rename, search, size

__all__ = ["config", "copy", "create", "delete", "info", "ls", "move", "rename", "search", "size"]
