"""Shared types and utilities for CLI commands.

This module provides common enums and helper functions used across
multiple CLI command modules to avoid code duplication.
"""

from enum import Enum
from pathlib import Path
from typing import NoReturn

import typer

from fsctl.cli.display import print_outcome
from fsctl.core.config import FsctlConfig
from fsctl.filesystem.engine import OperationEngine
from fsctl.filesystem.errors import (
    FsError,
    NotFoundError,
    OperationCancelledError,
    from_os_error,
)
from fsctl.filesystem.models import EntryKind, FileSystemEntry, OperationOutcome
from fsctl.filesystem.permissions import parse_mode
from fsctl.filesystem.validator import validate_path
from fsctl.utils.formatting import print_error, print_info, print_warning


class EntryTypeChoice(str, Enum):
    """Entry kinds selectable on the command line."""

    FILE = "file"
    DIR = "dir"

    def to_kind(self) -> EntryKind:
        """Map the choice to the engine's entry kind."""
        return EntryKind.FILE if self == EntryTypeChoice.FILE else EntryKind.DIRECTORY


def get_config(ctx: typer.Context) -> FsctlConfig:
    """Get the configuration loaded by the main callback.

    Args:
        ctx: Typer context of the running command.

    Returns:
        The loaded FsctlConfig, or defaults when none was stored.
    """
    obj = ctx.find_root().obj
    if isinstance(obj, dict) and isinstance(obj.get("config"), FsctlConfig):
        return obj["config"]
    return FsctlConfig()


def get_engine(ctx: typer.Context) -> OperationEngine:
    """Build an operation engine tuned by the loaded configuration."""
    config = get_config(ctx)
    return OperationEngine(
        chunk_size=config.chunk_size_bytes,
        progress_threshold=config.progress_threshold_bytes,
    )


def fail(error: FsError) -> NoReturn:
    """Report an engine error and exit with code 1.

    Args:
        error: The error raised by the engine or the validator.

    Raises:
        typer.Exit: Always, with code 1.
    """
    if isinstance(error, OperationCancelledError):
        print_warning("Operation cancelled.")
        if error.outcome is not None and error.outcome.touched:
            print_outcome(error.outcome)
            print_info("Completed steps were kept.")
    else:
        print_error(str(error))
    raise typer.Exit(code=1)


def exit_for(outcome: OperationOutcome) -> None:
    """Exit with code 1 if any entry of the outcome failed.

    Args:
        outcome: Outcome of the executed request.

    Raises:
        typer.Exit: If the outcome has failures.
    """
    if outcome.failures:
        raise typer.Exit(code=1)


def probe(path: Path) -> FileSystemEntry | None:
    """Fresh entry for a path, or None if nothing is there.

    Raises:
        FsError: If the path exists but cannot be inspected.
    """
    try:
        return FileSystemEntry.from_path(path)
    except (FileNotFoundError, NotADirectoryError):
        return None
    except OSError as e:
        raise from_os_error(path, e) from e


def require_entry(path: Path) -> FileSystemEntry:
    """Validate a path and return its entry.

    Raises:
        InvalidPathError: If the path fails validation.
        NotFoundError: If nothing exists at the path.
    """
    validate_path(path)
    entry = probe(path)
    if entry is None:
        raise NotFoundError(path, "No such file or folder")
    return entry


def parse_mode_option(value: str | None) -> int | None:
    """Parse a --mode option value.

    Raises:
        typer.BadParameter: If the value is not an octal mode.
    """
    if value is None:
        return None
    try:
        return parse_mode(value)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--mode") from e


def resolve_target(
    source: FileSystemEntry,
    destination: Path,
) -> tuple[Path, FileSystemEntry | None]:
    """Work out where a copied or moved entry lands.

    A file sent to an existing folder lands inside it under its own name.
    Anything else lands at the destination itself.

    Returns:
        Tuple of (final destination, entry already there or None).

    Raises:
        InvalidPathError: If the destination fails validation.
    """
    validate_path(destination)
    existing = probe(destination)
    if source.is_file and existing is not None and existing.is_dir:
        target = destination / source.name
        return target, probe(target)
    return destination, existing
