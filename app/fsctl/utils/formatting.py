"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

import stat
import sys

from rich.console import Console

from fsctl.core.theme import get_theme


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def format_size(size_bytes: int | None) -> str:
    """Format a byte count as a human-readable string in binary units.

    Args:
        size_bytes: Byte count, or None for entries without a size.

    Returns:
        String such as ``"512 B"`` or ``"1.5 MiB"``; ``"-"`` for None.
    """
    if size_bytes is None:
        return "-"
    size = float(size_bytes)
    for unit in ("B", "KiB", "MiB", "GiB"):
        if abs(size) < 1024:
            return f"{size:.1f} {unit}" if unit != "B" else f"{int(size)} B"
        size /= 1024
    return f"{size:.1f} TiB"


def format_mode(mode: int | None) -> str:
    """Format permission bits as an ``ls``-style string.

    Args:
        mode: Permission bits (e.g. ``0o755``), or None where unsupported.

    Returns:
        String such as ``"rwxr-xr-x"``; ``"-"`` for None.
    """
    if mode is None:
        return "-"
    # filemode() prefixes a type character; the bits alone have none
    return stat.filemode(mode)[1:]


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
