"""Utility modules for fsctl.

This module exports commonly used utility functions.
"""

from fsctl.utils.formatting import (
    console,
    err_console,
    format_mode,
    format_size,
    print_error,
    print_info,
    print_success,
    print_warning,
)

__all__ = [
    "console",
    "err_console",
    "format_mode",
    "format_size",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
