"""Typed errors raised by the filesystem operation engine.

Every failure the engine reports is an :class:`FsError` subclass carrying
an :class:`ErrorKind`, so callers can branch on the kind without matching
on exception classes or messages.
"""

from __future__ import annotations

import errno
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fsctl.filesystem.models import OperationOutcome


class ErrorKind(str, Enum):
    """Classification of an engine failure.

    Attributes:
        NOT_FOUND: A required path does not exist.
        ALREADY_EXISTS: The destination exists and no decision allows replacing it.
        INVALID_NAME: A file or folder name failed validation.
        INVALID_PATH: A path failed validation (including traversal rejection).
        WRONG_TYPE: The entry has the wrong kind (file where a folder is expected).
        NOT_EMPTY: A non-empty folder was deleted without recursive confirmation.
        PERMISSION_DENIED: The OS refused access.
        TRASH_UNAVAILABLE: No trash facility could take the entry.
        UNSUPPORTED_OPERATION: The platform lacks the requested capability.
        CANCELLED: The user aborted a multi-step operation.
        IO_FAILURE: Any other OS-level error.
    """

    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    INVALID_NAME = "invalid_name"
    INVALID_PATH = "invalid_path"
    WRONG_TYPE = "wrong_type"
    NOT_EMPTY = "not_empty"
    PERMISSION_DENIED = "permission_denied"
    TRASH_UNAVAILABLE = "trash_unavailable"
    UNSUPPORTED_OPERATION = "unsupported_operation"
    CANCELLED = "cancelled"
    IO_FAILURE = "io_failure"


class FsError(Exception):
    """Base exception for all filesystem engine errors.

    Attributes:
        path: The path the error refers to, if any.
        message: Human-readable description without the path prefix.
    """

    kind: ErrorKind = ErrorKind.IO_FAILURE

    def __init__(self, path: Path | str | None, message: str) -> None:
        self.path = Path(path) if path is not None else None
        self.message = message
        super().__init__(f"{message}: {path}" if path is not None else message)


class NotFoundError(FsError):
    """Raised when a required path does not exist."""

    kind = ErrorKind.NOT_FOUND


class AlreadyExistsError(FsError):
    """Raised when a destination exists and nothing permits replacing it."""

    kind = ErrorKind.ALREADY_EXISTS


class InvalidNameError(FsError):
    """Raised when a name or extension fails validation."""

    kind = ErrorKind.INVALID_NAME


class InvalidPathError(FsError):
    """Raised when a path fails validation."""

    kind = ErrorKind.INVALID_PATH


class WrongTypeError(FsError):
    """Raised when an entry is not of the kind the operation requires."""

    kind = ErrorKind.WRONG_TYPE


class DirectoryNotEmptyError(FsError):
    """Raised when deleting a non-empty folder without recursive confirmation."""

    kind = ErrorKind.NOT_EMPTY


class PermissionDeniedError(FsError):
    """Raised when the OS denies access to a path."""

    kind = ErrorKind.PERMISSION_DENIED


class TrashUnavailableError(FsError):
    """Raised when the platform trash cannot take an entry.

    The caller decides whether to fall back to a permanent delete.
    """

    kind = ErrorKind.TRASH_UNAVAILABLE


class UnsupportedOperationError(FsError):
    """Raised when the platform has no support for the requested capability."""

    kind = ErrorKind.UNSUPPORTED_OPERATION


class OperationCancelledError(FsError):
    """Raised when a conflict decision cancels the enclosing operation.

    Attributes:
        outcome: What was completed before the cancel, for bulk operations.
            Already-completed steps are not rolled back.
    """

    kind = ErrorKind.CANCELLED

    def __init__(
        self,
        path: Path | str | None,
        message: str = "Operation cancelled",
        outcome: OperationOutcome | None = None,
    ) -> None:
        super().__init__(path, message)
        self.outcome = outcome


class IoFailureError(FsError):
    """Raised for OS errors without a more specific kind."""

    kind = ErrorKind.IO_FAILURE


def from_os_error(path: Path | str, exc: OSError) -> FsError:
    """Map an OSError to the matching engine error.

    The original exception is not chained here; callers use
    ``raise from_os_error(path, e) from e``.

    Args:
        path: Path the failing call operated on.
        exc: The OS error raised by the call.

    Returns:
        FsError subclass instance describing the failure.
    """
    reason = exc.strerror or str(exc)
    if isinstance(exc, FileNotFoundError):
        return NotFoundError(path, "No such file or folder")
    if isinstance(exc, FileExistsError):
        return AlreadyExistsError(path, "Path already exists")
    if isinstance(exc, PermissionError):
        return PermissionDeniedError(path, "Permission denied")
    if isinstance(exc, (IsADirectoryError, NotADirectoryError)):
        return WrongTypeError(path, reason)
    if exc.errno == errno.ENOTEMPTY:
        return DirectoryNotEmptyError(path, "Folder is not empty")
    return IoFailureError(path, reason)
