"""Name, path and extension validation.

All checks are pure string checks and never touch the filesystem. They run
before any filesystem call for every path in every request.
"""

import os
import re

from fsctl.filesystem.errors import InvalidNameError, InvalidPathError

# Characters that may never appear in a single file or folder name.
RESERVED_NAME_CHARS: frozenset[str] = frozenset('/\\:*?"<>|\0')

# Device names reserved on Windows, with or without an extension.
RESERVED_DEVICE_NAMES: frozenset[str] = frozenset(
    {"CON", "PRN", "AUX", "NUL"}
    | {f"COM{i}" for i in range(1, 10)}
    | {f"LPT{i}" for i in range(1, 10)}
)

_EXTENSION_RE = re.compile(r"^[A-Za-z0-9_]+$")
_SEGMENT_SPLIT_RE = re.compile(r"[\\/]")
_DRIVE_RE = re.compile(r"^[A-Za-z]:$")


def _enforce_reserved_names(windows: bool | None) -> bool:
    return os.name == "nt" if windows is None else windows


def is_reserved_name(name: str) -> bool:
    """Check if a name is a reserved device name.

    The check ignores case and anything after the first dot, so ``con``,
    ``Con.txt`` and ``LPT1.tar.gz`` all match.

    Args:
        name: Single path component.

    Returns:
        True if the name is a reserved device name.
    """
    stem = name.split(".", 1)[0].rstrip(" ")
    return stem.upper() in RESERVED_DEVICE_NAMES


def validate_name(name: str, *, windows: bool | None = None) -> None:
    """Validate a single file or folder name.

    Args:
        name: Name to validate (no directory part).
        windows: Enforce Windows device-name rules. Defaults to the running
            platform.

    Raises:
        InvalidNameError: If the name is empty, a dot entry, contains a
            reserved character, or is a reserved device name.
    """
    if not name:
        raise InvalidNameError(None, "Name cannot be empty")

    if name in (".", ".."):
        raise InvalidNameError(name, "Name cannot be a dot entry")

    bad = sorted({c for c in name if c in RESERVED_NAME_CHARS})
    if bad:
        shown = ", ".join("NUL" if c == "\0" else repr(c) for c in bad)
        raise InvalidNameError(
            name.replace("\0", "\\0"),
            f"Name contains reserved characters ({shown})",
        )

    if _enforce_reserved_names(windows) and is_reserved_name(name):
        raise InvalidNameError(name, "Name is reserved on this platform")


def validate_path(path: str | os.PathLike[str], *, windows: bool | None = None) -> None:
    """Validate a relative or absolute path.

    Any literal ``..`` segment is rejected outright, without resolving
    the path first, so both ``../x`` and ``/a/../a/x`` fail.

    Args:
        path: Path to validate.
        windows: Enforce Windows device-name rules on every segment.
            Defaults to the running platform.

    Raises:
        InvalidPathError: If the path is empty, contains NUL, contains a
            parent-directory segment, or has a reserved device name segment.
    """
    raw = os.fspath(path)

    if not raw:
        raise InvalidPathError(None, "Path cannot be empty")

    if "\0" in raw:
        raise InvalidPathError(raw.replace("\0", "\\0"), "Path contains a NUL character")

    segments = _SEGMENT_SPLIT_RE.split(raw)
    if ".." in segments:
        raise InvalidPathError(raw, "Path contains a parent-directory segment")

    if _enforce_reserved_names(windows):
        for segment in segments:
            if segment and not _DRIVE_RE.match(segment) and is_reserved_name(segment):
                raise InvalidPathError(raw, f"Path segment '{segment}' is reserved")


def validate_extension(extension: str) -> None:
    """Validate a file extension (without the leading dot).

    Args:
        extension: Extension such as ``txt`` or ``tar_gz``.

    Raises:
        InvalidNameError: If the extension is empty, contains a dot, or has
            characters other than letters, digits and underscore.
    """
    if not extension:
        raise InvalidNameError(None, "Extension cannot be empty")
    if "." in extension:
        raise InvalidNameError(extension, "Extension cannot contain a dot")
    if not _EXTENSION_RE.match(extension):
        raise InvalidNameError(extension, "Extension may only contain letters, digits and '_'")


def compose_filename(
    name: str,
    extension: str | None = None,
    *,
    windows: bool | None = None,
) -> str:
    """Build a validated file name from a base name and optional extension.

    Args:
        name: Base name.
        extension: Extension without the dot, or None/empty for no extension.
        windows: Enforce Windows device-name rules.

    Returns:
        ``name`` or ``name.extension``.

    Raises:
        InvalidNameError: If either part fails validation.
    """
    validate_name(name, windows=windows)
    if not extension:
        return name

    validate_extension(extension)
    filename = f"{name}.{extension}"
    validate_name(filename, windows=windows)
    return filename
