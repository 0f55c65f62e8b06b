"""Permission and ownership adapter.

One interface with a variant per platform family. POSIX systems read and
apply mode bits and resolve owner names; other platforms report
:class:`UnsupportedOperationError` instead of silently succeeding.
"""

import logging
import os
import stat
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from fsctl.filesystem.errors import UnsupportedOperationError, from_os_error

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Ownership:
    """Owner and group of a filesystem entry.

    Attributes:
        user: User name, or the numeric id when it has no name.
        group: Group name, or the numeric id when it has no name.
    """

    user: str
    group: str


class PermissionAdapter(ABC):
    """Reads and applies permission bits and ownership."""

    @property
    @abstractmethod
    def supported(self) -> bool:
        """Check if the platform has a POSIX-style permission model."""

    @abstractmethod
    def get_mode(self, path: Path | str) -> int:
        """Return the permission bits of a path (symlinks not followed)."""

    @abstractmethod
    def set_mode(self, path: Path | str, mode: int) -> None:
        """Apply permission bits to a path."""

    @abstractmethod
    def get_owner(self, path: Path | str) -> Ownership:
        """Return the owner and group of a path (symlinks not followed)."""


class PosixPermissionAdapter(PermissionAdapter):
    """Permission adapter for Linux, macOS and other POSIX systems."""

    @property
    def supported(self) -> bool:
        return True

    def get_mode(self, path: Path | str) -> int:
        try:
            return stat.S_IMODE(os.lstat(path).st_mode)
        except OSError as e:
            raise from_os_error(path, e) from e

    def set_mode(self, path: Path | str, mode: int) -> None:
        if not 0 <= mode <= 0o7777:
            msg = f"Invalid mode: {oct(mode)}"
            raise ValueError(msg)
        try:
            os.chmod(path, mode)
        except OSError as e:
            raise from_os_error(path, e) from e
        logger.debug("Set mode %o on %s", mode, path)

    def get_owner(self, path: Path | str) -> Ownership:
        import grp
        import pwd

        try:
            st = os.lstat(path)
        except OSError as e:
            raise from_os_error(path, e) from e

        try:
            user = pwd.getpwuid(st.st_uid).pw_name
        except KeyError:
            user = str(st.st_uid)
        try:
            group = grp.getgrgid(st.st_gid).gr_name
        except KeyError:
            group = str(st.st_gid)
        return Ownership(user=user, group=group)


class UnsupportedPermissionAdapter(PermissionAdapter):
    """Permission adapter for platforms without POSIX permissions (Windows)."""

    @property
    def supported(self) -> bool:
        return False

    def get_mode(self, path: Path | str) -> int:
        raise UnsupportedOperationError(path, "Permission bits are not supported on this platform")

    def set_mode(self, path: Path | str, mode: int) -> None:
        raise UnsupportedOperationError(path, "Permission bits are not supported on this platform")

    def get_owner(self, path: Path | str) -> Ownership:
        raise UnsupportedOperationError(path, "Ownership is not supported on this platform")


# Selected once per process
_adapter: PermissionAdapter | None = None


def get_permission_adapter() -> PermissionAdapter:
    """Get the permission adapter for the running platform.

    Returns:
        Cached PosixPermissionAdapter on POSIX systems, otherwise an
        UnsupportedPermissionAdapter.
    """
    global _adapter
    if _adapter is None:
        if os.name == "posix":
            _adapter = PosixPermissionAdapter()
        else:
            _adapter = UnsupportedPermissionAdapter()
    return _adapter


def parse_mode(value: str) -> int:
    """Parse an octal permission string such as ``644`` or ``0o755``.

    Args:
        value: Octal digits, optionally prefixed with ``0o``.

    Returns:
        Mode as an integer.

    Raises:
        ValueError: If the string is not a valid octal mode.
    """
    text = value.strip().lower().removeprefix("0o")
    if not text or len(text) > 4 or any(c not in "01234567" for c in text):
        msg = f"Invalid permission mode '{value}': use octal digits such as 644"
        raise ValueError(msg)
    return int(text, 8)
