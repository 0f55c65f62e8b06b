"""Platform trash adapter.

Routes deletions to the desktop trash (recycle bin) through send2trash so
they can be restored with the platform's own tools.
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

from send2trash import send2trash
from send2trash.exceptions import TrashPermissionError

from fsctl.filesystem.errors import NotFoundError, TrashUnavailableError
from fsctl.filesystem.models import TrashRecord

logger = logging.getLogger(__name__)


class TrashAdapter:
    """Moves files and folders to the platform trash.

    A failure never turns into a permanent delete: the caller receives
    :class:`TrashUnavailableError` and decides what to do.

    Args:
        backend: Callable that trashes a single path. Defaults to
            ``send2trash.send2trash``.
    """

    def __init__(self, backend: Callable[[str], None] | None = None) -> None:
        self._backend = backend if backend is not None else send2trash

    def move_to_trash(self, path: Path | str) -> TrashRecord:
        """Move a path to the trash.

        Args:
            path: File or folder to trash. Symlinks are trashed as links.

        Returns:
            TrashRecord identifying what was moved.

        Raises:
            NotFoundError: If the path does not exist.
            TrashUnavailableError: If the platform has no usable trash for
                this path.
        """
        target = Path(path)
        if not target.exists() and not target.is_symlink():
            raise NotFoundError(target, "No such file or folder")

        try:
            self._backend(str(target))
        except TrashPermissionError as e:
            logger.warning("Trash refused %s: %s", target, e)
            raise TrashUnavailableError(target, "No writable trash for this location") from e
        except OSError as e:
            logger.warning("Trash failed for %s: %s", target, e)
            raise TrashUnavailableError(target, f"Trash unavailable ({e})") from e

        logger.debug("Moved %s to trash", target)
        return TrashRecord(original_path=target, trashed_at=datetime.now(tz=UTC))
