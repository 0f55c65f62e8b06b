"""Deterministic recursive directory walker.

Enumerates a directory tree in a reproducible order (folders first, then
everything else, each group sorted by name) for listings, size
aggregation, folder copies and recursive deletes. Symlinks and other
special entries are reported but never followed.
"""

import fnmatch
import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from fsctl.filesystem.errors import WrongTypeError, from_os_error
from fsctl.filesystem.models import EntryFailure, EntryKind, FileSystemEntry

logger = logging.getLogger(__name__)


def _sort_key(entry: FileSystemEntry) -> tuple[int, str]:
    return (0 if entry.kind == EntryKind.DIRECTORY else 1, entry.name)


class DirectoryWalker:
    """Walks the descendants of a root folder.

    Failures on individual children are collected in :attr:`failures` and
    the walk continues with their siblings. Only an unreadable root is
    fatal.

    Args:
        root: Folder to walk.
        max_depth: Deepest level to report (1 = immediate children).
            None walks the whole tree.
    """

    def __init__(self, root: Path | str, *, max_depth: int | None = None) -> None:
        if max_depth is not None and max_depth < 1:
            msg = f"max_depth must be at least 1, got {max_depth}"
            raise ValueError(msg)
        self._root = Path(root)
        self._max_depth = max_depth
        self.failures: list[EntryFailure] = []

    @property
    def root(self) -> Path:
        """Root folder of the walk."""
        return self._root

    def walk(self, *, bottom_up: bool = False) -> Iterator[FileSystemEntry]:
        """Enumerate all descendants of the root.

        The root is checked immediately; the returned iterator is lazy.
        Calling ``walk`` again starts over from the current filesystem
        state and clears previously collected failures.

        Args:
            bottom_up: Yield a folder's contents before the folder itself.

        Returns:
            Iterator of entries (the root itself is not included).

        Raises:
            NotFoundError: If the root does not exist.
            WrongTypeError: If the root is not a folder.
            PermissionDeniedError: If the root cannot be read.
        """
        self.failures = []
        try:
            root_entry = FileSystemEntry.from_path(self._root)
        except OSError as e:
            raise from_os_error(self._root, e) from e

        if root_entry.kind != EntryKind.DIRECTORY:
            raise WrongTypeError(self._root, "Not a folder")

        try:
            children = self._list(self._root, depth=1)
        except OSError as e:
            raise from_os_error(self._root, e) from e

        return self._walk_children(children, depth=1, bottom_up=bottom_up)

    def _walk_children(
        self,
        children: list[FileSystemEntry],
        depth: int,
        bottom_up: bool,
    ) -> Iterator[FileSystemEntry]:
        for child in children:
            descend = child.kind == EntryKind.DIRECTORY and (
                self._max_depth is None or depth < self._max_depth
            )

            if not bottom_up:
                yield child

            if descend:
                try:
                    grandchildren = self._list(child.path, depth=depth + 1)
                except OSError as e:
                    self._record(child.path, e)
                else:
                    yield from self._walk_children(grandchildren, depth + 1, bottom_up)

            if bottom_up:
                yield child

    def _list(self, directory: Path, depth: int) -> list[FileSystemEntry]:
        """List one folder level, sorted; unreadable children are recorded."""
        entries: list[FileSystemEntry] = []
        with os.scandir(directory) as it:
            for dirent in it:
                path = Path(dirent.path)
                try:
                    st = dirent.stat(follow_symlinks=False)
                except OSError as e:
                    self._record(path, e)
                    continue
                entries.append(FileSystemEntry.from_stat(path, st, depth))
        entries.sort(key=_sort_key)
        return entries

    def _record(self, path: Path, exc: OSError) -> None:
        error = from_os_error(path, exc)
        logger.warning("Cannot read %s: %s", path, error.message)
        self.failures.append(EntryFailure(path=path, kind=error.kind, message=error.message))


@dataclass(slots=True)
class DirectorySummary:
    """Aggregate counts for a folder.

    Attributes:
        files: Regular files found.
        directories: Sub-folders found.
        others: Symlinks and special entries found.
        total_bytes: Sum of regular file sizes.
        failures: Entries that could not be read.
    """

    files: int = 0
    directories: int = 0
    others: int = 0
    total_bytes: int = 0
    failures: list[EntryFailure] = field(default_factory=list)

    @property
    def entries(self) -> int:
        """Total number of entries counted."""
        return self.files + self.directories + self.others


def summarize(root: Path | str, *, max_depth: int | None = None) -> DirectorySummary:
    """Count the entries below a folder and add up file sizes.

    Args:
        root: Folder to summarize.
        max_depth: Depth limit (1 for immediate children only).

    Returns:
        DirectorySummary of the walked entries.

    Raises:
        FsError: If the root cannot be walked.
    """
    walker = DirectoryWalker(root, max_depth=max_depth)
    summary = DirectorySummary()
    for entry in walker.walk():
        if entry.kind == EntryKind.FILE:
            summary.files += 1
            summary.total_bytes += entry.size or 0
        elif entry.kind == EntryKind.DIRECTORY:
            summary.directories += 1
        else:
            summary.others += 1
    summary.failures = list(walker.failures)
    return summary


def aggregate_size(path: Path | str) -> int:
    """Total size in bytes of a file, or of all files below a folder.

    Symlinks are not followed and contribute nothing.

    Args:
        path: File or folder to measure.

    Returns:
        Size in bytes.

    Raises:
        NotFoundError: If the path does not exist.
        FsError: If a folder root cannot be walked.
    """
    target = Path(path)
    try:
        entry = FileSystemEntry.from_path(target)
    except OSError as e:
        raise from_os_error(target, e) from e

    if entry.kind == EntryKind.FILE:
        return entry.size or 0
    if entry.kind == EntryKind.DIRECTORY:
        return summarize(target).total_bytes
    return 0


def iter_matches(
    root: Path | str,
    pattern: str,
    *,
    kind: EntryKind | None = None,
    max_depth: int | None = None,
) -> Iterator[FileSystemEntry]:
    """Yield entries below root whose name matches a glob pattern.

    Matching is case-insensitive. A pattern without wildcards matches any
    name containing it.

    Args:
        root: Folder to search.
        pattern: Glob pattern (``*.txt``) or plain substring.
        kind: Only yield entries of this kind.
        max_depth: Depth limit for the search.

    Yields:
        Matching entries in walk order.

    Raises:
        FsError: If the root cannot be walked.
    """
    needle = pattern.lower()
    if not any(c in needle for c in "*?["):
        needle = f"*{needle}*"

    walker = DirectoryWalker(root, max_depth=max_depth)
    for entry in walker.walk():
        if kind is not None and entry.kind != kind:
            continue
        if fnmatch.fnmatchcase(entry.name.lower(), needle):
            yield entry
