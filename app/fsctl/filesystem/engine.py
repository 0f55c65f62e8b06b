"""Filesystem operation engine.

Executes create, delete, copy, move and rename requests against the real
filesystem. Every request is validated before any filesystem call, the
destination's availability is confirmed before the source is touched,
and written files are flushed and fsynced before success is reported.

Bulk operations (folder copy, recursive delete, folder merge) collect
per-entry failures into a partial outcome instead of stopping at the first
error. Nothing is rolled back and nothing is retried.
"""

import errno
import logging
import os
import shutil
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import cast

from fsctl.filesystem.conflicts import ConflictResolver, check_decision, resolve
from fsctl.filesystem.errors import (
    AlreadyExistsError,
    DirectoryNotEmptyError,
    FsError,
    InvalidPathError,
    NotFoundError,
    OperationCancelledError,
    UnsupportedOperationError,
    WrongTypeError,
    from_os_error,
)
from fsctl.filesystem.models import (
    ConflictAction,
    EntryFailure,
    EntryKind,
    FileSystemEntry,
    OperationKind,
    OperationLifecycle,
    OperationOutcome,
    OperationRequest,
    OperationState,
    TrashRecord,
)
from fsctl.filesystem.permissions import PermissionAdapter, get_permission_adapter
from fsctl.filesystem.trash import TrashAdapter
from fsctl.filesystem.validator import validate_name, validate_path
from fsctl.filesystem.walker import DirectoryWalker, summarize

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1024 * 1024
DEFAULT_PROGRESS_THRESHOLD = 8 * 1024 * 1024

# Called with (source file, bytes copied so far, total bytes) after each chunk.
ProgressCallback = Callable[[Path, int, int], None]


@dataclass(slots=True)
class _Tally:
    """Mutable counters for a bulk operation in progress."""

    files: int = 0
    directories: int = 0
    size_bytes: int = 0
    skipped: int = 0
    failures: list[EntryFailure] = field(default_factory=list)
    copied: list[Path] = field(default_factory=list)

    def fail(self, path: Path, error: FsError) -> None:
        logger.warning("Failed on %s: %s", path, error.message)
        self.failures.append(EntryFailure(path=path, kind=error.kind, message=error.message))

    def outcome(
        self,
        request: OperationRequest,
        destination: Path | None,
        *,
        trash_records: tuple[TrashRecord, ...] = (),
        state: OperationState = OperationState.COMPLETED,
    ) -> OperationOutcome:
        return OperationOutcome(
            kind=request.kind,
            source=request.source,
            destination=destination,
            files=self.files,
            directories=self.directories,
            size_bytes=self.size_bytes,
            skipped=self.skipped,
            failures=tuple(self.failures),
            trash_records=trash_records,
            state=state,
        )


def _probe(path: Path) -> FileSystemEntry | None:
    """Fresh entry for a path, or None if it (or an ancestor) is missing."""
    try:
        return FileSystemEntry.from_path(path)
    except (FileNotFoundError, NotADirectoryError):
        return None
    except OSError as e:
        raise from_os_error(path, e) from e


def _is_within(child: Path, parent: Path) -> bool:
    """Check if child is parent itself or lies below it."""
    resolved_parent = parent.resolve()
    resolved_child = child.resolve()
    return resolved_child == resolved_parent or resolved_parent in resolved_child.parents


def _same_entry(a: Path, b: Path) -> bool:
    try:
        return os.path.samefile(a, b)
    except OSError:
        return False


class OperationEngine:
    """Executes operation requests against the filesystem.

    The engine keeps no state between requests and never prompts. Human
    decisions arrive as data: the top-level conflict decision on the
    request, and per-child decisions through a resolver callback.

    Args:
        trash: Trash adapter for deletions with ``trash=True``.
        permissions: Permission adapter; defaults to the platform adapter.
        chunk_size: Read/write chunk size for file copies.
        progress_threshold: Minimum file size that triggers progress reports.
    """

    def __init__(
        self,
        *,
        trash: TrashAdapter | None = None,
        permissions: PermissionAdapter | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        progress_threshold: int = DEFAULT_PROGRESS_THRESHOLD,
    ) -> None:
        if chunk_size <= 0:
            msg = f"chunk_size must be positive, got {chunk_size}"
            raise ValueError(msg)
        self._trash = trash if trash is not None else TrashAdapter()
        self._permissions = permissions if permissions is not None else get_permission_adapter()
        self._chunk_size = chunk_size
        self._progress_threshold = progress_threshold

    # =========================================================================
    # Entry points
    # =========================================================================

    def execute(
        self,
        request: OperationRequest,
        *,
        resolver: ConflictResolver | None = None,
        progress: ProgressCallback | None = None,
    ) -> OperationOutcome:
        """Execute any request by dispatching on its kind.

        Args:
            request: Fully resolved request.
            resolver: Per-child conflict resolver for folder copies and merges.
            progress: Advisory progress callback for large file copies.

        Returns:
            OperationOutcome of the completed request.

        Raises:
            FsError: If the request fails validation, a precondition, or
                an unrecoverable I/O error.
        """
        if request.kind == OperationKind.CREATE:
            return self.create(request)
        if request.kind == OperationKind.DELETE:
            return self.delete(request)
        if request.kind == OperationKind.COPY:
            return self.copy(request, resolver=resolver, progress=progress)
        if request.kind == OperationKind.MOVE:
            return self.move(request, resolver=resolver, progress=progress)
        return self.rename(request, resolver=resolver, progress=progress)

    def create(self, request: OperationRequest) -> OperationOutcome:
        """Create a file or folder."""
        self._expect(request, OperationKind.CREATE)
        return self._run(request, lambda lc: self._create(lc, request))

    def delete(self, request: OperationRequest) -> OperationOutcome:
        """Delete a file or folder, permanently or to the trash."""
        self._expect(request, OperationKind.DELETE)
        return self._run(request, lambda lc: self._delete(lc, request))

    def copy(
        self,
        request: OperationRequest,
        *,
        resolver: ConflictResolver | None = None,
        progress: ProgressCallback | None = None,
    ) -> OperationOutcome:
        """Copy a file or a folder tree."""
        self._expect(request, OperationKind.COPY)
        return self._run(request, lambda lc: self._copy(lc, request, resolver, progress))

    def move(
        self,
        request: OperationRequest,
        *,
        resolver: ConflictResolver | None = None,
        progress: ProgressCallback | None = None,
    ) -> OperationOutcome:
        """Move a file or folder, falling back to copy-then-delete across volumes."""
        self._expect(request, OperationKind.MOVE)
        return self._run(request, lambda lc: self._move(lc, request, resolver, progress))

    def rename(
        self,
        request: OperationRequest,
        *,
        resolver: ConflictResolver | None = None,
        progress: ProgressCallback | None = None,
    ) -> OperationOutcome:
        """Rename an entry within its parent folder."""
        self._expect(request, OperationKind.RENAME)
        return self._run(request, lambda lc: self._move(lc, request, resolver, progress))

    # =========================================================================
    # Lifecycle and shared steps
    # =========================================================================

    @staticmethod
    def _expect(request: OperationRequest, kind: OperationKind) -> None:
        if request.kind != kind:
            msg = f"Expected a {kind.value} request, got {request.kind.value}"
            raise ValueError(msg)

    def _run(
        self,
        request: OperationRequest,
        body: Callable[[OperationLifecycle], OperationOutcome],
    ) -> OperationOutcome:
        lifecycle = OperationLifecycle(request.kind)
        try:
            outcome = body(lifecycle)
        except FsError:
            lifecycle.fail()
            raise
        except OSError as e:
            lifecycle.fail()
            raise from_os_error(request.source, e) from e

        lifecycle.advance(OperationState.COMPLETED)
        if outcome.failures:
            logger.warning(
                "%s of %s finished with %d failure(s)",
                request.kind.value,
                request.source,
                len(outcome.failures),
            )
        return outcome

    def _validate(self, lifecycle: OperationLifecycle, request: OperationRequest) -> None:
        """Run all pure checks before the first filesystem call."""
        lifecycle.advance(OperationState.VALIDATING)

        validate_path(request.source)
        if request.destination is not None:
            if request.kind == OperationKind.RENAME:
                validate_name(str(request.destination))
            else:
                validate_path(request.destination)
        if request.decision is not None:
            check_decision(request.decision)
        if request.mode is not None and not 0 <= request.mode <= 0o7777:
            raise InvalidPathError(request.source, f"Invalid permission mode {oct(request.mode)}")
        if request.mode is not None and not self._permissions.supported:
            raise UnsupportedOperationError(
                request.source, "Permission modes are not supported on this platform"
            )

    @staticmethod
    def _require_parent(path: Path) -> None:
        parent = path.parent
        entry = _probe(parent)
        if entry is None:
            raise NotFoundError(parent, "Parent folder does not exist")
        if not entry.is_dir:
            raise WrongTypeError(parent, "Parent is not a folder")

    def _resolve_destination(
        self,
        lifecycle: OperationLifecycle,
        request: OperationRequest,
        target: Path,
    ) -> tuple[Path, FileSystemEntry | None, ConflictAction | None]:
        """Apply the request's top-level decision to an existing destination.

        Returns:
            Tuple of (final destination, entry at the final destination or
            None, applied action or None when there was no conflict).

        Raises:
            AlreadyExistsError: If the destination exists and the request
                carries no decision, or a rename target exists too.
            OperationCancelledError: If the decision is CANCEL.
        """
        existing = _probe(target)
        if existing is None:
            return target, None, None

        lifecycle.advance(OperationState.CONFLICT_CHECK)
        decision = request.decision
        if decision is None:
            raise AlreadyExistsError(target, "Destination already exists")
        lifecycle.advance(OperationState.CONFLICT_RESOLVED)

        if decision.action == ConflictAction.CANCEL:
            raise OperationCancelledError(target)
        if decision.action == ConflictAction.SKIP:
            logger.info("Skipping existing destination %s", target)
            return target, existing, ConflictAction.SKIP
        if decision.action == ConflictAction.RENAME and decision.new_path is not None:
            new_path = decision.new_path
            if _probe(new_path) is not None:
                raise AlreadyExistsError(new_path, "Rename target already exists")
            self._require_parent(new_path)
            return new_path, None, ConflictAction.RENAME
        return target, existing, ConflictAction.OVERWRITE

    @staticmethod
    def _skipped(request: OperationRequest, destination: Path) -> OperationOutcome:
        return OperationOutcome(
            kind=request.kind,
            source=request.source,
            destination=destination,
            skipped=1,
        )

    # =========================================================================
    # Create
    # =========================================================================

    def _create(self, lifecycle: OperationLifecycle, request: OperationRequest) -> OperationOutcome:
        self._validate(lifecycle, request)
        if request.entry_kind == EntryKind.DIRECTORY:
            return self._create_directory(lifecycle, request)
        return self._create_file(lifecycle, request)

    def _create_file(
        self,
        lifecycle: OperationLifecycle,
        request: OperationRequest,
    ) -> OperationOutcome:
        path = request.source
        self._require_parent(path)

        target, existing, action = self._resolve_destination(lifecycle, request, path)
        if action == ConflictAction.SKIP:
            return self._skipped(request, target)
        if existing is not None and not existing.is_file:
            raise WrongTypeError(target, "Only a regular file can be overwritten by a new file")

        content = request.content
        data = content.encode("utf-8") if isinstance(content, str) else (content or b"")

        lifecycle.advance(OperationState.EXECUTING)
        # "xb" refuses to clobber anything that appeared since the check
        open_mode = "wb" if existing is not None else "xb"
        try:
            with open(target, open_mode) as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
        except OSError as e:
            raise from_os_error(target, e) from e

        if request.mode is not None:
            self._permissions.set_mode(target, request.mode)

        logger.debug("Created file %s (%d bytes)", target, len(data))
        return OperationOutcome(
            kind=request.kind,
            source=path,
            destination=target,
            files=1,
            size_bytes=len(data),
        )

    def _create_directory(
        self,
        lifecycle: OperationLifecycle,
        request: OperationRequest,
    ) -> OperationOutcome:
        path = request.source
        existing = _probe(path)

        if not request.parents:
            if existing is not None:
                raise AlreadyExistsError(path, "Path already exists")
            self._require_parent(path)
            missing = [path]
        else:
            if existing is not None and not existing.is_dir:
                raise WrongTypeError(path, "Path exists and is not a folder")
            missing = []
            current = path
            while (entry := _probe(current)) is None:
                missing.append(current)
                if current.parent == current:
                    break
                current = current.parent
            if entry is not None and not entry.is_dir:
                raise WrongTypeError(current, "Ancestor is not a folder")

        lifecycle.advance(OperationState.EXECUTING)
        for directory in reversed(missing):
            try:
                directory.mkdir()
            except OSError as e:
                raise from_os_error(directory, e) from e
            logger.debug("Created folder %s", directory)

        if request.mode is not None and missing:
            self._permissions.set_mode(path, request.mode)

        return OperationOutcome(
            kind=request.kind,
            source=path,
            destination=path,
            directories=len(missing),
        )

    # =========================================================================
    # Delete
    # =========================================================================

    def _delete(self, lifecycle: OperationLifecycle, request: OperationRequest) -> OperationOutcome:
        self._validate(lifecycle, request)
        path = request.source

        entry = _probe(path)
        if entry is None:
            raise NotFoundError(path, "No such file or folder")
        if entry.is_dir:
            return self._delete_directory(lifecycle, request)
        if not entry.is_file:
            raise WrongTypeError(path, "Not a regular file or folder")

        lifecycle.advance(OperationState.EXECUTING)
        tally = _Tally(files=1, size_bytes=entry.size or 0)
        if request.trash:
            record = self._trash.move_to_trash(path)
            return tally.outcome(request, None, trash_records=(record,))

        try:
            path.unlink()
        except OSError as e:
            raise from_os_error(path, e) from e
        logger.debug("Deleted file %s", path)
        return tally.outcome(request, None)

    def _delete_directory(
        self,
        lifecycle: OperationLifecycle,
        request: OperationRequest,
    ) -> OperationOutcome:
        path = request.source
        try:
            with os.scandir(path) as it:
                empty = next(it, None) is None
        except OSError as e:
            raise from_os_error(path, e) from e

        if not empty and not request.recursive:
            raise DirectoryNotEmptyError(path, "Folder is not empty and recursive delete was not confirmed")

        if request.trash:
            tally = _Tally(directories=1)
            if not empty:
                summary = summarize(path)
                tally.files = summary.files + summary.others
                tally.directories += summary.directories
                tally.size_bytes = summary.total_bytes
            lifecycle.advance(OperationState.EXECUTING)
            record = self._trash.move_to_trash(path)
            return tally.outcome(request, None, trash_records=(record,))

        lifecycle.advance(OperationState.EXECUTING)
        tally = _Tally()
        if not empty:
            self._remove_children(path, tally)
        try:
            path.rmdir()
        except OSError as e:
            tally.fail(path, from_os_error(path, e))
        else:
            tally.directories += 1
            logger.debug("Removed folder %s", path)
        return tally.outcome(request, None)

    def _remove_children(self, root: Path, tally: _Tally) -> None:
        """Permanently remove everything below root, children before parents."""
        walker = DirectoryWalker(root)
        for entry in walker.walk(bottom_up=True):
            try:
                if entry.is_dir:
                    os.rmdir(entry.path)
                    tally.directories += 1
                else:
                    os.unlink(entry.path)
                    tally.files += 1
                    tally.size_bytes += entry.size or 0
            except OSError as e:
                tally.fail(entry.path, from_os_error(entry.path, e))
        for failure in walker.failures:
            tally.failures.append(failure)

    # =========================================================================
    # Copy
    # =========================================================================

    def _copy(
        self,
        lifecycle: OperationLifecycle,
        request: OperationRequest,
        resolver: ConflictResolver | None,
        progress: ProgressCallback | None,
    ) -> OperationOutcome:
        self._validate(lifecycle, request)
        source = request.source
        destination = cast(Path, request.destination)

        entry = _probe(source)
        if entry is None:
            raise NotFoundError(source, "No such file or folder")
        if entry.is_dir:
            return self._copy_directory(lifecycle, request, destination, resolver, progress)
        if not entry.is_file:
            raise WrongTypeError(source, "Only regular files and folders can be copied")

        self._require_parent(destination)
        target, existing, action = self._resolve_destination(lifecycle, request, destination)
        if action == ConflictAction.SKIP:
            return self._skipped(request, target)
        if existing is not None:
            if not existing.is_file:
                raise WrongTypeError(target, "Destination is not a regular file")
            if _same_entry(source, target):
                raise InvalidPathError(target, "Source and destination are the same file")

        lifecycle.advance(OperationState.EXECUTING)
        written = self._copy_file_data(source, target, entry.size or 0, progress)
        return _Tally(files=1, size_bytes=written).outcome(request, target)

    def _copy_directory(
        self,
        lifecycle: OperationLifecycle,
        request: OperationRequest,
        destination: Path,
        resolver: ConflictResolver | None,
        progress: ProgressCallback | None,
    ) -> OperationOutcome:
        source = request.source
        if _is_within(destination, source):
            raise InvalidPathError(destination, "Cannot copy a folder into itself")
        self._require_parent(destination)

        target, existing, action = self._resolve_destination(lifecycle, request, destination)
        if action == ConflictAction.SKIP:
            return self._skipped(request, target)
        if existing is not None and not existing.is_dir:
            raise WrongTypeError(target, "Destination is not a folder")
        if action == ConflictAction.RENAME and _is_within(target, source):
            raise InvalidPathError(target, "Cannot copy a folder into itself")

        lifecycle.advance(OperationState.EXECUTING)
        tally = _Tally()
        if existing is None:
            try:
                target.mkdir()
            except OSError as e:
                raise from_os_error(target, e) from e
            tally.directories += 1
        else:
            logger.info("Merging %s into existing folder %s", source, target)

        self._merge_tree(request, source, target, tally, resolver, progress)
        return tally.outcome(request, target)

    def _merge_tree(
        self,
        request: OperationRequest,
        source: Path,
        target: Path,
        tally: _Tally,
        resolver: ConflictResolver | None,
        progress: ProgressCallback | None,
    ) -> None:
        """Copy the contents of source into the existing folder target.

        Folders are created before their files; folders present on both
        sides merge. Colliding files and type mismatches are resolved per
        child. Successfully copied source files are appended to
        ``tally.copied``.

        Raises:
            OperationCancelledError: If a per-child decision is CANCEL. The
                partial outcome is attached; nothing is rolled back.
        """
        walker = DirectoryWalker(source)
        targets: dict[Path, Path] = {source: target}

        for entry in walker.walk():
            parent_target = targets.get(entry.path.parent)
            if parent_target is None:
                # Parent folder was skipped or failed
                continue
            dest = parent_target / entry.name

            if entry.kind == EntryKind.OTHER:
                logger.info("Not copying special entry %s", entry.path)
                tally.skipped += 1
                continue

            try:
                existing = _probe(dest)
                if existing is not None and not (entry.is_dir and existing.is_dir):
                    if resolver is None:
                        raise AlreadyExistsError(dest, "Destination already exists")
                    decision = resolve(resolver, dest, existing)
                    if decision.action == ConflictAction.CANCEL:
                        tally.failures.extend(walker.failures)
                        raise OperationCancelledError(
                            dest,
                            outcome=tally.outcome(request, target, state=OperationState.FAILED),
                        )
                    if decision.action == ConflictAction.SKIP:
                        tally.skipped += 1
                        continue
                    if decision.action == ConflictAction.RENAME and decision.new_path is not None:
                        dest = decision.new_path
                        if _probe(dest) is not None:
                            raise AlreadyExistsError(dest, "Rename target already exists")
                        existing = None
                    elif existing.kind != entry.kind:
                        raise WrongTypeError(
                            dest, f"Cannot overwrite a {existing.kind.value} with a {entry.kind.value}"
                        )

                if entry.is_dir:
                    if existing is None:
                        dest.mkdir()
                        tally.directories += 1
                    targets[entry.path] = dest
                else:
                    written = self._copy_file_data(entry.path, dest, entry.size or 0, progress)
                    tally.files += 1
                    tally.size_bytes += written
                    tally.copied.append(entry.path)
            except OperationCancelledError:
                raise
            except FsError as e:
                tally.fail(entry.path, e)
            except OSError as e:
                tally.fail(entry.path, from_os_error(dest, e))

        tally.failures.extend(walker.failures)

    def _copy_file_data(
        self,
        source: Path,
        target: Path,
        size: int,
        progress: ProgressCallback | None,
    ) -> int:
        """Stream source into a temporary sibling of target, then replace target.

        The temporary file is fsynced and given the source's timestamps
        before the atomic replace, so target is either untouched or
        complete.

        Returns:
            Number of bytes written.

        Raises:
            FsError: If reading, writing or replacing fails.
        """
        tmp = target.with_name(f".fsctl-{uuid.uuid4().hex}.part")
        report = progress if progress is not None and size >= self._progress_threshold else None
        written = 0
        try:
            with open(source, "rb") as src, open(tmp, "xb") as dst:
                while chunk := src.read(self._chunk_size):
                    dst.write(chunk)
                    written += len(chunk)
                    if report is not None:
                        self._report(report, source, written, size)
                dst.flush()
                os.fsync(dst.fileno())
            try:
                shutil.copystat(source, tmp)
            except OSError as e:
                logger.debug("Could not preserve metadata of %s: %s", source, e)
            os.replace(tmp, target)
        except OSError as e:
            self._discard(tmp)
            raise from_os_error(target, e) from e
        except BaseException:
            self._discard(tmp)
            raise

        logger.debug("Copied %s -> %s (%d bytes)", source, target, written)
        return written

    @staticmethod
    def _report(callback: ProgressCallback, path: Path, done: int, total: int) -> None:
        try:
            callback(path, done, total)
        except Exception as e:  # noqa: BLE001
            logger.warning("Progress callback failed for %s: %s", path, e)

    @staticmethod
    def _discard(path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove temporary file %s: %s", path, e)

    # =========================================================================
    # Move and rename
    # =========================================================================

    def _move(
        self,
        lifecycle: OperationLifecycle,
        request: OperationRequest,
        resolver: ConflictResolver | None,
        progress: ProgressCallback | None,
    ) -> OperationOutcome:
        self._validate(lifecycle, request)
        source = request.source
        requested = cast(Path, request.destination)
        if request.kind == OperationKind.RENAME:
            destination = source.parent / requested.name
        else:
            destination = requested

        entry = _probe(source)
        if entry is None:
            raise NotFoundError(source, "No such file or folder")
        if entry.kind == EntryKind.OTHER:
            raise WrongTypeError(source, "Only regular files and folders can be moved")
        if entry.is_dir and _is_within(destination, source):
            raise InvalidPathError(destination, "Cannot move a folder into itself")
        self._require_parent(destination)

        if _same_entry(source, destination) and source.name != destination.name:
            # Case-only rename on a case-insensitive filesystem
            target, existing, action = destination, None, None
        else:
            target, existing, action = self._resolve_destination(lifecycle, request, destination)
        if action == ConflictAction.SKIP:
            return self._skipped(request, target)
        if action == ConflictAction.RENAME and entry.is_dir and _is_within(target, source):
            raise InvalidPathError(target, "Cannot move a folder into itself")

        if existing is not None:
            if existing.kind != entry.kind:
                raise WrongTypeError(
                    target, f"Cannot replace a {existing.kind.value} with a {entry.kind.value}"
                )
            if _same_entry(source, target):
                raise InvalidPathError(target, "Source and destination are the same")
            if entry.is_dir:
                lifecycle.advance(OperationState.EXECUTING)
                tally = _Tally()
                self._merge_tree(request, source, target, tally, resolver, progress)
                self._prune_source(source, tally)
                return tally.outcome(request, target)

        if entry.is_dir:
            summary = summarize(source)
            tally = _Tally(
                files=summary.files + summary.others,
                directories=summary.directories + 1,
                size_bytes=summary.total_bytes,
            )
        else:
            tally = _Tally(files=1, size_bytes=entry.size or 0)

        lifecycle.advance(OperationState.EXECUTING)
        try:
            os.replace(source, target)
        except OSError as e:
            if e.errno != errno.EXDEV:
                raise from_os_error(source, e) from e
            logger.info("%s and %s are on different volumes, copying", source, target)
            return self._copy_then_delete(request, entry, target, resolver, progress)

        logger.debug("Moved %s -> %s", source, target)
        return tally.outcome(request, target)

    def _copy_then_delete(
        self,
        request: OperationRequest,
        entry: FileSystemEntry,
        target: Path,
        resolver: ConflictResolver | None,
        progress: ProgressCallback | None,
    ) -> OperationOutcome:
        """Cross-volume move: the source goes only after its copy completed."""
        source = request.source
        tally = _Tally()

        if entry.is_file:
            tally.size_bytes = self._copy_file_data(source, target, entry.size or 0, progress)
            tally.files = 1
            try:
                source.unlink()
            except OSError as e:
                tally.fail(source, from_os_error(source, e))
            return tally.outcome(request, target)

        if _probe(target) is None:
            try:
                target.mkdir()
            except OSError as e:
                raise from_os_error(target, e) from e
            tally.directories += 1
        self._merge_tree(request, source, target, tally, resolver, progress)
        self._prune_source(source, tally)
        return tally.outcome(request, target)

    def _prune_source(self, source: Path, tally: _Tally) -> None:
        """Remove moved files from source, then any folders left empty.

        Files that were skipped or failed stay where they are, together
        with the folders that still contain them.
        """
        for path in tally.copied:
            try:
                path.unlink()
            except OSError as e:
                tally.fail(path, from_os_error(path, e))

        walker = DirectoryWalker(source)
        for entry in walker.walk(bottom_up=True):
            if entry.is_dir:
                self._remove_if_empty(entry.path, tally)
        self._remove_if_empty(source, tally)

    @staticmethod
    def _remove_if_empty(path: Path, tally: _Tally) -> None:
        try:
            path.rmdir()
        except OSError as e:
            if e.errno in (errno.ENOTEMPTY, errno.EEXIST):
                logger.debug("Keeping non-empty folder %s", path)
                return
            tally.fail(path, from_os_error(path, e))
