"""Filesystem domain models for the operation engine.

This module defines the data structures exchanged between the prompt
layer, the operation engine and the display layer: filesystem entries,
operation requests, conflict decisions and operation outcomes.
"""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path

from fsctl.filesystem.errors import ErrorKind

logger = logging.getLogger(__name__)


class EntryKind(str, Enum):
    """Kind of filesystem entry.

    Attributes:
        FILE: Regular file.
        DIRECTORY: Regular directory (never a symlink to one).
        OTHER: Symlinks, sockets, devices and anything else; never followed.
    """

    FILE = "file"
    DIRECTORY = "directory"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class FileSystemEntry:
    """Snapshot of a single filesystem entry.

    Entries are built from ``lstat`` so symlinks are reported as
    :attr:`EntryKind.OTHER` and never followed. They are not cached: build
    a fresh entry whenever current metadata is needed.

    Attributes:
        path: Path of the entry as given or as discovered by a walk.
        kind: Entry kind.
        size: Size in bytes for regular files, None otherwise.
        modified: Last modification time (UTC).
        mode: Permission bits where the platform has a POSIX model.
        depth: Distance from the walk root (0 when queried directly).
    """

    path: Path
    kind: EntryKind
    size: int | None
    modified: datetime
    mode: int | None = None
    depth: int = 0

    @classmethod
    def from_stat(cls, path: Path, st: os.stat_result, depth: int = 0) -> FileSystemEntry:
        """Build an entry from an existing ``lstat`` result."""
        if stat.S_ISDIR(st.st_mode):
            kind = EntryKind.DIRECTORY
        elif stat.S_ISREG(st.st_mode):
            kind = EntryKind.FILE
        else:
            kind = EntryKind.OTHER

        return cls(
            path=path,
            kind=kind,
            size=st.st_size if kind == EntryKind.FILE else None,
            modified=datetime.fromtimestamp(st.st_mtime, tz=UTC),
            mode=stat.S_IMODE(st.st_mode) if os.name == "posix" else None,
            depth=depth,
        )

    @classmethod
    def from_path(cls, path: Path | str, depth: int = 0) -> FileSystemEntry:
        """Query the filesystem for an entry.

        Args:
            path: Path to query.
            depth: Depth to record on the entry.

        Returns:
            FileSystemEntry describing the path.

        Raises:
            OSError: If the path cannot be stat'ed.
        """
        target = Path(path)
        return cls.from_stat(target, target.lstat(), depth)

    @classmethod
    def probe(cls, path: Path | str) -> FileSystemEntry | None:
        """Query an entry, returning None when the path does not exist."""
        try:
            return cls.from_path(path)
        except FileNotFoundError:
            return None

    @property
    def name(self) -> str:
        """Final path component."""
        return self.path.name

    @property
    def is_file(self) -> bool:
        """Check if this is a regular file."""
        return self.kind == EntryKind.FILE

    @property
    def is_dir(self) -> bool:
        """Check if this is a directory."""
        return self.kind == EntryKind.DIRECTORY


class OperationKind(str, Enum):
    """Kind of user intent handled by the engine."""

    CREATE = "create"
    DELETE = "delete"
    COPY = "copy"
    MOVE = "move"
    RENAME = "rename"


class ConflictAction(str, Enum):
    """What to do when a destination already exists.

    Attributes:
        OVERWRITE: Replace the destination (folders are merged, never wiped).
        RENAME: Use a different, freshly validated destination path.
        SKIP: Leave the destination untouched and continue.
        CANCEL: Abort the enclosing operation.
    """

    OVERWRITE = "overwrite"
    RENAME = "rename"
    SKIP = "skip"
    CANCEL = "cancel"


@dataclass(frozen=True, slots=True)
class ConflictDecision:
    """Decision for a single destination conflict.

    Attributes:
        action: Chosen conflict action.
        new_path: Replacement destination, required for RENAME only.
    """

    action: ConflictAction
    new_path: Path | None = None

    def __post_init__(self) -> None:
        """Validate that new_path is present exactly for RENAME."""
        if self.action == ConflictAction.RENAME and self.new_path is None:
            msg = "Rename decision requires a new path"
            raise ValueError(msg)
        if self.action != ConflictAction.RENAME and self.new_path is not None:
            msg = f"{self.action.value} decision cannot carry a new path"
            raise ValueError(msg)

    @classmethod
    def overwrite(cls) -> ConflictDecision:
        return cls(ConflictAction.OVERWRITE)

    @classmethod
    def skip(cls) -> ConflictDecision:
        return cls(ConflictAction.SKIP)

    @classmethod
    def cancel(cls) -> ConflictDecision:
        return cls(ConflictAction.CANCEL)

    @classmethod
    def rename_to(cls, new_path: Path | str) -> ConflictDecision:
        return cls(ConflictAction.RENAME, Path(new_path))


@dataclass(frozen=True, slots=True)
class OperationRequest:
    """Fully resolved description of one user intent.

    Requests are built by the prompt layer from already validated and
    confirmed values. The engine never prompts.

    Attributes:
        kind: Operation kind.
        source: Path the operation acts on (the new path for CREATE).
        destination: Target path for COPY and MOVE, the new bare name for RENAME.
        content: Initial content for a created file.
        mode: Permission bits to apply to a created entry.
        trash: Route deletions to the platform trash.
        entry_kind: What CREATE makes (FILE or DIRECTORY).
        recursive: Recursive delete of a non-empty folder was confirmed.
        parents: Create missing ancestors when creating a folder.
        decision: Decision for a destination that already exists.
    """

    kind: OperationKind
    source: Path
    destination: Path | None = None
    content: str | bytes | None = None
    mode: int | None = None
    trash: bool = False
    entry_kind: EntryKind | None = None
    recursive: bool = False
    parents: bool = False
    decision: ConflictDecision | None = None

    def __post_init__(self) -> None:
        """Validate field combinations after initialization."""
        if self.kind in (OperationKind.COPY, OperationKind.MOVE, OperationKind.RENAME):
            if self.destination is None:
                msg = f"{self.kind.value} requires a destination"
                raise ValueError(msg)
        if self.kind == OperationKind.CREATE:
            if self.entry_kind not in (EntryKind.FILE, EntryKind.DIRECTORY):
                msg = "create requires entry_kind FILE or DIRECTORY"
                raise ValueError(msg)
        if self.content is not None and not (
            self.kind == OperationKind.CREATE and self.entry_kind == EntryKind.FILE
        ):
            msg = "content is only valid when creating a file"
            raise ValueError(msg)

    @classmethod
    def create_file(
        cls,
        path: Path | str,
        content: str | bytes | None = None,
        *,
        mode: int | None = None,
        decision: ConflictDecision | None = None,
    ) -> OperationRequest:
        return cls(
            kind=OperationKind.CREATE,
            source=Path(path),
            content=content,
            mode=mode,
            entry_kind=EntryKind.FILE,
            decision=decision,
        )

    @classmethod
    def create_directory(
        cls,
        path: Path | str,
        *,
        parents: bool = False,
        mode: int | None = None,
    ) -> OperationRequest:
        return cls(
            kind=OperationKind.CREATE,
            source=Path(path),
            mode=mode,
            entry_kind=EntryKind.DIRECTORY,
            parents=parents,
        )

    @classmethod
    def delete(
        cls,
        path: Path | str,
        *,
        recursive: bool = False,
        trash: bool = False,
    ) -> OperationRequest:
        return cls(kind=OperationKind.DELETE, source=Path(path), recursive=recursive, trash=trash)

    @classmethod
    def copy(
        cls,
        source: Path | str,
        destination: Path | str,
        *,
        decision: ConflictDecision | None = None,
    ) -> OperationRequest:
        return cls(
            kind=OperationKind.COPY,
            source=Path(source),
            destination=Path(destination),
            decision=decision,
        )

    @classmethod
    def move(
        cls,
        source: Path | str,
        destination: Path | str,
        *,
        decision: ConflictDecision | None = None,
    ) -> OperationRequest:
        return cls(
            kind=OperationKind.MOVE,
            source=Path(source),
            destination=Path(destination),
            decision=decision,
        )

    @classmethod
    def rename(
        cls,
        source: Path | str,
        new_name: str,
        *,
        decision: ConflictDecision | None = None,
    ) -> OperationRequest:
        return cls(
            kind=OperationKind.RENAME,
            source=Path(source),
            destination=Path(new_name),
            decision=decision,
        )


@dataclass(frozen=True, slots=True)
class EntryFailure:
    """Failure of a single entry inside a bulk operation.

    Attributes:
        path: Entry that failed.
        kind: Error classification.
        message: Human-readable description.
    """

    path: Path
    kind: ErrorKind
    message: str


@dataclass(frozen=True, slots=True)
class TrashRecord:
    """Handle for an entry moved to the platform trash.

    The trash facility owns the item afterwards; this record only
    identifies what was moved and when.
    """

    original_path: Path
    trashed_at: datetime


class OperationState(str, Enum):
    """Lifecycle state of a single operation request."""

    REQUESTED = "requested"
    VALIDATING = "validating"
    CONFLICT_CHECK = "conflict_check"
    CONFLICT_RESOLVED = "conflict_resolved"
    EXECUTING = "executing"
    COMPLETED = "completed"
    FAILED = "failed"


_TRANSITIONS: dict[OperationState, frozenset[OperationState]] = {
    OperationState.REQUESTED: frozenset({OperationState.VALIDATING, OperationState.FAILED}),
    OperationState.VALIDATING: frozenset(
        {OperationState.CONFLICT_CHECK, OperationState.EXECUTING, OperationState.FAILED}
    ),
    OperationState.CONFLICT_CHECK: frozenset(
        {OperationState.CONFLICT_RESOLVED, OperationState.FAILED}
    ),
    OperationState.CONFLICT_RESOLVED: frozenset(
        {OperationState.EXECUTING, OperationState.COMPLETED, OperationState.FAILED}
    ),
    OperationState.EXECUTING: frozenset({OperationState.COMPLETED, OperationState.FAILED}),
    OperationState.COMPLETED: frozenset(),
    OperationState.FAILED: frozenset(),
}


class OperationLifecycle:
    """Tracks one request through its state machine.

    ``Requested -> Validating -> (ConflictCheck -> ConflictResolved)? ->
    Executing -> Completed | Failed``. A skipped conflict may complete
    directly from ConflictResolved without executing.
    """

    def __init__(self, kind: OperationKind) -> None:
        self._kind = kind
        self._state = OperationState.REQUESTED
        self.history: list[OperationState] = [self._state]

    @property
    def state(self) -> OperationState:
        """Current state."""
        return self._state

    @property
    def finished(self) -> bool:
        """Check if the lifecycle reached a terminal state."""
        return self._state in (OperationState.COMPLETED, OperationState.FAILED)

    def advance(self, state: OperationState) -> None:
        """Move to the next state.

        Args:
            state: Target state.

        Raises:
            RuntimeError: If the transition is not allowed.
        """
        if state not in _TRANSITIONS[self._state]:
            msg = f"Illegal {self._kind.value} transition: {self._state.value} -> {state.value}"
            raise RuntimeError(msg)
        logger.debug("%s: %s -> %s", self._kind.value, self._state.value, state.value)
        self._state = state
        self.history.append(state)

    def fail(self) -> None:
        """Mark the operation failed unless it already finished."""
        if not self.finished:
            self.advance(OperationState.FAILED)


@dataclass(frozen=True, slots=True)
class OperationOutcome:
    """Result of executing an operation request.

    Attributes:
        kind: Operation kind.
        source: Source path of the request.
        destination: Final destination path, if the operation had one.
        files: Non-directory entries created, copied, moved or removed.
        directories: Directories created or removed.
        size_bytes: Bytes written (create/copy/move) or freed (delete).
        skipped: Entries left untouched by a Skip decision or unsupported kind.
        failures: Per-entry failures of a bulk operation.
        trash_records: Handles of entries moved to the trash.
        state: Terminal lifecycle state.
    """

    kind: OperationKind
    source: Path
    destination: Path | None = None
    files: int = 0
    directories: int = 0
    size_bytes: int = 0
    skipped: int = 0
    failures: tuple[EntryFailure, ...] = field(default_factory=tuple)
    trash_records: tuple[TrashRecord, ...] = field(default_factory=tuple)
    state: OperationState = OperationState.COMPLETED

    @property
    def success(self) -> bool:
        """Check if no entry failed."""
        return not self.failures

    @property
    def touched(self) -> int:
        """Number of entries changed on disk."""
        return self.files + self.directories

    @property
    def partial(self) -> bool:
        """Check if some entries failed while others were processed."""
        return bool(self.failures) and self.touched > 0
