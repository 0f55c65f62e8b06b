"""Filesystem operation engine.

This module provides path validation, conflict resolution, directory
walking, the trash and permission adapters, and the engine that executes
create, delete, copy, move and rename requests.
"""

from fsctl.filesystem.conflicts import ConflictResolver, StaticResolver
from fsctl.filesystem.engine import OperationEngine, ProgressCallback
from fsctl.filesystem.errors import ErrorKind, FsError
from fsctl.filesystem.models import (
    ConflictAction,
    ConflictDecision,
    EntryKind,
    FileSystemEntry,
    OperationKind,
    OperationOutcome,
    OperationRequest,
)
from fsctl.filesystem.permissions import get_permission_adapter
from fsctl.filesystem.trash import TrashAdapter
from fsctl.filesystem.walker import DirectoryWalker

__all__ = [
    "ConflictAction",
    "ConflictDecision",
    "ConflictResolver",
    "DirectoryWalker",
    "EntryKind",
    "ErrorKind",
    "FileSystemEntry",
    "FsError",
    "OperationEngine",
    "OperationKind",
    "OperationOutcome",
    "OperationRequest",
    "ProgressCallback",
    "StaticResolver",
    "TrashAdapter",
    "get_permission_adapter",
]
