"""Destination conflict resolution.

A conflict resolver is the single synchronous callback point through
which the engine asks for a decision while it runs, used for children
that collide during a folder copy. Top-level decisions are resolved by
the caller before the engine starts and travel on the request.
"""

import logging
from pathlib import Path
from typing import Protocol

from fsctl.filesystem.models import ConflictAction, ConflictDecision, FileSystemEntry
from fsctl.filesystem.validator import validate_name, validate_path

logger = logging.getLogger(__name__)


class ConflictResolver(Protocol):
    """Callable that decides what to do with an existing destination."""

    def __call__(self, destination: Path, existing: FileSystemEntry) -> ConflictDecision:
        """Decide how to handle a destination that already exists.

        Args:
            destination: Path the engine wanted to write.
            existing: Fresh snapshot of the entry already at that path.

        Returns:
            The decision for this single conflict.
        """
        ...


class StaticResolver:
    """Resolver that answers every conflict with the same decision.

    Example:
        >>> resolver = StaticResolver(ConflictDecision.skip())
    """

    def __init__(self, decision: ConflictDecision) -> None:
        if decision.action == ConflictAction.RENAME:
            msg = "A static resolver cannot rename: every conflict needs its own name"
            raise ValueError(msg)
        self._decision = decision

    @property
    def decision(self) -> ConflictDecision:
        """The decision returned for every conflict."""
        return self._decision

    def __call__(self, destination: Path, existing: FileSystemEntry) -> ConflictDecision:
        return self._decision


def check_decision(decision: ConflictDecision) -> ConflictDecision:
    """Validate a decision before the engine acts on it.

    A RENAME target must be a valid path whose final component is a valid
    name.

    Args:
        decision: Decision to check.

    Returns:
        The same decision.

    Raises:
        InvalidPathError: If the rename target is not a valid path.
        InvalidNameError: If the rename target's name is not valid.
    """
    if decision.action == ConflictAction.RENAME and decision.new_path is not None:
        validate_path(decision.new_path)
        validate_name(decision.new_path.name)
    return decision


def resolve(
    resolver: ConflictResolver,
    destination: Path,
    existing: FileSystemEntry,
) -> ConflictDecision:
    """Ask a resolver about one conflict and validate its answer.

    Args:
        resolver: Resolver to consult.
        destination: Conflicting destination path.
        existing: Entry currently at the destination.

    Returns:
        The validated decision.

    Raises:
        InvalidPathError: If a rename target is not a valid path.
        InvalidNameError: If a rename target's name is not valid.
    """
    decision = resolver(destination, existing)
    logger.debug("Conflict at %s resolved as %s", destination, decision.action.value)
    return check_decision(decision)
