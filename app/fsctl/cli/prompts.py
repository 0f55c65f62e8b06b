"""Interactive prompt layer.

Turns user answers into validated names, paths and conflict decisions.
Invalid input is reported and asked again; nothing here touches the
filesystem except to check whether a proposed new name is free.
"""

from enum import Enum
from pathlib import Path

import typer

from fsctl.filesystem.conflicts import StaticResolver
from fsctl.filesystem.errors import FsError
from fsctl.filesystem.models import (
    ConflictAction,
    ConflictDecision,
    EntryKind,
    FileSystemEntry,
)
from fsctl.filesystem.validator import compose_filename, validate_extension, validate_name
from fsctl.utils.formatting import console, print_error


class ConflictChoice(str, Enum):
    """Conflict policy selectable on the command line."""

    ASK = "ask"
    OVERWRITE = "overwrite"
    SKIP = "skip"
    CANCEL = "cancel"


_ANSWERS: dict[str, ConflictAction] = {
    "o": ConflictAction.OVERWRITE,
    "overwrite": ConflictAction.OVERWRITE,
    "m": ConflictAction.OVERWRITE,
    "merge": ConflictAction.OVERWRITE,
    "r": ConflictAction.RENAME,
    "rename": ConflictAction.RENAME,
    "s": ConflictAction.SKIP,
    "skip": ConflictAction.SKIP,
    "c": ConflictAction.CANCEL,
    "cancel": ConflictAction.CANCEL,
}


def confirm(message: str, *, assume_yes: bool = False, default: bool = False) -> bool:
    """Ask a yes/no question unless the answer is already given.

    Args:
        message: Question to ask.
        assume_yes: Skip the prompt and answer yes.
        default: Answer used when the user just presses Enter.

    Returns:
        True if the user agreed.
    """
    if assume_yes:
        return True
    return typer.confirm(message, default=default)


def prompt_name(message: str = "Name", default: str | None = None) -> str:
    """Prompt until the user enters a valid file or folder name."""
    while True:
        value: str = typer.prompt(message, default=default)
        try:
            validate_name(value)
        except FsError as e:
            print_error(e.message)
            continue
        return value


def prompt_extension() -> str | None:
    """Prompt for an optional file extension.

    Returns:
        Validated extension without the dot, or None when left blank.
    """
    while True:
        value: str = typer.prompt("Extension (blank for none)", default="", show_default=False)
        value = value.strip().removeprefix(".")
        if not value:
            return None
        try:
            validate_extension(value)
        except FsError as e:
            print_error(e.message)
            continue
        return value


def resolve_filename(name: str | None, extension: str | None, *, ask_extension: bool) -> str:
    """Build a validated file name, asking for whatever is missing.

    Args:
        name: Base name from the command line, or None to prompt.
        extension: Extension from the command line, or None.
        ask_extension: Prompt for an extension when none was given.

    Returns:
        Composed file name.

    Raises:
        FsError: If a name given on the command line is invalid.
    """
    if name is None:
        name = prompt_name("File name")
    if extension is None and ask_extension:
        extension = prompt_extension()
    return compose_filename(name, extension.removeprefix(".") if extension else None)


def prompt_new_path(destination: Path) -> Path:
    """Prompt for a free replacement name next to a conflicting destination.

    Args:
        destination: The path that already exists.

    Returns:
        Sibling path that does not exist yet.
    """
    while True:
        name = prompt_name("New name", default=_suggest_name(destination))
        candidate = destination.parent / name
        if FileSystemEntry.probe(candidate) is not None:
            print_error(f"'{name}' already exists too")
            continue
        return candidate


def _suggest_name(destination: Path) -> str:
    """Propose 'name (1).ext', 'name (2).ext', ... until one is free."""
    stem, suffix = destination.stem, destination.suffix
    if destination.name.startswith(".") and not suffix:
        stem, suffix = destination.name, ""
    for n in range(1, 1000):
        candidate = destination.parent / f"{stem} ({n}){suffix}"
        if FileSystemEntry.probe(candidate) is None:
            return candidate.name
    return f"{stem} (copy){suffix}"


def prompt_conflict(
    destination: Path,
    existing: FileSystemEntry,
    *,
    merge: bool = False,
    allow_all: bool = False,
) -> tuple[ConflictDecision, bool]:
    """Ask what to do with an existing destination.

    Args:
        destination: Conflicting destination path.
        existing: Entry currently at the destination.
        merge: Offer "merge" instead of "overwrite" (folder into folder).
        allow_all: Accept an upper-case answer meaning "for all remaining
            conflicts".

    Returns:
        Tuple of (decision, apply to all remaining conflicts).
    """
    kind = "Folder" if existing.kind == EntryKind.DIRECTORY else "File"
    replace = "[m]erge" if merge else "[o]verwrite"
    options = f"{replace}, [r]ename, [s]kip, [c]ancel"
    if allow_all:
        options += " (upper case = all)"
    console.print(f"[warning]{kind} already exists:[/] {destination}")

    while True:
        raw: str = typer.prompt(options)
        answer = raw.strip()
        action = _ANSWERS.get(answer.lower())
        if action is None:
            print_error(f"Unknown choice '{answer}'")
            continue
        apply_all = allow_all and answer.isupper() and action != ConflictAction.RENAME
        if action == ConflictAction.RENAME:
            return ConflictDecision.rename_to(prompt_new_path(destination)), False
        return ConflictDecision(action), apply_all


def decide(
    choice: ConflictChoice,
    destination: Path,
    existing: FileSystemEntry | None,
    *,
    merge: bool = False,
) -> ConflictDecision | None:
    """Turn a command-line conflict policy into a top-level decision.

    Args:
        choice: Policy from ``--on-conflict``.
        destination: Destination of the request.
        existing: Entry at the destination, or None if it is free.
        merge: The conflict is a folder landing on a folder.

    Returns:
        Decision for the request, or None when there is no conflict.
    """
    if existing is None:
        return None
    if choice == ConflictChoice.ASK:
        decision, _ = prompt_conflict(destination, existing, merge=merge)
        return decision
    return ConflictDecision(ConflictAction(choice.value))


class PromptResolver:
    """Interactive resolver for conflicts found while a folder is copied.

    Answers with a fixed decision when a non-interactive policy was chosen.
    Otherwise asks for each conflict until the user picks an upper-case
    "for all" answer.

    Args:
        choice: Policy from ``--on-conflict``.
    """

    def __init__(self, choice: ConflictChoice = ConflictChoice.ASK) -> None:
        self._static: StaticResolver | None = None
        if choice != ConflictChoice.ASK:
            self._static = StaticResolver(ConflictDecision(ConflictAction(choice.value)))
        self._sticky: ConflictDecision | None = None
        self.asked = 0

    def __call__(self, destination: Path, existing: FileSystemEntry) -> ConflictDecision:
        if self._static is not None:
            return self._static(destination, existing)
        if self._sticky is not None:
            return self._sticky
        self.asked += 1
        decision, apply_all = prompt_conflict(destination, existing, allow_all=True)
        if apply_all:
            self._sticky = decision
        return decision
