"""Unit tests for conflict resolvers and decision checks."""

from pathlib import Path

import pytest
from fsctl.filesystem.conflicts import StaticResolver, check_decision, resolve
from fsctl.filesystem.errors import InvalidNameError, InvalidPathError
from fsctl.filesystem.models import ConflictAction, ConflictDecision, FileSystemEntry


@pytest.fixture
def existing(tmp_path: Path) -> FileSystemEntry:
    """Entry for a file that already exists."""
    target = tmp_path / "a.txt"
    target.write_text("a")
    return FileSystemEntry.from_path(target)


class TestStaticResolver:
    """Tests for StaticResolver."""

    def test_returns_same_decision(self, existing: FileSystemEntry) -> None:
        """Every conflict gets the configured decision."""
        resolver = StaticResolver(ConflictDecision.skip())

        assert resolver(existing.path, existing).action == ConflictAction.SKIP
        assert resolver(Path("other"), existing).action == ConflictAction.SKIP
        assert resolver.decision == ConflictDecision.skip()

    def test_rejects_rename(self) -> None:
        """One rename target cannot serve every conflict."""
        with pytest.raises(ValueError, match="cannot rename"):
            StaticResolver(ConflictDecision.rename_to("x"))


class TestCheckDecision:
    """Tests for check_decision()."""

    def test_passes_plain_actions(self) -> None:
        """Non-rename decisions need no checks."""
        decision = ConflictDecision.overwrite()

        assert check_decision(decision) is decision

    def test_rename_traversal(self) -> None:
        """A rename target with a parent segment is rejected."""
        with pytest.raises(InvalidPathError):
            check_decision(ConflictDecision.rename_to("a/../b.txt"))

    def test_rename_bad_name(self) -> None:
        """A rename target with a reserved character is rejected."""
        with pytest.raises(InvalidNameError):
            check_decision(ConflictDecision.rename_to("dir/b*.txt"))


class TestResolve:
    """Tests for resolve()."""

    def test_validates_answer(self, existing: FileSystemEntry) -> None:
        """The resolver's answer is checked before use."""

        def bad(destination: Path, entry: FileSystemEntry) -> ConflictDecision:
            return ConflictDecision.rename_to(destination.with_name("bad|name"))

        with pytest.raises(InvalidNameError):
            resolve(bad, existing.path, existing)

    def test_passes_arguments(self, existing: FileSystemEntry) -> None:
        """The resolver sees the destination and the existing entry."""
        seen: list[tuple[Path, FileSystemEntry]] = []

        def record(destination: Path, entry: FileSystemEntry) -> ConflictDecision:
            seen.append((destination, entry))
            return ConflictDecision.overwrite()

        decision = resolve(record, existing.path, existing)

        assert decision.action == ConflictAction.OVERWRITE
        assert seen == [(existing.path, existing)]
