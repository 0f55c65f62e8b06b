"""Unit tests for the delete command.

Tests for trash and permanent deletes, confirmations, recursive
confirmation of non-empty folders and the trash fallback prompt.
"""

from collections.abc import Callable
from pathlib import Path

import pytest
from fsctl.cli.main import app
from typer.testing import CliRunner

runner = CliRunner()

MakeTree = Callable[[Path, dict[str, str | None]], Path]


def _write_config(config_dir: Path, text: str) -> None:
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / "config.toml").write_text(text)


class TestDeleteFile:
    """Tests for deleting single files."""

    def test_to_trash(self, workdir: Path, system_trash: list[str]) -> None:
        """By default files go to the trash."""
        (workdir / "notes.txt").write_text("abc")

        result = runner.invoke(app, ["delete", "notes.txt", "-y"])

        assert result.exit_code == 0
        assert "Deleted 1 file" in result.output
        assert "to trash" in result.output
        assert system_trash == ["notes.txt"]

    def test_permanent(self, workdir: Path, system_trash: list[str]) -> None:
        """--permanent bypasses the trash."""
        (workdir / "notes.txt").write_text("abc")

        result = runner.invoke(app, ["delete", "notes.txt", "--permanent", "-y"])

        assert result.exit_code == 0
        assert "permanently" in result.output
        assert system_trash == []
        assert not (workdir / "notes.txt").exists()

    def test_confirmation_declined(self, workdir: Path, system_trash: list[str]) -> None:
        """Declining the confirmation deletes nothing."""
        (workdir / "notes.txt").write_text("abc")

        result = runner.invoke(app, ["delete", "notes.txt"], input="n\n")

        assert result.exit_code == 0
        assert "Aborted." in result.output
        assert (workdir / "notes.txt").exists()

    def test_confirmation_accepted(self, workdir: Path, system_trash: list[str]) -> None:
        """Accepting the confirmation deletes."""
        (workdir / "notes.txt").write_text("abc")

        result = runner.invoke(app, ["delete", "notes.txt"], input="y\n")

        assert result.exit_code == 0
        assert "Delete notes.txt to the trash?" in result.output
        assert not (workdir / "notes.txt").exists()

    def test_missing(self, workdir: Path) -> None:
        """A missing path fails with exit code 1."""
        result = runner.invoke(app, ["delete", "nope.txt", "-y"])

        assert result.exit_code == 1
        assert "No such file or folder" in result.output

    def test_config_disables_trash(
        self, workdir: Path, isolated_config: Path, system_trash: list[str]
    ) -> None:
        """use_trash = false makes deletes permanent."""
        _write_config(isolated_config, "use_trash = false\n")
        (workdir / "notes.txt").write_text("abc")

        result = runner.invoke(app, ["delete", "notes.txt", "-y"])

        assert result.exit_code == 0
        assert system_trash == []
        assert not (workdir / "notes.txt").exists()

    def test_config_disables_confirmation(
        self, workdir: Path, isolated_config: Path, system_trash: list[str]
    ) -> None:
        """confirm_destructive = false deletes without asking."""
        _write_config(isolated_config, "confirm_destructive = false\n")
        (workdir / "notes.txt").write_text("abc")

        result = runner.invoke(app, ["delete", "notes.txt"])

        assert result.exit_code == 0
        assert "?" not in result.output
        assert system_trash == ["notes.txt"]


class TestDeleteFolder:
    """Tests for deleting folders."""

    def test_non_empty_confirmed(
        self, workdir: Path, make_tree: MakeTree, system_trash: list[str]
    ) -> None:
        """A non-empty folder asks once about its contents."""
        make_tree(workdir / "proj", {"a.txt": "a", "sub": None})

        result = runner.invoke(app, ["delete", "proj"], input="y\n")

        assert result.exit_code == 0
        assert "contains 2 entries" in result.output
        assert "Deleted 1 file, 2 folders" in result.output
        assert system_trash == ["proj"]

    def test_non_empty_declined(
        self, workdir: Path, make_tree: MakeTree, system_trash: list[str]
    ) -> None:
        """Declining the contents question keeps everything."""
        make_tree(workdir / "proj", {"a.txt": "a"})

        result = runner.invoke(app, ["delete", "proj"], input="n\n")

        assert result.exit_code == 0
        assert "Aborted." in result.output
        assert (workdir / "proj" / "a.txt").exists()
        assert system_trash == []

    def test_recursive_permanent(self, workdir: Path, make_tree: MakeTree) -> None:
        """-r --permanent -y removes the tree without prompts."""
        make_tree(workdir / "proj", {"a.txt": "a", "sub/b.txt": "b", "sub/empty": None})

        result = runner.invoke(app, ["delete", "proj", "-r", "--permanent", "-y"])

        assert result.exit_code == 0
        assert "Deleted 2 files, 3 folders" in result.output
        assert not (workdir / "proj").exists()

    def test_empty_folder(self, workdir: Path) -> None:
        """An empty folder needs no contents confirmation."""
        (workdir / "empty").mkdir()

        result = runner.invoke(app, ["delete", "empty", "--permanent", "-y"])

        assert result.exit_code == 0
        assert not (workdir / "empty").exists()


class TestTrashFallback:
    """Tests for the permanent-delete fallback when the trash refuses."""

    @pytest.fixture
    def broken_trash(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Make every trash attempt fail."""

        def refuse(path: str) -> None:
            raise OSError("no trash on this volume")

        monkeypatch.setattr("fsctl.filesystem.trash.send2trash", refuse)

    def test_fallback_accepted(self, workdir: Path, broken_trash: None) -> None:
        """Accepting the fallback deletes permanently."""
        (workdir / "notes.txt").write_text("abc")

        result = runner.invoke(app, ["delete", "notes.txt", "-y"], input="y\n")

        assert result.exit_code == 0
        assert "Delete permanently instead?" in result.output
        assert "permanently" in result.output
        assert not (workdir / "notes.txt").exists()

    def test_fallback_declined(self, workdir: Path, broken_trash: None) -> None:
        """Declining the fallback deletes nothing and exits 1."""
        (workdir / "notes.txt").write_text("abc")

        result = runner.invoke(app, ["delete", "notes.txt", "-y"], input="n\n")

        assert result.exit_code == 1
        assert "Nothing was deleted." in result.output
        assert (workdir / "notes.txt").exists()
