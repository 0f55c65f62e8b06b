"""Unit tests for the create command group.

Tests for creating files (with prompts, extensions, content and conflict
handling) and folders.
"""

import os
from pathlib import Path

import pytest
from fsctl.cli.main import app
from typer.testing import CliRunner

runner = CliRunner()


class TestCreateFile:
    """Tests for fsctl create file."""

    def test_name_and_extension(self, workdir: Path) -> None:
        """Name and extension from the command line create name.ext."""
        result = runner.invoke(app, ["create", "file", "notes", "--ext", "txt", "-c", "hello"])

        assert result.exit_code == 0
        assert "Created 1 file" in result.output
        assert (workdir / "notes.txt").read_text() == "hello"

    def test_extension_with_dot(self, workdir: Path) -> None:
        """A leading dot on --ext is tolerated."""
        result = runner.invoke(app, ["create", "file", "notes", "-e", ".md"])

        assert result.exit_code == 0
        assert (workdir / "notes.md").exists()

    def test_name_without_extension(self, workdir: Path) -> None:
        """A name alone creates a file without extension and asks nothing."""
        result = runner.invoke(app, ["create", "file", "notes"])

        assert result.exit_code == 0
        assert (workdir / "notes").read_text() == ""

    def test_prompts_for_name_and_extension(self, workdir: Path) -> None:
        """Without a name both name and extension are prompted."""
        result = runner.invoke(app, ["create", "file"], input="todo\nmd\n")

        assert result.exit_code == 0
        assert (workdir / "todo.md").exists()

    def test_blank_extension_prompt(self, workdir: Path) -> None:
        """A blank extension answer means no extension."""
        result = runner.invoke(app, ["create", "file"], input="todo\n\n")

        assert result.exit_code == 0
        assert (workdir / "todo").exists()

    def test_invalid_prompted_name_asked_again(self, workdir: Path) -> None:
        """An invalid name is reported and asked again."""
        result = runner.invoke(app, ["create", "file"], input="bad/name\ngood\ntxt\n")

        assert result.exit_code == 0
        assert "reserved characters" in result.output
        assert (workdir / "good.txt").exists()

    def test_invalid_extension_asked_again(self, workdir: Path) -> None:
        """An invalid extension is reported and asked again."""
        result = runner.invoke(app, ["create", "file"], input="notes\nt-x\ntxt\n")

        assert result.exit_code == 0
        assert (workdir / "notes.txt").exists()

    def test_invalid_name_argument(self, workdir: Path) -> None:
        """An invalid name on the command line fails."""
        result = runner.invoke(app, ["create", "file", "a:b"])

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert list(workdir.iterdir()) == []

    def test_in_directory(self, workdir: Path) -> None:
        """--dir places the file in another folder."""
        (workdir / "docs").mkdir()

        result = runner.invoke(app, ["create", "file", "readme", "-d", "docs", "-e", "md"])

        assert result.exit_code == 0
        assert (workdir / "docs" / "readme.md").exists()

    def test_missing_directory(self, workdir: Path) -> None:
        """A missing --dir folder fails."""
        result = runner.invoke(app, ["create", "file", "readme", "-d", "nope"])

        assert result.exit_code == 1
        assert "Parent folder does not exist" in result.output

    def test_existing_skip(self, workdir: Path) -> None:
        """--on-conflict skip keeps the existing file."""
        (workdir / "notes.txt").write_text("old")

        result = runner.invoke(
            app, ["create", "file", "notes", "-e", "txt", "-c", "new", "--on-conflict", "skip"]
        )

        assert result.exit_code == 0
        assert "Skipped" in result.output
        assert (workdir / "notes.txt").read_text() == "old"

    def test_existing_prompt_overwrite(self, workdir: Path) -> None:
        """Answering o overwrites the existing file."""
        (workdir / "notes.txt").write_text("old")

        result = runner.invoke(
            app, ["create", "file", "notes", "-e", "txt", "-c", "new"], input="o\n"
        )

        assert result.exit_code == 0
        assert "already exists" in result.output
        assert (workdir / "notes.txt").read_text() == "new"

    def test_existing_prompt_rename(self, workdir: Path) -> None:
        """Answering r with the suggested name creates a sibling."""
        (workdir / "notes.txt").write_text("old")

        result = runner.invoke(
            app, ["create", "file", "notes", "-e", "txt", "-c", "new"], input="r\n\n"
        )

        assert result.exit_code == 0
        assert (workdir / "notes.txt").read_text() == "old"
        assert (workdir / "notes (1).txt").read_text() == "new"

    def test_existing_prompt_cancel(self, workdir: Path) -> None:
        """Answering c cancels with exit code 1."""
        (workdir / "notes.txt").write_text("old")

        result = runner.invoke(app, ["create", "file", "notes", "-e", "txt"], input="c\n")

        assert result.exit_code == 1
        assert "Operation cancelled." in result.output
        assert (workdir / "notes.txt").read_text() == "old"

    def test_invalid_mode(self, workdir: Path) -> None:
        """A non-octal mode is a usage error."""
        result = runner.invoke(app, ["create", "file", "notes", "--mode", "999"])

        assert result.exit_code == 2
        assert not (workdir / "notes").exists()

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permissions")
    def test_mode(self, workdir: Path) -> None:
        """--mode sets the permission bits."""
        result = runner.invoke(app, ["create", "file", "secret", "--mode", "600"])

        assert result.exit_code == 0
        assert (workdir / "secret").stat().st_mode & 0o777 == 0o600


class TestCreateDir:
    """Tests for fsctl create dir."""

    def test_create(self, workdir: Path) -> None:
        """A folder is created."""
        result = runner.invoke(app, ["create", "dir", "photos"])

        assert result.exit_code == 0
        assert "Created 1 folder" in result.output
        assert (workdir / "photos").is_dir()

    def test_parents(self, workdir: Path) -> None:
        """--parents creates the whole chain."""
        result = runner.invoke(app, ["create", "dir", "a/b/c", "-p"])

        assert result.exit_code == 0
        assert "Created 3 folders" in result.output
        assert (workdir / "a" / "b" / "c").is_dir()

    def test_existing_with_parents(self, workdir: Path) -> None:
        """An existing folder with --parents is reported, not an error."""
        (workdir / "photos").mkdir()

        result = runner.invoke(app, ["create", "dir", "photos", "-p"])

        assert result.exit_code == 0
        assert "Folder already exists" in result.output

    def test_existing_without_parents(self, workdir: Path) -> None:
        """An existing folder without --parents fails."""
        (workdir / "photos").mkdir()

        result = runner.invoke(app, ["create", "dir", "photos"])

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_traversal_rejected(self, workdir: Path) -> None:
        """Parent segments are rejected."""
        result = runner.invoke(app, ["create", "dir", "../escape"])

        assert result.exit_code == 1
        assert "parent-directory" in result.output
        assert not (workdir.parent / "escape").exists()
