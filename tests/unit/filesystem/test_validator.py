"""Unit tests for name, path and extension validation."""

import pytest
from fsctl.filesystem.errors import ErrorKind, InvalidNameError, InvalidPathError
from fsctl.filesystem.validator import (
    compose_filename,
    is_reserved_name,
    validate_extension,
    validate_name,
    validate_path,
)


class TestValidateName:
    """Tests for validate_name()."""

    @pytest.mark.parametrize("name", ["notes", "notes.txt", ".hidden", "my file (1).md", "ümlaut"])
    def test_accepts_valid(self, name: str) -> None:
        """Ordinary names pass."""
        validate_name(name)

    def test_empty(self) -> None:
        """An empty name is rejected."""
        with pytest.raises(InvalidNameError, match="empty"):
            validate_name("")

    @pytest.mark.parametrize("name", [".", ".."])
    def test_dot_entries(self, name: str) -> None:
        """Dot entries are not names."""
        with pytest.raises(InvalidNameError):
            validate_name(name)

    @pytest.mark.parametrize("char", list('/\\:*?"<>|'))
    def test_reserved_characters(self, char: str) -> None:
        """Every reserved character is rejected."""
        with pytest.raises(InvalidNameError) as exc_info:
            validate_name(f"bad{char}name")

        assert exc_info.value.kind == ErrorKind.INVALID_NAME

    def test_nul_character(self) -> None:
        """NUL is rejected and shown escaped."""
        with pytest.raises(InvalidNameError, match="NUL"):
            validate_name("a\0b")

    def test_reserved_device_name_on_windows(self) -> None:
        """Device names are rejected when Windows rules apply."""
        with pytest.raises(InvalidNameError, match="reserved"):
            validate_name("CON.txt", windows=True)

    def test_reserved_device_name_elsewhere(self) -> None:
        """Device names are ordinary names on other platforms."""
        validate_name("CON.txt", windows=False)


class TestIsReservedName:
    """Tests for is_reserved_name()."""

    @pytest.mark.parametrize("name", ["CON", "con", "Con.txt", "LPT1.tar.gz", "com9", "nul "])
    def test_reserved(self, name: str) -> None:
        """Reserved names match regardless of case and extension."""
        assert is_reserved_name(name)

    @pytest.mark.parametrize("name", ["console", "COM0", "LPT10", "aux_file", "notes"])
    def test_not_reserved(self, name: str) -> None:
        """Names that merely start like a device are fine."""
        assert not is_reserved_name(name)


class TestValidatePath:
    """Tests for validate_path()."""

    @pytest.mark.parametrize("path", ["a", "a/b/c", "/abs/path", "./here", "dir/.hidden"])
    def test_accepts_valid(self, path: str) -> None:
        """Relative and absolute paths without traversal pass."""
        validate_path(path)

    @pytest.mark.parametrize("path", ["..", "../x", "a/../b", "/a/../a/x", "a\\..\\b"])
    def test_rejects_parent_segments(self, path: str) -> None:
        """Any literal parent segment is rejected without resolving."""
        with pytest.raises(InvalidPathError, match="parent-directory"):
            validate_path(path)

    def test_dots_inside_names_allowed(self) -> None:
        """Two dots inside a name are not a parent segment."""
        validate_path("a/..b/c..")

    def test_empty(self) -> None:
        """An empty path is rejected."""
        with pytest.raises(InvalidPathError, match="empty"):
            validate_path("")

    def test_nul(self) -> None:
        """NUL is rejected."""
        with pytest.raises(InvalidPathError, match="NUL"):
            validate_path("a\0b")

    def test_reserved_segment_on_windows(self) -> None:
        """A reserved device segment is rejected under Windows rules."""
        with pytest.raises(InvalidPathError, match="reserved"):
            validate_path("C:\\data\\aux\\file.txt", windows=True)

    def test_drive_letter_allowed_on_windows(self) -> None:
        """Drive letters are not mistaken for reserved names."""
        validate_path("C:\\data\\file.txt", windows=True)


class TestValidateExtension:
    """Tests for validate_extension()."""

    @pytest.mark.parametrize("ext", ["txt", "MD", "tar_gz", "mp3"])
    def test_accepts_valid(self, ext: str) -> None:
        """Letters, digits and underscore pass."""
        validate_extension(ext)

    def test_empty(self) -> None:
        """An empty extension is rejected."""
        with pytest.raises(InvalidNameError):
            validate_extension("")

    def test_dot(self) -> None:
        """Extensions are given without dots."""
        with pytest.raises(InvalidNameError, match="dot"):
            validate_extension("tar.gz")

    @pytest.mark.parametrize("ext", ["t xt", "a-b", "é"])
    def test_invalid_characters(self, ext: str) -> None:
        """Anything else is rejected."""
        with pytest.raises(InvalidNameError, match="letters"):
            validate_extension(ext)


class TestComposeFilename:
    """Tests for compose_filename()."""

    def test_with_extension(self) -> None:
        """Name and extension are joined with a dot."""
        assert compose_filename("notes", "txt") == "notes.txt"

    @pytest.mark.parametrize("ext", [None, ""])
    def test_without_extension(self, ext: str | None) -> None:
        """A missing extension leaves the name alone."""
        assert compose_filename("notes", ext) == "notes"

    def test_invalid_name(self) -> None:
        """The base name is validated."""
        with pytest.raises(InvalidNameError):
            compose_filename("a/b", "txt")

    def test_reserved_combination_on_windows(self) -> None:
        """The combined name is validated too."""
        with pytest.raises(InvalidNameError):
            compose_filename("nul", "txt", windows=True)
