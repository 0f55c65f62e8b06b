"""Unit tests for theme module.

Tests for color validation, bundled and user theme loading, and the Rich
styles used by listings and outcome messages.
"""

# pyright: reportPrivateUsage=false

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import fsctl.core.theme as theme_module
import pytest
from fsctl.core.theme import (
    ThemeColors,
    _load_toml_colors,
    get_bundled_theme_path,
    get_rich_theme,
    get_theme,
    load_theme,
)
from rich.theme import Theme


@pytest.fixture
def user_theme(tmp_path: Path) -> Iterator[Path]:
    """Path of a user theme file routed into load_theme()."""
    path = tmp_path / "theme.toml"
    with patch("fsctl.core.theme.get_user_theme_path", return_value=path):
        yield path


class TestThemeColors:
    """Tests for ThemeColors Pydantic model."""

    def test_entry_kind_defaults(self) -> None:
        """Each entry kind has its own color."""
        colors = ThemeColors()

        assert colors.directory == "#4aa3df"
        assert colors.file == "#ffffff"
        assert colors.other == "#d44ebc"

    def test_short_and_long_hex(self) -> None:
        """Both #RGB and #RRGGBB are accepted."""
        colors = ThemeColors(directory="#abc", file="#A1B2C3")

        assert colors.directory == "#abc"
        assert colors.file == "#A1B2C3"

    def test_whitespace_stripped(self) -> None:
        """Surrounding whitespace is ignored."""
        assert ThemeColors(info="  #123456 ").info == "#123456"

    @pytest.mark.parametrize(
        ("value", "message"),
        [
            ("4aa3df", "must start with '#'"),
            ("#4aa3d", "must be #RGB or #RRGGBB"),
            ("#zzzzzz", "invalid hex color"),
        ],
    )
    def test_invalid_colors(self, value: str, message: str) -> None:
        """Malformed colors name the offending field."""
        with pytest.raises(ValueError, match=message):
            ThemeColors(directory=value)

    def test_non_string_rejected(self) -> None:
        """Colors must be strings."""
        with pytest.raises(ValueError, match="must be a string"):
            ThemeColors(file=123)  # type: ignore[arg-type]

    def test_unknown_color_rejected(self) -> None:
        """Unknown color names are rejected."""
        with pytest.raises(ValueError):
            ThemeColors(symlink="#ffffff")  # type: ignore[call-arg]


class TestLoadTomlColors:
    """Tests for _load_toml_colors internal function."""

    def test_reads_colors_section(self, tmp_path: Path) -> None:
        """String values of the colors section are returned."""
        path = tmp_path / "theme.toml"
        path.write_text('[colors]\ndirectory = "#000000"\nsize = 3\n')

        assert _load_toml_colors(path) == {"directory": "#000000"}

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file yields None."""
        assert _load_toml_colors(tmp_path / "nope.toml") is None

    def test_broken_toml(self, tmp_path: Path) -> None:
        """Unparseable TOML yields None."""
        path = tmp_path / "theme.toml"
        path.write_text("[colors\n")

        assert _load_toml_colors(path) is None

    def test_colors_not_a_table(self, tmp_path: Path) -> None:
        """A colors key that is not a table yields None."""
        path = tmp_path / "theme.toml"
        path.write_text('colors = "red"\n')

        assert _load_toml_colors(path) is None


class TestLoadTheme:
    """Tests for load_theme function."""

    def test_bundled_theme_complete(self) -> None:
        """The bundled theme defines every color."""
        bundled = _load_toml_colors(Path(str(get_bundled_theme_path())))

        assert bundled is not None
        assert set(bundled) == set(ThemeColors.model_fields)

    def test_without_user_theme(self, user_theme: Path) -> None:
        """Without a user file the bundled colors apply."""
        assert load_theme() == ThemeColors()

    def test_partial_user_override(self, user_theme: Path) -> None:
        """User colors override only what they name."""
        user_theme.write_text('[colors]\ndirectory = "#ff0000"\n')

        colors = load_theme()

        assert colors.directory == "#ff0000"
        assert colors.file == "#ffffff"

    def test_invalid_user_theme_falls_back(self, user_theme: Path) -> None:
        """An invalid user color falls back to the defaults."""
        user_theme.write_text('[colors]\ndirectory = "blue"\n')

        assert load_theme() == ThemeColors()


class TestGetRichTheme:
    """Tests for get_rich_theme function."""

    def test_entry_styles(self) -> None:
        """Listings get one style per entry kind plus size and mode."""
        theme = get_rich_theme(ThemeColors())

        for name in ("directory", "file", "other", "entry.size", "entry.mode"):
            assert name in theme.styles

    def test_directory_bold(self) -> None:
        """Folders stand out in bold."""
        theme = get_rich_theme(ThemeColors())

        assert theme.styles["directory"].bold
        assert theme.styles["other"].italic

    def test_message_styles(self) -> None:
        """The print helpers' styles are present."""
        theme = get_rich_theme(ThemeColors())

        for name in ("info", "warning", "error", "success", "bold_header", "border", "muted"):
            assert name in theme.styles


class TestGetTheme:
    """Tests for get_theme caching function."""

    def test_caches_theme(self) -> None:
        """The theme is built once and reused."""
        theme_module._cached_theme = None

        first = get_theme()

        assert isinstance(first, Theme)
        assert get_theme() is first
