"""Unit tests for the main CLI application."""

import logging
from pathlib import Path

from fsctl import __version__
from fsctl.cli.main import app
from typer.testing import CliRunner

runner = CliRunner()


class TestMainApp:
    """Tests for global options and command registration."""

    def test_version(self) -> None:
        """--version prints the version and exits."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"fsctl version {__version__}" in result.output

    def test_help_lists_commands(self) -> None:
        """Every command is registered."""
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ("create", "delete", "copy", "move", "rename", "info", "ls", "size"):
            assert command in result.output

    def test_verbose_enables_debug_logging(self, workdir: Path) -> None:
        """--verbose switches the root logger to DEBUG."""
        result = runner.invoke(app, ["--verbose", "ls"])

        assert result.exit_code == 0
        assert logging.getLogger().level == logging.DEBUG

    def test_default_logging_level(self, workdir: Path) -> None:
        """Without --verbose only warnings are logged."""
        result = runner.invoke(app, ["ls"])

        assert result.exit_code == 0
        assert logging.getLogger().level == logging.WARNING
