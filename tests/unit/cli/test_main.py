"""Unit tests for the main CLI application."""

import logging

from hostprobe import __version__
from hostprobe.cli.main import app, configure_logging
from typer.testing import CliRunner

runner = CliRunner()


class TestMainApp:
    """Tests for global options."""

    def test_version(self) -> None:
        """--version prints the version and exits."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"hostprobe version {__version__}" in result.output

    def test_no_args_shows_help(self) -> None:
        """Running without a command shows the command list."""
        result = runner.invoke(app, [])

        for command in ("drive", "volumes", "folder", "send", "invoke", "config"):
            assert command in result.output


class TestConfigureLogging:
    """Tests for log level selection."""

    def test_default_level(self) -> None:
        """Warnings and above are shown by default."""
        configure_logging(verbose=False, quiet=False)

        assert logging.getLogger().level == logging.WARNING

    def test_verbose(self) -> None:
        """--verbose enables debug records."""
        configure_logging(verbose=True, quiet=False)

        assert logging.getLogger().level == logging.DEBUG

    def test_quiet(self) -> None:
        """--quiet shows only errors."""
        configure_logging(verbose=False, quiet=True)

        assert logging.getLogger().level == logging.ERROR
