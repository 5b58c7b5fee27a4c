"""Unit tests for the rimraf command.

Tests argument handling, config loading and error reporting of the CLI.
"""

import logging
from pathlib import Path
from unittest.mock import patch

import pytest
from rimraf import __version__
from rimraf.cli.main import app
from rimraf.core.errors import RimrafError
from typer.testing import CliRunner

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG_CONFIG_HOME at an empty directory."""
    config_home = tmp_path / "xdg"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    return config_home


class TestMainCommand:
    """Tests for rimraf PATH..."""

    def test_removes_directory(self, tree: Path) -> None:
        """A directory tree is removed and the command exits 0."""
        result = runner.invoke(app, [str(tree)])

        assert result.exit_code == 0
        assert not tree.exists()

    def test_sequential(self, tree: Path) -> None:
        """--sequential removes with the blocking strategy."""
        result = runner.invoke(app, ["--sequential", str(tree)])

        assert result.exit_code == 0
        assert not tree.exists()

    def test_missing_path_is_success(self, tmp_path: Path) -> None:
        """A path that does not exist is not an error."""
        result = runner.invoke(app, [str(tmp_path / "missing")])

        assert result.exit_code == 0

    def test_glob_expanded(self, tmp_path: Path) -> None:
        """Patterns are expanded by default."""
        (tmp_path / "a.txt").write_text("")
        (tmp_path / "b.txt").write_text("")
        (tmp_path / "keep.md").write_text("")

        result = runner.invoke(app, [str(tmp_path / "*.txt")])

        assert result.exit_code == 0
        assert [p.name for p in tmp_path.iterdir()] == ["keep.md"]

    def test_no_glob(self, tmp_path: Path) -> None:
        """-G removes only the literal entry."""
        (tmp_path / "a.txt").write_text("")
        (tmp_path / "*.txt").write_text("")

        result = runner.invoke(app, ["-G", str(tmp_path / "*.txt")])

        assert result.exit_code == 0
        assert (tmp_path / "a.txt").exists()
        assert not (tmp_path / "*.txt").exists()

    def test_version(self) -> None:
        """--version prints the version and exits."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_removal_failure(self, tmp_path: Path) -> None:
        """A removal error is reported and the command exits 1."""
        error = RimrafError(13, "Permission denied", str(tmp_path / "x"))

        with patch("rimraf.cli.main.rimraf_sync", side_effect=error):
            result = runner.invoke(app, ["--sequential", str(tmp_path / "x")])

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_options_forwarded(self, tmp_path: Path) -> None:
        """Retry flags end up in the options passed to the engine."""
        with patch("rimraf.cli.main.rimraf_sync") as mock_remove:
            result = runner.invoke(
                app,
                ["--sequential", "-G", "--max-retries", "7", "--emfile-wait", "50", "x"],
            )

        assert result.exit_code == 0
        paths, options = mock_remove.call_args.args
        assert paths == ["x"]
        assert options.glob is None
        assert options.max_retries == 7
        assert options.emfile_wait == 50

    def test_config_file_applied(self, tmp_path: Path) -> None:
        """Values from --config are used when no flag overrides them."""
        config = tmp_path / "rimraf.toml"
        config.write_text("max_retries = 9\nglob = false\n")

        with patch("rimraf.cli.main.rimraf_sync") as mock_remove:
            result = runner.invoke(app, ["--sequential", "-c", str(config), "x"])

        assert result.exit_code == 0
        options = mock_remove.call_args.args[1]
        assert options.max_retries == 9
        assert options.glob is None

    def test_user_config_applied(self, isolated_config: Path) -> None:
        """The XDG config file is read when present."""
        (isolated_config / "rimraf").mkdir(parents=True)
        (isolated_config / "rimraf" / "config.toml").write_text("emfile_wait = 12\n")

        with patch("rimraf.cli.main.rimraf_sync") as mock_remove:
            result = runner.invoke(app, ["--sequential", "x"])

        assert result.exit_code == 0
        assert mock_remove.call_args.args[1].emfile_wait == 12

    def test_invalid_config(self, tmp_path: Path) -> None:
        """A malformed config file exits 1."""
        config = tmp_path / "rimraf.toml"
        config.write_text("max_retries = [unclosed\n")

        result = runner.invoke(app, ["-c", str(config), "x"])

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_missing_explicit_config(self, tmp_path: Path) -> None:
        """A --config path that does not exist exits 1."""
        result = runner.invoke(app, ["-c", str(tmp_path / "nope.toml"), "x"])

        assert result.exit_code == 1

    def test_negative_retries_rejected(self) -> None:
        """--max-retries must not be negative."""
        result = runner.invoke(app, ["--max-retries", "-1", "x"])

        assert result.exit_code != 0


class TestOutputLevels:
    """Tests for --verbose and --quiet."""

    def test_default_configures_no_logging(self, tmp_path: Path) -> None:
        """Without flags the library logs are left alone and nothing is printed."""
        with patch("rimraf.cli.main.logging.basicConfig") as mock_config:
            result = runner.invoke(app, [str(tmp_path / "missing")])

        assert result.exit_code == 0
        mock_config.assert_not_called()
        assert result.output == ""

    def test_verbose_enables_debug(self, tmp_path: Path) -> None:
        """--verbose logs at DEBUG and prints a summary."""
        with patch("rimraf.cli.main.logging.basicConfig") as mock_config:
            result = runner.invoke(app, ["-v", str(tmp_path / "missing")])

        assert result.exit_code == 0
        assert mock_config.call_args.kwargs["level"] == logging.DEBUG
        assert "Removed 1 argument(s)." in result.output

    def test_quiet_overrides_verbose(self, tmp_path: Path) -> None:
        """-q raises the log level to ERROR and hides the summary, even with -v."""
        with patch("rimraf.cli.main.logging.basicConfig") as mock_config:
            result = runner.invoke(app, ["-v", "-q", str(tmp_path / "missing")])

        assert result.exit_code == 0
        assert mock_config.call_args.kwargs["level"] == logging.ERROR
        assert "Removed" not in result.output
