"""Tests for CLI commands using Typer's CliRunner."""

from unittest.mock import MagicMock

from streamnode.cli import app


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_version_option(self, cli_runner):
        """Test --version displays version."""
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_help_option(self, cli_runner):
        """Test --help lists commands."""
        result = cli_runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "init" in result.output
        assert "profiles" in result.output


class TestInitCommand:
    """Tests for init command."""

    def test_init_creates_files(self, cli_runner, settings_file, tmp_path):
        result = cli_runner.invoke(app, ["init", "--settings", str(settings_file)])
        assert result.exit_code == 0
        assert (tmp_path / "config.json").exists()
        assert (tmp_path / "mediamtx.yml").exists()
        assert "Unnamed Stream" in result.output

    def test_init_keeps_existing_config(self, cli_runner, settings_file, config_file):
        before = config_file.read_bytes()
        result = cli_runner.invoke(app, ["init", "--settings", str(settings_file)])
        assert result.exit_code == 0
        assert "Rooftop Cam" in result.output
        assert config_file.read_bytes() == before

    def test_init_corrupt_config(self, cli_runner, settings_file, tmp_path):
        """Test a corrupt config file fails startup."""
        (tmp_path / "config.json").write_text("{")
        result = cli_runner.invoke(app, ["init", "--settings", str(settings_file)])
        assert result.exit_code == 1
        assert "Error" in result.output


class TestShowCommand:
    def test_show(self, cli_runner, settings_file, config_file):
        result = cli_runner.invoke(app, ["show", "--settings", str(settings_file)])
        assert result.exit_code == 0
        assert "Rooftop Cam" in result.output
        assert "alice" in result.output

    def test_show_missing_config(self, cli_runner, settings_file):
        result = cli_runner.invoke(app, ["show", "--settings", str(settings_file)])
        assert result.exit_code == 1


class TestProfilesCommand:
    """Tests for profiles command."""

    def test_profiles_from_config(self, cli_runner, settings_file, config_file):
        """Test configured tokens are resolved against given source values."""
        result = cli_runner.invoke(app, ["profiles", "-r", "1920", "-f", "30", "--settings", str(settings_file)])
        assert result.exit_code == 0
        assert "1080p30" in result.output
        assert "720p30" in result.output
        assert "480p30" in result.output
        assert "1080p15" not in result.output

    def test_profiles_from_tokens(self, cli_runner, settings_file):
        """Test tokens given on the command line skip the config file."""
        result = cli_runner.invoke(
            app,
            ["profiles", "-r", "720", "-f", "30", "-t", "1080p", "-t", "480p60", "--settings", str(settings_file)],
        )
        assert result.exit_code == 0
        assert "480p30" in result.output
        assert "Skipped" in result.output
        assert "1080p" in result.output

    def test_profiles_requires_source(self, cli_runner, settings_file):
        result = cli_runner.invoke(app, ["profiles", "-t", "720p", "--settings", str(settings_file)])
        assert result.exit_code == 2

    def test_profiles_rejects_zero_source(self, cli_runner, settings_file):
        result = cli_runner.invoke(app, ["profiles", "-r", "0", "-f", "30", "-t", "720p"])
        assert result.exit_code == 2

    def test_profiles_probe(self, cli_runner, settings_file, mock_subprocess):
        """Test source values can come from ffprobe."""
        mock_subprocess.return_value = MagicMock(returncode=0, stdout="height=1080\navg_frame_rate=60/1\n", stderr="")
        result = cli_runner.invoke(
            app,
            ["profiles", "--probe", "rtmp://localhost/live/cam", "-t", "720p", "--settings", str(settings_file)],
        )
        assert result.exit_code == 0
        assert "1080p60" in result.output
        assert "720p30" in result.output
        assert mock_subprocess.call_args[0][0][0] == "/opt/ffmpeg/bin/ffprobe"

    def test_profiles_probe_failure(self, cli_runner, settings_file, mock_subprocess):
        mock_subprocess.side_effect = FileNotFoundError()
        result = cli_runner.invoke(
            app, ["profiles", "--probe", "rtmp://localhost/live/cam", "-t", "720p", "--settings", str(settings_file)]
        )
        assert result.exit_code == 1
        assert "not found" in result.output
