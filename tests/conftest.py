"""Shared pytest fixtures for streamnode tests."""

import json
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

SEED = "ab" * 32


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def config_file(tmp_path):
    """Create an existing config.json with transcode tokens."""
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "seed": SEED,
                "title": "Rooftop Cam",
                "owner": "alice",
                "transcoders": ["1080p30", "720p", "480p60", "1080p15"],
            },
            indent=2,
        )
    )
    return path


@pytest.fixture
def settings_file(tmp_path):
    """Create a settings file pointing into tmp_path."""
    path = tmp_path / "streamnode.yaml"
    path.write_text(
        f"""
paths:
  config_file: "{tmp_path / "config.json"}"
  mediamtx_config: "{tmp_path / "mediamtx.yml"}"

probe:
  ffprobe: "/opt/ffmpeg/bin/ffprobe"
  timeout: 5

logging:
  level: "DEBUG"
"""
    )
    return path


@pytest.fixture
def mock_subprocess():
    """Mock subprocess.run for tests that call ffprobe."""
    with patch("subprocess.run") as mock_run:
        mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")
        yield mock_run
