"""
Application settings with YAML loading and environment variable support.

These are settings of the streamnode tool itself (where files live, how to
probe, how loudly to log), not the node's stream configuration.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .constants import CONFIG_FILENAME, MEDIAMTX_FILENAME, SETTINGS_FILENAME


def _env_path(env_var: str, default: Path) -> Path:
    """Get path from environment variable or return default."""
    if value := os.environ.get(env_var):
        return Path(value)
    return default


@dataclass
class PathsSettings:
    """Paths - can be overridden via environment variables."""

    config_file: Path = field(default_factory=lambda: _env_path("STREAMNODE_CONFIG", Path(CONFIG_FILENAME)))
    mediamtx_config: Path = field(
        default_factory=lambda: _env_path("STREAMNODE_MEDIAMTX_CONFIG", Path(MEDIAMTX_FILENAME))
    )


@dataclass
class ProbeSettings:
    ffprobe: str = "ffprobe"
    timeout: float = 10.0


@dataclass
class LoggingSettings:
    level: str = "INFO"


@dataclass
class AppSettings:
    paths: PathsSettings = field(default_factory=PathsSettings)
    probe: ProbeSettings = field(default_factory=ProbeSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    @classmethod
    def from_yaml(cls, path: Path) -> AppSettings:
        """Load settings from YAML file."""
        if not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> AppSettings:
        """Create settings from dictionary, ignoring unknown keys."""
        settings = cls()

        for section_name in ("paths", "probe", "logging"):
            section = getattr(settings, section_name)
            for key, value in (data.get(section_name) or {}).items():
                if hasattr(section, key):
                    if section_name == "paths" and isinstance(value, str):
                        value = Path(value)
                    setattr(section, key, value)

        return settings


def _get_default_settings_dir() -> Path:
    """Get default settings directory."""
    if settings_dir := os.environ.get("STREAMNODE_SETTINGS_DIR"):
        return Path(settings_dir)

    if xdg_config := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_config) / "streamnode"

    return Path.home() / ".config" / "streamnode"


def load_settings(path: Path | None = None, settings_dir: Path | None = None) -> AppSettings:
    """
    Load application settings.

    Args:
        path: Path to settings file (default: searches standard locations)
        settings_dir: Settings directory to search

    Returns:
        AppSettings (defaults if no file is found)
    """
    if path is None:
        if settings_dir is None:
            settings_dir = _get_default_settings_dir()
        search_paths = [
            settings_dir / SETTINGS_FILENAME,
            Path.cwd() / SETTINGS_FILENAME,
        ]
        for candidate in search_paths:
            if candidate.exists():
                path = candidate
                break

    return AppSettings.from_yaml(path) if path else AppSettings()
