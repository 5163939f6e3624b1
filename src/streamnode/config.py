"""
Stream configuration store - Load or create the node's config.json.

The config file holds the identity seed, display title, owner label and
the raw transcode tokens. It is created once on first run and never
rewritten on later loads.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from .constants import CONFIG_FILE_MODE, DEFAULT_TITLE
from .identity import generate_seed, is_valid_seed
from .profiles import SourceCapabilities, TranscodeProfile, resolve_profiles

logger = logging.getLogger(__name__)


class ConfigError(RuntimeError):
    """Raised when the configuration cannot be read, decoded or written."""


@dataclass
class StreamConfig:
    """Persisted stream configuration."""

    seed: str
    title: str = DEFAULT_TITLE
    owner: str = ""
    transcoders: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "seed": self.seed,
            "title": self.title,
            "owner": self.owner,
            "transcoders": list(self.transcoders),
        }

    @classmethod
    def from_dict(cls, data: dict) -> StreamConfig:
        """
        Decode a config record.

        Unknown keys are ignored and missing optional fields get defaults.
        An empty title is backfilled with the default title.

        Raises:
            ConfigError: If a field has the wrong type or the seed is missing
        """
        if not isinstance(data, dict):
            raise ConfigError(f"Config must be a JSON object, got {type(data).__name__}")

        seed = data.get("seed")
        if not is_valid_seed(seed):
            raise ConfigError("Config has a missing or invalid identity seed")

        title = data.get("title") or ""
        owner = data.get("owner") or ""
        transcoders = data.get("transcoders") or []

        if not isinstance(title, str):
            raise ConfigError(f"Config field 'title' must be a string, got {type(title).__name__}")
        if not isinstance(owner, str):
            raise ConfigError(f"Config field 'owner' must be a string, got {type(owner).__name__}")
        if not isinstance(transcoders, list) or not all(isinstance(t, str) for t in transcoders):
            raise ConfigError("Config field 'transcoders' must be a list of strings")

        return cls(seed=seed, title=title or DEFAULT_TITLE, owner=owner, transcoders=transcoders)

    def resolve_transcoders(self, source: SourceCapabilities) -> list[TranscodeProfile]:
        """Resolve configured transcode tokens against the current source."""
        return resolve_profiles(self.transcoders, source)


def create_config(path: Path) -> StreamConfig:
    """
    Create a default config with a fresh identity seed.

    The file is created exclusively with owner-only permissions.

    Raises:
        ConfigError: If the file cannot be written
        IdentityError: If no seed can be generated
    """
    config = StreamConfig(seed=generate_seed())
    data = json.dumps(config.to_dict(), indent=2)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, CONFIG_FILE_MODE)
        with os.fdopen(fd, "w") as f:
            f.write(data)
            f.write("\n")
    except OSError as err:
        raise ConfigError(f"Error creating config file {path}: {err}") from err

    logger.info(f"Created config file: {path}")
    return config


def read_config(path: Path) -> StreamConfig:
    """
    Read an existing config file.

    Raises:
        ConfigError: If the file cannot be read or decoded
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as err:
        raise ConfigError(f"Config file {path} is not valid JSON: {err}") from err
    except OSError as err:
        raise ConfigError(f"Error reading config file {path}: {err}") from err

    try:
        return StreamConfig.from_dict(data)
    except ConfigError as err:
        raise ConfigError(f"{path}: {err}") from err


def load_or_create(path: Path) -> StreamConfig:
    """
    Load the config file, creating a default one on first run.

    Loading is idempotent: an existing file is never modified, defaults for
    missing fields are applied in memory only.

    Args:
        path: Path to config.json

    Returns:
        Loaded or newly created StreamConfig
    """
    if not path.exists():
        return create_config(path)

    config = read_config(path)
    logger.debug(f"Loaded config file: {path} ({len(config.transcoders)} transcode value(s))")
    return config
