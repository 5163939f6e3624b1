"""Startup wiring - materialize default files and load the stream config."""

import logging

from .config import StreamConfig, load_or_create
from .mediamtx import ensure_mediamtx_config
from .settings import AppSettings

logger = logging.getLogger(__name__)


def bootstrap(settings: AppSettings) -> StreamConfig:
    """
    Prepare the node's configuration files and return the stream config.

    Runs at most once per process start. Existing files are left untouched.

    Raises:
        ConfigError: If a file cannot be read, decoded or written
        IdentityError: If a new identity seed cannot be generated
    """
    ensure_mediamtx_config(settings.paths.mediamtx_config)
    config = load_or_create(settings.paths.config_file)
    logger.info(f"Stream '{config.title}' ready ({len(config.transcoders)} transcode value(s) configured)")
    return config
