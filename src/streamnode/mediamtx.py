"""
MediaMTX configuration - Materialize the media server's default config.

The bundled template is MediaMTX's own default configuration, shipped
verbatim as package data. It is written once and never overwritten so
that user edits survive restarts.
"""

import logging
from importlib import resources
from pathlib import Path

from .config import ConfigError

logger = logging.getLogger(__name__)

TEMPLATE_RESOURCE = "mediamtx.yml"


def default_template() -> str:
    """Return the bundled MediaMTX default configuration."""
    return resources.files("streamnode.data").joinpath(TEMPLATE_RESOURCE).read_text(encoding="utf-8")


def ensure_mediamtx_config(path: Path) -> bool:
    """
    Write the default MediaMTX config if it does not exist.

    Args:
        path: Destination path (usually ./mediamtx.yml)

    Returns:
        True if the file was written, False if it already existed
    """
    if path.exists():
        logger.debug(f"MediaMTX config already present: {path}")
        return False

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "x", encoding="utf-8") as f:
            f.write(default_template())
    except FileExistsError:
        return False
    except OSError as err:
        raise ConfigError(f"Error creating MediaMTX config {path}: {err}") from err

    logger.info(f"Created MediaMTX config: {path}")
    return True
