"""
Centralized constants for streamnode.

Defaults shared by the config store, the profile engine and the CLI
should be defined here to avoid duplication across modules.
"""

# Stream title used when the config file has none
DEFAULT_TITLE = "Unnamed Stream"

# Framerate assumed for tokens like "720p"
DEFAULT_FRAMERATE = 30

# Separator between resolution and framerate in a transcode token
TOKEN_SEPARATOR = "p"

# Identity seed length in bytes (hex encoded on disk)
SEED_LENGTH = 32

# Default file names, relative to the working directory
CONFIG_FILENAME = "config.json"
MEDIAMTX_FILENAME = "mediamtx.yml"
SETTINGS_FILENAME = "streamnode.yaml"

# The config file holds the node seed, keep it private
CONFIG_FILE_MODE = 0o600
