"""
Identity seed generation for the node.

The seed is the node's long-lived identity; it is generated once on first
run and stored hex encoded in the config file.
"""

import secrets
import string

from .constants import SEED_LENGTH


class IdentityError(RuntimeError):
    """Raised when a seed cannot be generated."""


def generate_seed(length: int = SEED_LENGTH) -> str:
    """
    Generate a new random identity seed.

    Args:
        length: Seed length in bytes

    Returns:
        Hex encoded seed (2 * length characters)
    """
    try:
        return secrets.token_bytes(length).hex()
    except (OSError, NotImplementedError) as err:
        raise IdentityError(f"Could not obtain random bytes for identity seed: {err}") from err


def is_valid_seed(seed: str, length: int = SEED_LENGTH) -> bool:
    """Check that a seed is a hex string of the expected length."""
    return (
        isinstance(seed, str) and len(seed) == length * 2 and all(c in string.hexdigits for c in seed)
    )
