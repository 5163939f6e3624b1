"""Tests for identity seed generation."""

from unittest.mock import patch

import pytest

from streamnode.identity import IdentityError, generate_seed, is_valid_seed


class TestGenerateSeed:
    def test_length(self):
        """Test default seed is 32 bytes hex encoded."""
        seed = generate_seed()
        assert len(seed) == 64
        assert is_valid_seed(seed)

    def test_custom_length(self):
        assert len(generate_seed(16)) == 32

    def test_unique(self):
        """Test seeds are not repeated."""
        assert generate_seed() != generate_seed()

    def test_randomness_failure(self):
        """Test missing randomness raises IdentityError."""
        with patch("secrets.token_bytes", side_effect=OSError("no entropy")):
            with pytest.raises(IdentityError, match="no entropy"):
                generate_seed()


class TestIsValidSeed:
    @pytest.mark.parametrize("seed", ["", "ab" * 31, "zz" * 32, None, 1234])
    def test_invalid(self, seed):
        assert is_valid_seed(seed) is False

    def test_uppercase_hex(self):
        assert is_valid_seed("AB" * 32) is True
