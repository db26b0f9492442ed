"""
Hash-to-scalar tests
"""

import pytest

from blindsecp256k1.errors import ConfigError
from blindsecp256k1.field import ORDER, Scalar
from blindsecp256k1.hash import (
    get_hash_to_scalar,
    keccak256,
    keccak256_to_scalar,
    sha256_to_scalar,
    tagged_hash,
)

EMPTY_KECCAK = bytes.fromhex(
    "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
)


class TestKeccak:
    """Tests for the default hash."""

    def test_empty_digest(self):
        assert keccak256(b"") == EMPTY_KECCAK

    def test_signed_interpretation(self):
        # top bit of this digest is set, so it reads as negative
        assert EMPTY_KECCAK[0] & 0x80
        expected = int.from_bytes(EMPTY_KECCAK, "big", signed=True) % ORDER
        assert keccak256_to_scalar(b"") == Scalar(expected)

    def test_deterministic(self):
        assert keccak256_to_scalar(b"test") == keccak256_to_scalar(b"test")
        assert keccak256_to_scalar(b"test") != keccak256_to_scalar(b"tesT")


class TestTaggedSha256:
    """Tests for the BIP-340 tagged hash."""

    def test_tag_separates(self):
        assert tagged_hash(b"a", b"m") != tagged_hash(b"b", b"m")

    def test_in_range(self):
        s = sha256_to_scalar(b"test")
        assert 0 <= s.value < ORDER
        assert s != keccak256_to_scalar(b"test")


class TestRegistry:
    """Tests for name lookup."""

    def test_lookup(self):
        assert get_hash_to_scalar("keccak256") is keccak256_to_scalar
        assert get_hash_to_scalar("sha256") is sha256_to_scalar

    def test_unknown(self):
        with pytest.raises(ConfigError):
            get_hash_to_scalar("md5")
