"""
Unit tests for identity primitives.

Tests cover:
1. Key generation
2. Address derivation
3. Custody address derivation
4. Hex helpers
"""

import pytest

from lossless.crypto import (
    SECP256K1_ORDER,
    address_from_public_key,
    bytes_to_hex,
    derive_custody_address,
    generate_keypair,
    hex_to_bytes,
    keccak256,
    private_key_to_public_key,
    short_address,
)


class TestKeyGeneration:
    """Tests for key generation."""

    def test_keypair_lengths(self):
        kp = generate_keypair()
        assert len(kp.private_key) == 32
        assert len(kp.public_key) == 64

    def test_private_key_in_range(self):
        kp = generate_keypair()
        assert 1 <= int.from_bytes(kp.private_key, "big") < SECP256K1_ORDER

    def test_public_key_matches_private(self):
        kp = generate_keypair()
        assert private_key_to_public_key(kp.private_key) == kp.public_key

    def test_keypairs_are_unique(self):
        assert generate_keypair().address != generate_keypair().address

    def test_private_key_length_checked(self):
        with pytest.raises(ValueError):
            private_key_to_public_key(b"\x01" * 31)


class TestAddresses:
    """Tests for address derivation."""

    def test_keccak_empty(self):
        """Known Keccak-256 vector (not SHA3-256)."""
        assert keccak256(b"").hex() == (
            "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
        )

    def test_known_address(self):
        """Private key 1 maps to the well-known Ethereum address."""
        public_key = private_key_to_public_key((1).to_bytes(32, "big"))
        assert bytes_to_hex(address_from_public_key(public_key)) == (
            "0x7e5f4552091a69125d5dfcb7b8c2659029395bdf"
        )

    def test_address_properties(self):
        kp = generate_keypair()
        assert len(kp.address) == 20
        assert kp.address_hex == bytes_to_hex(kp.address)
        assert len(kp.address_hex) == 42

    def test_public_key_length_checked(self):
        with pytest.raises(ValueError):
            address_from_public_key(b"\x00" * 33)

    def test_custody_address_keyed_by_nonce(self):
        owner = b"\x01" * 20
        assert derive_custody_address(owner, 0) == derive_custody_address(owner, 0)
        assert derive_custody_address(owner, 0) != derive_custody_address(owner, 1)
        assert derive_custody_address(owner, 0) != derive_custody_address(b"\x02" * 20, 0)
        assert derive_custody_address(owner, 0) != owner


class TestHexHelpers:
    """Tests for hex conversion."""

    def test_round_trip(self):
        data = b"\xde\xad\xbe\xef"
        assert hex_to_bytes(bytes_to_hex(data)) == data

    def test_without_prefix(self):
        assert hex_to_bytes("beef") == b"\xbe\xef"
        assert hex_to_bytes("0XBEEF") == b"\xbe\xef"

    def test_short_address(self):
        assert short_address(None) == "none"
        assert short_address(b"\xab" * 20) == "0xabababab..."


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
