"""
Identity primitives for Lossless.

Auction principals (owner, bidders, the custody account) are opaque 20-byte
addresses. They are derived the Ethereum way so that identities line up with
the wallets bidders already hold:

    address = keccak256(public_key)[-20:]

where public_key is the 64-byte uncompressed secp256k1 point (x || y).
"""

import secrets
from dataclasses import dataclass

from Crypto.Hash import keccak
from py_ecc.secp256k1 import secp256k1


# =============================================================================
# Constants
# =============================================================================

# secp256k1 curve order (number of points on the curve)
SECP256K1_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

ADDRESS_SIZE = 20


# =============================================================================
# Hashing
# =============================================================================


def keccak256(data: bytes) -> bytes:
    """
    Compute Keccak-256 hash (Ethereum-style).

    Used for: address derivation, custody account derivation.
    """
    k = keccak.new(digest_bits=256)
    k.update(data)
    return k.digest()


# =============================================================================
# Key Generation
# =============================================================================


@dataclass
class KeyPair:
    """
    An ECDSA keypair on secp256k1.

    Attributes:
        private_key: 32-byte secret key (integer in [1, order-1])
        public_key: 64-byte uncompressed public key (x || y coordinates)
    """
    private_key: bytes
    public_key: bytes

    @property
    def address(self) -> bytes:
        """20-byte address of this keypair."""
        return address_from_public_key(self.public_key)

    @property
    def address_hex(self) -> str:
        """Address hex-encoded with 0x prefix."""
        return bytes_to_hex(self.address)


def private_key_to_public_key(private_key: bytes) -> bytes:
    """
    Derive public key from private key.

    Args:
        private_key: 32-byte private key

    Returns:
        64-byte uncompressed public key
    """
    if len(private_key) != 32:
        raise ValueError("Private key must be 32 bytes")

    # (x, y) tuple of integers
    point = secp256k1.privtopub(private_key)
    return point[0].to_bytes(32, byteorder="big") + point[1].to_bytes(32, byteorder="big")


def generate_keypair() -> KeyPair:
    """
    Generate a new random keypair.

    Uses cryptographically secure random number generator.
    """
    private_key_int = secrets.randbelow(SECP256K1_ORDER - 1) + 1
    private_key = private_key_int.to_bytes(32, byteorder="big")
    return KeyPair(private_key=private_key, public_key=private_key_to_public_key(private_key))


def address_from_public_key(public_key: bytes) -> bytes:
    """Derive the 20-byte address from a 64-byte public key."""
    if len(public_key) != 64:
        raise ValueError("Public key must be 64 bytes")
    return keccak256(public_key)[-ADDRESS_SIZE:]


def derive_custody_address(owner: bytes, nonce: int) -> bytes:
    """
    Derive the address holding an auction's pooled funds.

    Like a contract creation address, it is keyed by the creator and the
    creator's account nonce, so every auction an owner creates on the same
    AccountBook gets its own custody account.
    """
    return keccak256(b"lossless-custody" + owner + nonce.to_bytes(32, "big"))[-ADDRESS_SIZE:]


# =============================================================================
# Utility Functions
# =============================================================================


def bytes_to_hex(data: bytes) -> str:
    """Convert bytes to hex string with 0x prefix."""
    return "0x" + data.hex()


def hex_to_bytes(hex_str: str) -> bytes:
    """Convert hex string (with or without 0x prefix) to bytes."""
    if hex_str.startswith("0x") or hex_str.startswith("0X"):
        hex_str = hex_str[2:]
    return bytes.fromhex(hex_str)


def short_address(address) -> str:
    """Abbreviated hex form for log lines, or 'none'."""
    if address is None:
        return "none"
    return bytes_to_hex(address)[:10] + "..."
