"""
Ethereum address generation utilities.
"""

from __future__ import annotations

from Crypto.Hash import keccak

ADDRESS_LENGTH = 20


def keccak256(data: bytes) -> bytes:
    """Keccak-256 (pre-standard SHA3, as used by Ethereum)"""
    h = keccak.new(digest_bits=256)
    h.update(data)
    return h.digest()


def to_checksum_address(address: str) -> str:
    """
    Apply EIP-55 mixed-case checksum encoding to a hex address.
    Accepts the address with or without 0x prefix, in any case.
    """
    hex_addr = address.lower().removeprefix("0x")
    if len(hex_addr) != ADDRESS_LENGTH * 2:
        raise ValueError(f"Invalid address length: {len(hex_addr)}")
    int(hex_addr, 16)

    addr_hash = keccak256(hex_addr.encode("ascii")).hex()
    checksummed = "".join(
        c.upper() if c.isalpha() and int(addr_hash[i], 16) >= 8 else c
        for i, c in enumerate(hex_addr)
    )
    return "0x" + checksummed


def is_valid_address(address: str) -> bool:
    """
    Check that address is 0x + 40 hex chars. Mixed-case addresses must
    also carry a correct EIP-55 checksum.
    """
    if not isinstance(address, str) or not address.startswith("0x"):
        return False
    try:
        checksummed = to_checksum_address(address)
    except ValueError:
        return False

    body = address[2:]
    if body.islower() or body.isupper():
        return True
    return checksummed == address


def pubkey_to_address(pubkey_bytes: bytes) -> str:
    """
    Convert a secp256k1 public key to a checksummed Ethereum address.

    Args:
        pubkey_bytes: 65-byte uncompressed key (0x04 prefix) or the raw
            64-byte X||Y coordinates

    Returns:
        EIP-55 encoded address
    """
    if len(pubkey_bytes) == 65:
        if pubkey_bytes[0] != 0x04:
            raise ValueError("Uncompressed pubkey must start with 0x04")
        pubkey_bytes = pubkey_bytes[1:]

    if len(pubkey_bytes) != 64:
        raise ValueError(f"Invalid uncompressed pubkey length: {len(pubkey_bytes)}")

    address_bytes = keccak256(pubkey_bytes)[-ADDRESS_LENGTH:]
    return to_checksum_address(address_bytes.hex())
