"""
BIP32 HD key derivation for Ethereum accounts.
Implements BIP44 (coin type 60) derivation paths.
"""

from __future__ import annotations

import hashlib
import hmac

from coincurve import PrivateKey, PublicKey

# secp256k1 curve order
SECP256K1_N = int("FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141", 16)

HARDENED_OFFSET = 0x80000000
HARDENED_MARKERS = ("'", "h", "H")


class HDKey:
    """
    Hierarchical Deterministic Key.
    Implements BIP32 private parent to private child derivation.
    """

    def __init__(self, private_key: PrivateKey, chain_code: bytes, depth: int = 0):
        self._private_key = private_key
        self._public_key = private_key.public_key
        self.chain_code = chain_code
        self.depth = depth

    @property
    def private_key(self) -> PrivateKey:
        """Return the coincurve PrivateKey instance."""
        return self._private_key

    @property
    def public_key(self) -> PublicKey:
        """Return the coincurve PublicKey instance."""
        return self._public_key

    @classmethod
    def from_seed(cls, seed: bytes) -> HDKey:
        """Create master HD key from seed"""
        hmac_result = hmac.new(b"Bitcoin seed", seed, hashlib.sha512).digest()
        key_bytes = hmac_result[:32]
        chain_code = hmac_result[32:]

        private_key = PrivateKey(key_bytes)

        return cls(private_key, chain_code, depth=0)

    def derive(self, path: str) -> HDKey:
        """
        Derive child key from path notation (e.g., "m/44'/60'/0'/0/0")
        ', h or H marks a hardened step
        """
        root, *parts = path.split("/")
        if root != "m":
            raise ValueError("Path must start with 'm'")

        key = self
        for part in parts:
            if part:
                key = key.derive_child(parse_path_component(part))
        return key

    def derive_child(self, index: int) -> HDKey:
        """Derive a child key at the given index (>= 2^31 means hardened)"""
        hardened = index >= HARDENED_OFFSET

        if hardened:
            priv_bytes = self._private_key.secret
            data = b"\x00" + priv_bytes + index.to_bytes(4, "big")
        else:
            pub_bytes = self._public_key.format(compressed=True)
            data = pub_bytes + index.to_bytes(4, "big")

        hmac_result = hmac.new(self.chain_code, data, hashlib.sha512).digest()
        key_offset = hmac_result[:32]
        child_chain = hmac_result[32:]

        parent_key_int = int.from_bytes(self._private_key.secret, "big")
        offset_int = int.from_bytes(key_offset, "big")

        if offset_int >= SECP256K1_N:
            raise ValueError("Invalid child key")

        child_key_int = (parent_key_int + offset_int) % SECP256K1_N

        if child_key_int == 0:
            raise ValueError("Invalid child key")

        child_private_key = PrivateKey(child_key_int.to_bytes(32, "big"))

        return HDKey(child_private_key, child_chain, depth=self.depth + 1)

    def get_private_key_bytes(self) -> bytes:
        """Get private key as 32 bytes"""
        return self._private_key.secret

    def get_public_key_bytes(self, compressed: bool = False) -> bytes:
        """Get public key bytes (uncompressed by default, as addresses need X||Y)"""
        return self._public_key.format(compressed=compressed)

    def get_address(self) -> str:
        """Get the EIP-55 checksummed Ethereum address for this key"""
        from paywallet.wallet.address import pubkey_to_address

        return pubkey_to_address(self.get_public_key_bytes(compressed=False))


def mnemonic_to_seed(mnemonic: str, passphrase: str = "") -> bytes:
    """
    Convert BIP39 mnemonic to seed.
    The phrase is not checked against the wordlist, so any phrase works.
    """
    from hashlib import pbkdf2_hmac

    mnemonic_bytes = mnemonic.encode("utf-8")
    salt = ("mnemonic" + passphrase).encode("utf-8")

    seed = pbkdf2_hmac("sha512", mnemonic_bytes, salt, 2048, dklen=64)
    return seed


def parse_path_component(part: str) -> int:
    """
    Child number for one path component: "44'" / "44h" / "44H" -> 44 + 2^31.
    Only one trailing marker is allowed and the number must be plain digits.
    """
    hardened = part[-1:] in HARDENED_MARKERS
    digits = part[:-1] if hardened else part

    if not digits.isdigit() or not digits.isascii():
        raise ValueError(f"Invalid path component: {part!r}")

    index = int(digits)
    if index >= HARDENED_OFFSET:
        raise ValueError(f"Path component out of range: {part}")

    return index + HARDENED_OFFSET if hardened else index
