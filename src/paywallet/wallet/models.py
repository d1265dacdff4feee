"""
Wallet data models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from coincurve import PrivateKey


@dataclass(frozen=True)
class WalletAccount:
    """One signing identity of the pool, derived at m/44'/60'/0'/0/{index}"""

    index: int
    private_key: bytes = field(repr=False)
    address: str

    @property
    def title(self) -> str:
        return f"Wallet {self.index}"

    @property
    def public_key(self) -> bytes:
        """Uncompressed secp256k1 public key (65 bytes)"""
        return PrivateKey(self.private_key).public_key.format(compressed=False)
