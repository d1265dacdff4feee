"""
Transaction signing utilities for Ethereum-style payloads.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from coincurve import PrivateKey, PublicKey

from paywallet.wallet.address import keccak256, pubkey_to_address

SIGNATURE_LENGTH = 65


class TransactionSigningError(Exception):
    pass


def payload_hash(payload: str) -> bytes:
    """Keccak-256 of a hex encoded payload (0x prefix optional)"""
    try:
        data = bytes.fromhex(payload.removeprefix("0x"))
    except ValueError as e:
        raise TransactionSigningError(f"Payload is not valid hex: {e}") from e
    return keccak256(data)


class Signer(ABC):
    """Signing capability used to authorize a quoted transaction."""

    @abstractmethod
    def sign(self, private_key: bytes, payload: str) -> str:
        """Sign a hex payload, returning a 0x-prefixed hex signature"""


class LocalSigner(Signer):
    """
    Signs in-process with coincurve.

    The signature is the recoverable 65 byte form r || s || recovery_id over
    keccak256(payload), which is what the node expects next to the unsigned
    transaction when broadcasting.
    """

    def sign(self, private_key: bytes, payload: str) -> str:
        digest = payload_hash(payload)
        try:
            key = PrivateKey(private_key)
        except ValueError as e:
            raise TransactionSigningError(f"Invalid private key: {e}") from e

        # Already hashed, so skip coincurve's default sha256
        signature = key.sign_recoverable(digest, hasher=None)
        return "0x" + signature.hex()


def recover_address(payload: str, signature: str) -> str:
    """Recover the checksummed address that produced signature over payload."""
    digest = payload_hash(payload)
    try:
        sig_bytes = bytes.fromhex(signature.removeprefix("0x"))
    except ValueError as e:
        raise TransactionSigningError(f"Signature is not valid hex: {e}") from e

    if len(sig_bytes) != SIGNATURE_LENGTH:
        raise TransactionSigningError(f"Invalid signature length: {len(sig_bytes)}")

    try:
        pubkey = PublicKey.from_signature_and_message(sig_bytes, digest, hasher=None)
    except Exception as e:
        raise TransactionSigningError(f"Failed to recover public key: {e}") from e

    return pubkey_to_address(pubkey.format(compressed=False))
