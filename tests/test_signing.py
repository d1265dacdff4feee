"""
Tests for transaction signing utilities.
"""

import pytest

from paywallet.wallet.bip32 import mnemonic_to_seed
from paywallet.wallet.service import derive_account
from paywallet.wallet.signing import (
    LocalSigner,
    TransactionSigningError,
    payload_hash,
    recover_address,
)

from .conftest import UNSIGNED_TX


@pytest.fixture
def account():
    return derive_account(mnemonic_to_seed("test seed"), 0)


class TestPayloadHash:
    def test_prefix_optional(self):
        assert payload_hash("0xdeadbeef") == payload_hash("deadbeef")

    def test_empty_payload(self):
        assert payload_hash("0x").hex() == (
            "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
        )

    def test_invalid_hex(self):
        with pytest.raises(TransactionSigningError, match="not valid hex"):
            payload_hash("0xzz")


class TestLocalSigner:
    def test_signature_format(self, account):
        signature = LocalSigner().sign(account.private_key, UNSIGNED_TX)
        assert signature.startswith("0x")
        assert len(signature) == 2 + 65 * 2
        assert int(signature[-2:], 16) in (0, 1)

    def test_deterministic(self, account):
        signer = LocalSigner()
        assert signer.sign(account.private_key, UNSIGNED_TX) == signer.sign(
            account.private_key, UNSIGNED_TX
        )

    def test_recovers_signer_address(self, account):
        signature = LocalSigner().sign(account.private_key, UNSIGNED_TX)
        assert recover_address(UNSIGNED_TX, signature) == account.address

    def test_other_payload_recovers_other_address(self, account):
        signature = LocalSigner().sign(account.private_key, UNSIGNED_TX)
        assert recover_address("0x00", signature) != account.address

    def test_invalid_private_key(self):
        with pytest.raises(TransactionSigningError, match="Invalid private key"):
            LocalSigner().sign(b"\x00" * 32, UNSIGNED_TX)


class TestRecoverAddress:
    def test_wrong_length(self):
        with pytest.raises(TransactionSigningError, match="Invalid signature length"):
            recover_address(UNSIGNED_TX, "0x" + "00" * 64)

    def test_not_hex(self):
        with pytest.raises(TransactionSigningError, match="not valid hex"):
            recover_address(UNSIGNED_TX, "0xnothex")
