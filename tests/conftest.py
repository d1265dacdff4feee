"""
Test configuration for paywallet tests.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from paywallet.backends.base import TransactionSkeleton
from paywallet.wallet.bip32 import mnemonic_to_seed
from paywallet.wallet.service import WalletStore
from paywallet.wallet.storage import MemoryIndexStore

# 1 gwei gas price, 21000 gas
GAS_PRICE_HEX = "0x3B9ACA00"
GAS_HEX = "0x5208"
FEE_WEI = 21_000_000_000_000

RECIPIENT = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
UNSIGNED_TX = "0xe9808504a817c800825208945aaeb6053f3e94c9b9a09f33669435e7ef1beaed880de0b6b3a764000080"


@pytest.fixture
def sample_mnemonic() -> str:
    """Test mnemonic (not for production use!)."""
    return (
        "abandon abandon abandon abandon abandon abandon "
        "abandon abandon abandon abandon abandon about"
    )


@pytest.fixture
def test_seed() -> bytes:
    return mnemonic_to_seed("test seed")


@pytest.fixture
def index_store() -> MemoryIndexStore:
    return MemoryIndexStore()


@pytest.fixture
def wallet(test_seed: bytes, index_store: MemoryIndexStore) -> WalletStore:
    return WalletStore(test_seed, index_store=index_store)


@pytest.fixture
def skeleton() -> TransactionSkeleton:
    return TransactionSkeleton(gas_price=GAS_PRICE_HEX, gas=GAS_HEX, transaction=UNSIGNED_TX)


@pytest.fixture
def mock_client(skeleton: TransactionSkeleton):
    """Create a mock chain client with a 1 gwei / 21000 gas quote."""
    client = MagicMock()
    client.quote_transaction = AsyncMock(return_value=skeleton)
    client.get_balance = AsyncMock(return_value=FEE_WEI)
    client.broadcast = AsyncMock(return_value="0xtxhash")
    client.close = AsyncMock()
    return client
