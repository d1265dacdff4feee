"""
HD wallet: key derivation, account pool and signing.
"""

from paywallet.wallet.models import WalletAccount
from paywallet.wallet.service import (
    WALLET_POOL_SIZE,
    InvalidIndexError,
    WalletStore,
    active_account,
    derive_account,
    generate_pool,
)

__all__ = [
    "WALLET_POOL_SIZE",
    "InvalidIndexError",
    "WalletAccount",
    "WalletStore",
    "active_account",
    "derive_account",
    "generate_pool",
]
