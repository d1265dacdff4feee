"""
Wallet pool service.

A fixed pool of accounts is derived from one mnemonic at setup time:

    m/44'/60'/0'/0/{index}    index = 0..WALLET_POOL_SIZE-1

This is the MetaMask layout (first key at .../0/0, further accounts by
incrementing the last component), so the same mnemonic shows the same
addresses in wallets following that convention.
"""

from __future__ import annotations

import threading
from collections.abc import Sequence

from loguru import logger

from paywallet.wallet.bip32 import HDKey, mnemonic_to_seed
from paywallet.wallet.models import WalletAccount
from paywallet.wallet.signing import LocalSigner, Signer
from paywallet.wallet.storage import IndexStore, MemoryIndexStore

WALLET_POOL_SIZE = 10
DERIVATION_PATH_PREFIX = "m/44'/60'/0'/0"


class InvalidIndexError(ValueError):
    kind = "invalid_index"


def derivation_path(index: int) -> str:
    return f"{DERIVATION_PATH_PREFIX}/{index}"


def derive_account(seed: bytes, index: int) -> WalletAccount:
    """Derive the account at index from a BIP39 seed"""
    if isinstance(index, bool) or not isinstance(index, int):
        raise InvalidIndexError(f"Wallet index must be an integer, got {index!r}")
    if not 0 <= index < WALLET_POOL_SIZE:
        raise InvalidIndexError(f"Wallet index {index} outside pool of {WALLET_POOL_SIZE}")

    key = HDKey.from_seed(seed).derive(derivation_path(index))
    return WalletAccount(
        index=index,
        private_key=key.get_private_key_bytes(),
        address=key.get_address(),
    )


def generate_pool(seed: bytes) -> list[WalletAccount]:
    """Derive all WALLET_POOL_SIZE accounts, ordered by index"""
    # Derive the shared parent once; only the last step differs per account
    parent = HDKey.from_seed(seed).derive(DERIVATION_PATH_PREFIX)

    pool = []
    for index in range(WALLET_POOL_SIZE):
        key = parent.derive_child(index)
        pool.append(
            WalletAccount(
                index=index,
                private_key=key.get_private_key_bytes(),
                address=key.get_address(),
            )
        )
    return pool


def active_account(pool: Sequence[WalletAccount], stored_index: int | None) -> WalletAccount:
    """
    Pick the account whose index was stored, falling back to the first
    account when nothing is stored or the stored value does not match.
    """
    if not pool:
        raise ValueError("Wallet pool is empty")

    if stored_index is not None:
        for account in pool:
            if account.index == stored_index:
                return account

    return pool[0]


class WalletStore:
    """
    Owns the account pool and the active account selection.

    Created once by the application and handed to whatever needs signing.
    The pool never changes after construction; only the active index does.
    """

    def __init__(
        self,
        seed: bytes,
        index_store: IndexStore | None = None,
        signer: Signer | None = None,
    ):
        self.index_store = index_store or MemoryIndexStore()
        self.signer = signer or LocalSigner()
        self._accounts = tuple(generate_pool(seed))
        self._lock = threading.Lock()

        logger.info(f"Initialized wallet pool with {len(self._accounts)} accounts")

    @classmethod
    def from_mnemonic(
        cls,
        mnemonic: str,
        passphrase: str = "",
        index_store: IndexStore | None = None,
        signer: Signer | None = None,
    ) -> WalletStore:
        return cls(mnemonic_to_seed(mnemonic, passphrase), index_store=index_store, signer=signer)

    @property
    def accounts(self) -> tuple[WalletAccount, ...]:
        return self._accounts

    @property
    def active_index(self) -> int:
        return self.active_account.index

    @property
    def active_account(self) -> WalletAccount:
        with self._lock:
            return active_account(self._accounts, self.index_store.get())

    def activate(self, index: int) -> WalletAccount:
        """Make the account at index the active one and persist the choice"""
        if isinstance(index, bool) or not isinstance(index, int):
            raise InvalidIndexError(f"Wallet index must be an integer, got {index!r}")
        if not 0 <= index < len(self._accounts):
            raise InvalidIndexError(f"Wallet index {index} outside pool of {len(self._accounts)}")

        with self._lock:
            self.index_store.set(index)

        account = self._accounts[index]
        logger.info(f"Activated {account.title} ({account.address})")
        return account

    def is_active(self, account: WalletAccount) -> bool:
        return account.address == self.active_account.address

    def account_for_address(self, address: str) -> WalletAccount | None:
        wanted = address.lower()
        for account in self._accounts:
            if account.address.lower() == wanted:
                return account
        return None

    def sign(self, payload: str) -> tuple[WalletAccount, str]:
        """
        Sign payload with the account active right now.

        The active index is read and the signature produced under the same
        lock, so a concurrent activate() cannot swap the key mid-signature.
        """
        with self._lock:
            account = active_account(self._accounts, self.index_store.get())
            signature = self.signer.sign(account.private_key, payload)

        logger.debug(f"Signed payload with {account.title} ({account.address})")
        return account, signature
