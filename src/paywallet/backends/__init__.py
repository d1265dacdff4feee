"""
Chain client implementations.

Available clients:
- HttpChainClient: REST ethereum service (transaction skeletons, balances, broadcast)
"""

from paywallet.backends.base import ChainClient, ChainClientError, TransactionSkeleton
from paywallet.backends.http import HttpChainClient

__all__ = [
    "ChainClient",
    "ChainClientError",
    "HttpChainClient",
    "TransactionSkeleton",
]
