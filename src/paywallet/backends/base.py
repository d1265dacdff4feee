"""
Base chain client interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


class ChainClientError(Exception):
    """Node or network failure reported by a chain client"""


@dataclass
class TransactionSkeleton:
    """
    Unsigned transaction quoted by the node.

    All quantities are hex strings exactly as returned. value is only set
    when the node computed it (sending the "max" amount).
    """

    gas_price: str | None
    gas: str | None
    transaction: str | None
    value: str | None = None


class ChainClient(ABC):
    """
    Abstract chain client interface.
    Implementations talk to a node or an indexing service; the payment
    core only needs quoting, live balances and broadcasting.
    """

    @abstractmethod
    async def quote_transaction(self, params: Mapping[str, Any]) -> TransactionSkeleton:
        """Build an unsigned transaction and fee quote for the given payment parameters"""

    @abstractmethod
    async def get_balance(self, address: str) -> int:
        """Get the current balance in wei, always from the authoritative source"""

    @abstractmethod
    async def broadcast(self, transaction: str, signature: str) -> str:
        """Submit a signed transaction, returns the transaction hash"""

    async def close(self) -> None:
        """Close client connection"""
        pass
