"""
REST ethereum service client.

Talks to a Toshi-style ethereum service which builds transaction
skeletons server side:

    POST /v1/tx/skel          -> {"gas", "gas_price", "tx", "value"?}
    GET  /v1/balance/{addr}   -> {"confirmed_balance", "unconfirmed_balance"}
    POST /v1/tx               -> {"tx_hash"}
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx
from loguru import logger

from paywallet.backends.base import ChainClient, ChainClientError, TransactionSkeleton
from paywallet.payments.models import parse_hex_quantity

# Timeout for regular API calls (seconds)
DEFAULT_TIMEOUT = 30.0


class HttpChainClient(ChainClient):
    """
    Chain client using the ethereum service REST API.

    Balances fetched through get_balance() are remembered per address so
    display code can show a last known value via cached_balance(). Payment
    code never reads that cache.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=self.base_url, timeout=timeout, transport=transport
        )
        self._balance_cache: dict[str, int] = {}

    async def _request(self, method: str, path: str, json: Any = None) -> Any:
        """
        Make a request to the ethereum service.

        Raises:
            ChainClientError: On transport errors, non-2xx status or an
                error body
        """
        try:
            response = await self.client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.error(f"Request failed: {method} {path} - {e}")
            raise ChainClientError(f"Request to {path} failed: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = None

        if response.is_error or (isinstance(data, dict) and data.get("errors")):
            message = _error_message(data) or f"HTTP {response.status_code}"
            logger.error(f"Ethereum service error: {method} {path} - {message}")
            raise ChainClientError(message)

        if data is None:
            raise ChainClientError(f"Invalid JSON response from {path}")

        return data

    async def quote_transaction(self, params: Mapping[str, Any]) -> TransactionSkeleton:
        data = await self._request("POST", "/v1/tx/skel", json=dict(params))
        if not isinstance(data, dict):
            raise ChainClientError("Unexpected transaction skeleton response")

        return TransactionSkeleton(
            gas_price=data.get("gas_price"),
            gas=data.get("gas"),
            transaction=data.get("tx"),
            value=data.get("value"),
        )

    async def get_balance(self, address: str) -> int:
        data = await self._request("GET", f"/v1/balance/{address}")
        if not isinstance(data, dict):
            raise ChainClientError("Unexpected balance response")

        # The unconfirmed balance includes pending transactions, which is
        # what can actually be spent next
        raw = data.get("unconfirmed_balance", data.get("confirmed_balance"))
        if raw is None:
            raise ChainClientError("Balance missing from response")

        # Only hex strings or JSON integers; a float or bool would lose wei silently
        if isinstance(raw, bool) or not isinstance(raw, (str, int)):
            raise ChainClientError(f"Invalid balance value {raw!r}")
        if isinstance(raw, str):
            try:
                balance = parse_hex_quantity(raw)
            except ValueError as e:
                raise ChainClientError(f"Invalid balance value {raw!r}") from e
        elif raw < 0:
            raise ChainClientError(f"Invalid balance value {raw!r}")
        else:
            balance = raw

        self._balance_cache[address.lower()] = balance
        return balance

    def cached_balance(self, address: str) -> int | None:
        """Last balance fetched for address, if any"""
        return self._balance_cache.get(address.lower())

    async def broadcast(self, transaction: str, signature: str) -> str:
        data = await self._request(
            "POST", "/v1/tx", json={"tx": transaction, "signature": signature}
        )
        tx_hash = data.get("tx_hash") if isinstance(data, dict) else None
        if not tx_hash:
            raise ChainClientError("Transaction hash missing from response")

        logger.info(f"Broadcast transaction {tx_hash}")
        return tx_hash

    async def close(self) -> None:
        await self.client.aclose()


def _error_message(data: Any) -> str | None:
    if not isinstance(data, dict):
        return None
    errors = data.get("errors")
    if isinstance(errors, list) and errors:
        first = errors[0]
        if isinstance(first, dict):
            return first.get("message") or first.get("id")
        return str(first)
    return data.get("message")
