"""
Payment flow: quote, check balance, sign, broadcast.

One PaymentManager drives one payment:

    IDLE -> QUOTING_FEE -> CHECKING_BALANCE -> READY -> SIGNING -> BROADCASTING -> SENT

Any failure moves to FAILED with the error kept on `error` and raised to
the caller. Nothing is retried here; a caller may quote again from FAILED.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from decimal import Decimal
from typing import Any, TypeVar

from loguru import logger
from pydantic import ValidationError

from paywallet.backends.base import ChainClient, ChainClientError, TransactionSkeleton
from paywallet.payments.converter import ether_string, fiat_string_with_code
from paywallet.payments.errors import (
    BalanceQueryError,
    BroadcastError,
    FeeQuoteError,
    NoPendingTransactionError,
    PaymentError,
    PaymentInProgressError,
    PaymentRequestError,
    SigningError,
)
from paywallet.payments.models import (
    FeeQuote,
    PaymentInfo,
    PaymentRequest,
    PaymentState,
    RawPaymentInfo,
    parse_hex_quantity,
)
from paywallet.wallet.service import WalletStore

T = TypeVar("T")

_BUSY_STATES = (
    PaymentState.QUOTING_FEE,
    PaymentState.CHECKING_BALANCE,
    PaymentState.SIGNING,
    PaymentState.BROADCASTING,
)


def parse_fee_quote(skeleton: TransactionSkeleton) -> FeeQuote:
    """
    Turn a raw skeleton into exact integer amounts.

    Raises:
        FeeQuoteError: If a required field is missing or not hex
    """
    if skeleton.gas_price is None or skeleton.gas is None or not skeleton.transaction:
        raise FeeQuoteError("Transaction skeleton is missing gas price, gas or transaction")

    try:
        gas_price = parse_hex_quantity(skeleton.gas_price)
        gas_limit = parse_hex_quantity(skeleton.gas)
        computed_value = (
            parse_hex_quantity(skeleton.value) if skeleton.value is not None else None
        )
    except ValueError as e:
        raise FeeQuoteError(f"Invalid quantity in transaction skeleton: {e}") from e

    return FeeQuote(
        gas_price=gas_price,
        gas_limit=gas_limit,
        transaction=skeleton.transaction,
        computed_value=computed_value,
    )


def resolve_paid_value(request: PaymentRequest, quote: FeeQuote) -> int:
    """
    Native amount leaving the account, in wei.

    - "max" requested and the node computed a value: the computed value
    - token transfer: zero, the token amount travels in the call data
    - otherwise: the requested value
    """
    if request.is_max_value and quote.computed_value is not None:
        return quote.computed_value
    if request.is_token_transfer:
        return 0
    return request.requested_value


class PaymentManager:
    """
    Computes and executes a single payment.

    Args:
        parameters: PaymentRequest or a mapping keyed like PaymentParameters
        chain_client: Node access for quotes, balances and broadcast
        wallet: Wallet whose active account pays and signs
        exchange_rate: Fiat per ether, used for display strings only
        currency: Fiat currency code
    """

    def __init__(
        self,
        parameters: PaymentRequest | Mapping[str, Any],
        chain_client: ChainClient,
        wallet: WalletStore,
        exchange_rate: Decimal,
        currency: str = "USD",
    ):
        if isinstance(parameters, PaymentRequest):
            self.request = parameters
        else:
            try:
                self.request = PaymentRequest.model_validate(dict(parameters))
            except ValidationError as e:
                raise PaymentRequestError(str(e)) from e

        self.chain_client = chain_client
        self.wallet = wallet
        self.exchange_rate = Decimal(exchange_rate)
        self.currency = currency

        self.state = PaymentState.IDLE
        self.error: PaymentError | None = None
        self.transaction: str | None = None
        self.fee_quote: FeeQuote | None = None
        self.raw_payment_info: RawPaymentInfo | None = None
        self.transaction_hash: str | None = None

    def _fail(self, error: PaymentError) -> PaymentError:
        self.state = PaymentState.FAILED
        self.error = error
        self.transaction = None
        logger.warning(f"Payment failed ({error.kind}): {error}")
        return error

    def _interrupted(self) -> None:
        """
        Attempt abandoned mid-request (task cancelled). A quote simply resets
        to IDLE; an interrupted broadcast may or may not have reached the
        node, so it ends FAILED and the transaction is not kept.
        """
        logger.warning(f"Payment attempt interrupted while {self.state.value}")
        if self.state == PaymentState.BROADCASTING:
            self.state = PaymentState.FAILED
            self.error = BroadcastError("Broadcast interrupted, outcome unknown")
        else:
            self.state = PaymentState.IDLE
        self.transaction = None

    async def _chain_call(
        self, error_cls: type[PaymentError], call: Callable[[], Awaitable[T]]
    ) -> T:
        """Run one chain client request, mapping any failure to error_cls"""
        try:
            return await call()
        except ChainClientError as e:
            raise self._fail(error_cls(str(e))) from e
        except Exception as e:
            raise self._fail(error_cls(f"Unexpected chain client error: {e!r}")) from e
        except BaseException:
            self._interrupted()
            raise

    def _fiat(self, wei: int) -> str:
        return fiat_string_with_code(wei, self.exchange_rate, self.currency)

    @property
    def payer_address(self) -> str:
        return self.request.from_address or self.wallet.active_account.address

    async def fetch_raw_payment_info(self) -> RawPaymentInfo:
        """
        Quote the transaction, then fetch the live balance and compare.

        Raises:
            PaymentInProgressError: If this payment is already quoting or sending
            FeeQuoteError: If the node cannot quote
            BalanceQueryError: If the balance cannot be fetched
        """
        if self.state in _BUSY_STATES:
            raise PaymentInProgressError(f"Payment is busy ({self.state.value})")

        self.state = PaymentState.QUOTING_FEE
        self.error = None
        self.transaction = None
        self.fee_quote = None
        self.raw_payment_info = None
        self.transaction_hash = None

        skeleton = await self._chain_call(
            FeeQuoteError, lambda: self.chain_client.quote_transaction(self.request.to_params())
        )

        try:
            quote = parse_fee_quote(skeleton)
        except FeeQuoteError as e:
            self._fail(e)
            raise

        self.fee_quote = quote
        self.transaction = quote.transaction

        fee = quote.fee
        value = resolve_paid_value(self.request, quote)
        total = value + fee
        logger.debug(f"Quoted payment: value={value} fee={fee} total={total} wei")

        # Balance is fetched only after the quote, so it is checked against this fee
        self.state = PaymentState.CHECKING_BALANCE
        balance = await self._chain_call(
            BalanceQueryError, lambda: self.chain_client.get_balance(self.payer_address)
        )

        sufficient = balance >= total
        if not sufficient:
            logger.info(f"Insufficient balance: have {balance}, need {total} wei")

        info = RawPaymentInfo(
            paid_value=value,
            estimated_fees=fee,
            total_value=total,
            balance=balance,
            balance_string=self._fiat(balance),
            sufficient_balance=sufficient,
        )
        self.raw_payment_info = info
        self.state = PaymentState.READY
        return info

    async def fetch_payment_info(self) -> PaymentInfo:
        """Same as fetch_raw_payment_info() with display strings added"""
        raw = await self.fetch_raw_payment_info()

        return PaymentInfo(
            fiat_string=self._fiat(raw.paid_value),
            estimated_fees_fiat_string=self._fiat(raw.estimated_fees),
            estimated_fees_ether_string=ether_string(raw.estimated_fees),
            total_fiat_string=self._fiat(raw.total_value),
            total_ether_string=ether_string(raw.total_value),
            balance_string=raw.balance_string,
            sufficient_balance=raw.sufficient_balance,
            raw=raw,
        )

    async def send_payment(self) -> str:
        """
        Sign the quoted transaction with the currently active account and
        broadcast it once.

        Returns:
            Transaction hash

        Raises:
            NoPendingTransactionError: If there is no successful quote to send
            SigningError: If signing fails
            BroadcastError: If the node rejects or cannot receive the transaction
        """
        if self.state != PaymentState.READY or self.transaction is None:
            raise NoPendingTransactionError(
                f"No quoted transaction to send (state {self.state.value})"
            )

        # Consume the quote so the same transaction is never sent twice
        transaction = self.transaction
        self.transaction = None

        self.state = PaymentState.SIGNING
        try:
            account, signature = self.wallet.sign(transaction)
        except Exception as e:
            raise self._fail(SigningError(str(e))) from e

        if self.request.from_address and (
            account.address.lower() != self.request.from_address.lower()
        ):
            logger.warning(
                f"Signing with {account.address}, payment was quoted for "
                f"{self.request.from_address}"
            )

        self.state = PaymentState.BROADCASTING
        # On failure the signed transaction is dropped; resending needs a fresh quote
        tx_hash = await self._chain_call(
            BroadcastError, lambda: self.chain_client.broadcast(transaction, signature)
        )

        self.transaction_hash = tx_hash
        self.state = PaymentState.SENT
        logger.info(f"Payment sent from {account.title}: {tx_hash}")
        return tx_hash
