"""
Payment failure kinds.

Each error carries a stable `kind` so callers can choose what to show the
user; the core never formats user-facing messages.
"""

from __future__ import annotations


class PaymentError(Exception):
    kind = "payment"


class PaymentRequestError(PaymentError):
    """Payment parameters could not be parsed"""

    kind = "invalid_request"


class FeeQuoteError(PaymentError):
    """Node failed to quote the transaction"""

    kind = "fee_quote"


class BalanceQueryError(PaymentError):
    """Balance could not be fetched after quoting"""

    kind = "balance_query"


class NoPendingTransactionError(PaymentError):
    """send_payment() called without a successful quote"""

    kind = "no_pending_transaction"


class BroadcastError(PaymentError):
    """Signed transaction was rejected or could not be submitted"""

    kind = "broadcast"


class PaymentInProgressError(PaymentError):
    """Another quote is already running on this payment"""

    kind = "in_progress"


class SigningError(PaymentError):
    """Active account could not sign the quoted transaction"""

    kind = "signing"
