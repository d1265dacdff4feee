"""
Payment computation and execution.
"""

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
    PaymentParameters,
    PaymentRequest,
    PaymentState,
    RawPaymentInfo,
)
from paywallet.payments.manager import PaymentManager

__all__ = [
    "BalanceQueryError",
    "BroadcastError",
    "FeeQuoteError",
    "FeeQuote",
    "NoPendingTransactionError",
    "PaymentError",
    "PaymentInProgressError",
    "PaymentInfo",
    "PaymentManager",
    "PaymentParameters",
    "PaymentRequest",
    "PaymentRequestError",
    "PaymentState",
    "RawPaymentInfo",
    "SigningError",
]
