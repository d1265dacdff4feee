"""
Wei to ether and fiat conversion for display.

All conversions use Decimal under a context wide enough for any 256-bit
wei amount, so no value is rounded before the final display quantize.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Context, Decimal

WEI_PER_ETHER = 10**18
ETHER_SYMBOL = "ETH"

# 2^256 has 78 digits; leave room for exchange-rate digits on top
_CONTEXT = Context(prec=120)

_FIAT_CENTS = Decimal("0.01")

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CNY": "¥",
}


def wei_to_ether(wei: int) -> Decimal:
    return _CONTEXT.divide(Decimal(wei), Decimal(WEI_PER_ETHER))


def fiat_value(wei: int, exchange_rate: Decimal) -> Decimal:
    """Fiat amount of wei at exchange_rate (fiat per ether), unrounded"""
    return _CONTEXT.multiply(wei_to_ether(wei), Decimal(exchange_rate))


def _plain(amount: Decimal) -> str:
    """Fixed point text without exponent or trailing zeros"""
    text = format(amount.normalize(_CONTEXT), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def ether_string(wei: int) -> str:
    """e.g. 21000000000000 -> "0.000021 ETH" """
    return f"{_plain(wei_to_ether(wei))} {ETHER_SYMBOL}"


def fiat_string(wei: int, exchange_rate: Decimal, currency: str = "USD") -> str:
    """e.g. "$12.34", rounded half up to cents"""
    amount = fiat_value(wei, exchange_rate).quantize(
        _FIAT_CENTS, rounding=ROUND_HALF_UP, context=_CONTEXT
    )
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), "")
    return f"{symbol}{amount:,}"


def fiat_string_with_code(wei: int, exchange_rate: Decimal, currency: str = "USD") -> str:
    """e.g. "$12.34 USD" """
    return f"{fiat_string(wei, exchange_rate, currency)} {currency.upper()}"
