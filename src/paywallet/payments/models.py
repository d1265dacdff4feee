"""
Payment data models.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PaymentParameters:
    """Parameter names understood by the transaction skeleton endpoint"""

    FROM = "from"
    TO = "to"
    VALUE = "value"
    DATA = "data"
    GAS = "gas"
    GAS_PRICE = "gasPrice"
    NONCE = "nonce"
    TOKEN_ADDRESS = "token_address"
    MAX_VALUE = "max"


_HEX_DIGITS = re.compile(r"[0-9a-fA-F]+")


def parse_hex_quantity(text: str) -> int:
    """
    Parse a hex encoded unsigned integer ("0x5208", "5208", "0X0").

    Raises:
        ValueError: If text is empty or not hex
    """
    if not isinstance(text, str):
        raise ValueError(f"Expected hex string, got {type(text).__name__}")

    body = text.strip()
    if body[:2].lower() == "0x":
        body = body[2:]
    if not body:
        raise ValueError(f"Empty hex quantity: {text!r}")
    if not _HEX_DIGITS.fullmatch(body):
        raise ValueError(f"Invalid hex quantity: {text!r}")

    return int(body, 16)


def _hex_field(value: Any) -> Any:
    if value is None:
        return value
    try:
        parse_hex_quantity(value)
    except ValueError as e:
        raise ValueError(f"not a hex quantity: {value!r}") from e
    return value


class PaymentRequest(BaseModel):
    """Parameters of one payment, keyed as the ethereum service expects them"""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    from_address: str | None = Field(default=None, alias=PaymentParameters.FROM)
    to_address: str | None = Field(default=None, alias=PaymentParameters.TO)
    value: str | None = Field(default=None, alias=PaymentParameters.VALUE)
    data: str | None = Field(default=None, alias=PaymentParameters.DATA)
    gas: str | None = Field(default=None, alias=PaymentParameters.GAS)
    gas_price: str | None = Field(default=None, alias=PaymentParameters.GAS_PRICE)
    nonce: str | None = Field(default=None, alias=PaymentParameters.NONCE)
    token_address: str | None = Field(default=None, alias=PaymentParameters.TOKEN_ADDRESS)

    @field_validator("value")
    @classmethod
    def validate_value(cls, v: str | None) -> str | None:
        if v == PaymentParameters.MAX_VALUE:
            return v
        return _hex_field(v)

    @field_validator("gas", "gas_price", "nonce")
    @classmethod
    def validate_hex(cls, v: str | None) -> str | None:
        return _hex_field(v)

    @property
    def is_max_value(self) -> bool:
        return self.value == PaymentParameters.MAX_VALUE

    @property
    def is_token_transfer(self) -> bool:
        return self.token_address is not None

    @property
    def requested_value(self) -> int:
        """Hex value of the request in wei; absent or "max" reads as zero"""
        if self.value is None or self.is_max_value:
            return 0
        return parse_hex_quantity(self.value)

    def to_params(self) -> dict[str, str]:
        """Parameters for the skeleton request, without unset fields"""
        return self.model_dump(by_alias=True, exclude_none=True)


class PaymentState(str, Enum):
    IDLE = "idle"
    QUOTING_FEE = "quoting_fee"
    CHECKING_BALANCE = "checking_balance"
    READY = "ready"
    SIGNING = "signing"
    BROADCASTING = "broadcasting"
    SENT = "sent"
    FAILED = "failed"


@dataclass(frozen=True)
class FeeQuote:
    """Parsed transaction skeleton. Amounts in wei."""

    gas_price: int
    gas_limit: int
    transaction: str
    computed_value: int | None = None

    @property
    def fee(self) -> int:
        return self.gas_price * self.gas_limit


@dataclass(frozen=True)
class RawPaymentInfo:
    """Exact payment figures in wei"""

    paid_value: int
    estimated_fees: int
    total_value: int
    balance: int
    balance_string: str
    sufficient_balance: bool


@dataclass(frozen=True)
class PaymentInfo:
    """Display strings for a quoted payment"""

    fiat_string: str
    estimated_fees_fiat_string: str
    estimated_fees_ether_string: str
    total_fiat_string: str
    total_ether_string: str
    balance_string: str
    sufficient_balance: bool
    raw: RawPaymentInfo
