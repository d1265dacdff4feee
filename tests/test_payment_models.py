"""
Tests for payment request parsing.
"""

import pytest
from pydantic import ValidationError

from paywallet.payments.models import (
    FeeQuote,
    PaymentParameters,
    PaymentRequest,
    parse_hex_quantity,
)


class TestParseHexQuantity:
    @pytest.mark.parametrize(
        "text,expected",
        [("0x0", 0), ("0x5208", 21000), ("0X3B9ACA00", 10**9), ("ff", 255), (" 0x10 ", 16)],
    )
    def test_valid(self, text, expected):
        assert parse_hex_quantity(text) == expected

    @pytest.mark.parametrize(
        "text", ["", "0x", "0xzz", "max", "-0x1", "0x-1", "1_0", "0x0x5", "+0x1", "0x 1"]
    )
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            parse_hex_quantity(text)

    def test_not_a_string(self):
        with pytest.raises(ValueError, match="Expected hex string"):
            parse_hex_quantity(21000)

    def test_arbitrary_precision(self):
        assert parse_hex_quantity("0x" + "f" * 64) == 2**256 - 1


class TestPaymentRequest:
    def test_from_wire_keys(self):
        request = PaymentRequest.model_validate(
            {
                PaymentParameters.FROM: "0xabc",
                PaymentParameters.TO: "0xdef",
                PaymentParameters.VALUE: "0x10",
                PaymentParameters.GAS_PRICE: "0x1",
            }
        )
        assert request.from_address == "0xabc"
        assert request.to_address == "0xdef"
        assert request.requested_value == 16
        assert request.gas_price == "0x1"

    def test_to_params_uses_wire_keys(self):
        request = PaymentRequest(
            from_address="0xabc", to_address="0xdef", value="0x1", token_address="0x99"
        )
        assert request.to_params() == {
            "from": "0xabc",
            "to": "0xdef",
            "value": "0x1",
            "token_address": "0x99",
        }

    def test_max_sentinel(self):
        request = PaymentRequest(value="max")
        assert request.is_max_value
        assert request.requested_value == 0

    def test_missing_value_is_zero(self):
        assert PaymentRequest(to_address="0xdef").requested_value == 0

    def test_invalid_value(self):
        with pytest.raises(ValidationError):
            PaymentRequest(value="lots")

    def test_invalid_gas(self):
        with pytest.raises(ValidationError):
            PaymentRequest(value="0x1", gas="21000wei")

    @pytest.mark.parametrize("value", ["-0x1", "0x-1", "1_0", "0x0x5"])
    def test_signed_or_malformed_value(self, value):
        with pytest.raises(ValidationError):
            PaymentRequest(value=value)

    def test_token_transfer(self):
        assert PaymentRequest(value="0x1", token_address="0x99").is_token_transfer
        assert not PaymentRequest(value="0x1").is_token_transfer


class TestFeeQuote:
    def test_fee(self):
        quote = FeeQuote(gas_price=10**9, gas_limit=21000, transaction="0x00")
        assert quote.fee == 21_000_000_000_000
