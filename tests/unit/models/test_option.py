"""Unit tests for the option notation codec."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from ntapi.sdk.core.exceptions import InvalidInputError
from ntapi.sdk.models import TradernetOption, parse_option


class TestDecode:
    """Test notation parsing."""

    def test_call(self):
        """Test a call option decodes every component."""
        option = parse_option("+FRHC.16SEP2022.C55")
        assert option.ticker == "FRHC"
        assert option.right == 1
        assert option.symbolic_right == "C"
        assert option.strike == Decimal("55")
        assert option.maturity_date == date(2022, 9, 16)
        assert option.symbolic_expiration == "16SEP2022"

    def test_put_with_fractional_strike(self):
        """Test puts and fractional strikes."""
        option = TradernetOption("+AAPL.19JAN2024.P172.5")
        assert option.right == -1
        assert option.strike == Decimal("172.5")

    def test_ticker_with_digits(self):
        """Test tickers ending in digits are accepted."""
        assert TradernetOption("+BRK2.15MAR2024.C300").ticker == "BRK2"

    @pytest.mark.parametrize(
        "symbol",
        ["FRHC.16SEP2022.C55", "+FRHC.16SEP22.C55", "+FRHC.16SEP2022.X55", "+FRHC.16SEP2022.C"],
    )
    def test_invalid_notation(self, symbol):
        """Test malformed notations raise InvalidInputError with the value."""
        with pytest.raises(InvalidInputError) as exc_info:
            TradernetOption(symbol)
        assert exc_info.value.value == symbol

    @pytest.mark.parametrize("symbol", ["+FRHC.31FEB2022.C55", "+FRHC.16XYZ2022.C55"])
    def test_impossible_date(self, symbol):
        """Test impossible dates raise InvalidInputError."""
        with pytest.raises(InvalidInputError):
            TradernetOption(symbol)


class TestEncode:
    """Test OSI rendering and date helpers."""

    def test_osi(self):
        """Test the compact OSI form."""
        assert TradernetOption("+FRHC.16SEP2022.C55").osi() == "FRHC220916C00055000"

    def test_osi_fractional_strike(self):
        """Test strikes are encoded in thousandths."""
        assert TradernetOption("+AAPL.19JAN2024.P172.5").osi() == "AAPL240119P00172500"

    def test_osi_padded(self):
        """Test the padded form has a six character root."""
        padded = TradernetOption("+FRHC.16SEP2022.C55").osi(padded=True)
        assert padded == "FRHC  220916C00055000"
        assert len(padded) == 21

    def test_to_standard_symbol_alias(self):
        """Test the alias matches osi()."""
        option = TradernetOption("+FRHC.16SEP2022.C55")
        assert option.to_standard_symbol() == option.osi()

    def test_date_round_trip(self):
        """Test encode_date and decode_date are inverse."""
        assert TradernetOption.encode_date(date(2024, 3, 5)) == "05MAR2024"
        assert TradernetOption.decode_date("05MAR2024") == date(2024, 3, 5)

    def test_str(self):
        """Test the human readable form."""
        assert str(TradernetOption("+FRHC.16SEP2022.C55")) == "FRHC @ 55 Call 2022-09-16"

    def test_numeric_right(self):
        """Test call and put codes."""
        assert TradernetOption.numeric_right(True) == 1
        assert TradernetOption.numeric_right(False) == -1


class TestIdentity:
    """Test equality, ordering and hashing."""

    def test_location_ignored_for_equality(self):
        """Test the location suffix does not affect equality."""
        plain = TradernetOption("+FRHC.16SEP2022.C55")
        located = TradernetOption("+FRHC.16SEP2022.C55", location="US")
        assert plain == located
        assert hash(plain) == hash(located)
        assert located.underlying == "FRHC.US"

    def test_equal_strikes_with_different_spelling(self):
        """Test 55 and 55.0 are the same strike."""
        assert TradernetOption("+FRHC.16SEP2022.C55") == TradernetOption("+FRHC.16SEP2022.C55.0")

    def test_ordering(self):
        """Test options sort by ticker, maturity, strike then right."""
        options = [
            TradernetOption("+FRHC.16SEP2022.C60"),
            TradernetOption("+FRHC.19AUG2022.C70"),
            TradernetOption("+FRHC.16SEP2022.P55"),
            TradernetOption("+FRHC.16SEP2022.C55"),
        ]
        assert [str(option) for option in sorted(options)] == [
            "FRHC @ 70 Call 2022-08-19",
            "FRHC @ 55 Put 2022-09-16",
            "FRHC @ 55 Call 2022-09-16",
            "FRHC @ 60 Call 2022-09-16",
        ]

    def test_set_membership(self):
        """Test equal options collapse in a set."""
        assert len({parse_option("+FRHC.16SEP2022.C55"), parse_option("+FRHC.16SEP2022.C55")}) == 1

    def test_not_equal_to_other_types(self):
        """Test comparison with a string is not equality."""
        assert TradernetOption("+FRHC.16SEP2022.C55") != "+FRHC.16SEP2022.C55"
