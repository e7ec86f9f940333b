"""Tradernet option notation.

Grammar: ``+TICKER.DDMMMYYYY.{C|P}STRIKE``, e.g. ``+FRHC.16SEP2022.C55``.
Strikes are ``Decimal`` so price comparisons never carry float artifacts.
Equality and ordering use (ticker, maturity date, strike, right); the raw
notation string and the location suffix do not participate.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from functools import total_ordering

from ..core.exceptions import InvalidInputError

_NOTATION = re.compile(r"^\+(\D+(\d+)?)\.(\d{2}\D{3}\d{4})\.([CP])(\d+(\.\d*)?)$")

_MONTHS = ("JAN", "FEB", "MAR", "APR", "MAY", "JUN", "JUL", "AUG", "SEP", "OCT", "NOV", "DEC")

OSI_ROOT_WIDTH = 6


@dataclass(frozen=True)
class OptionProperties:
    """Fields decoded from an option notation."""

    ticker: str
    right: int
    strike: Decimal
    maturity_date: date
    symbolic_expiration: str
    location: str | None = None


@total_ordering
class TradernetOption:
    """Option contract identified by its Tradernet notation."""

    def __init__(self, symbol: str, location: str | None = None) -> None:
        properties = self.decode_notation(symbol)
        if location is not None:
            properties = OptionProperties(
                ticker=properties.ticker,
                right=properties.right,
                strike=properties.strike,
                maturity_date=properties.maturity_date,
                symbolic_expiration=properties.symbolic_expiration,
                location=location,
            )
        self.symbol = symbol
        self.properties = properties

    @property
    def ticker(self) -> str:
        return self.properties.ticker

    @property
    def location(self) -> str | None:
        return self.properties.location

    @property
    def right(self) -> int:
        return self.properties.right

    @property
    def strike(self) -> Decimal:
        return self.properties.strike

    @property
    def maturity_date(self) -> date:
        return self.properties.maturity_date

    @property
    def symbolic_expiration(self) -> str:
        return self.properties.symbolic_expiration

    @property
    def underlying(self) -> str:
        if self.location:
            return f"{self.ticker}.{self.location}"
        return self.ticker

    @property
    def symbolic_right(self) -> str:
        return "C" if self.right == 1 else "P"

    @staticmethod
    def numeric_right(is_call: bool) -> int:
        return 1 if is_call else -1

    def osi(self, padded: bool = False) -> str:
        """OSI-style code: root, ``YYMMDD``, right, strike x 1000 in 8 digits.

        With ``padded`` the root is space-padded or truncated to six
        characters, giving the 21-character form.

        Examples:
            >>> TradernetOption("+FRHC.16SEP2022.C55").osi()
            'FRHC220916C00055000'
            >>> TradernetOption("+FRHC.16SEP2022.C55").osi(padded=True)
            'FRHC  220916C00055000'
        """
        root = self.ticker
        if padded:
            root = root[:OSI_ROOT_WIDTH].ljust(OSI_ROOT_WIDTH)
        expiration = self.maturity_date.strftime("%y%m%d")
        strike = int((self.strike * 1000).to_integral_value())
        return f"{root}{expiration}{self.symbolic_right}{strike:08d}"

    to_standard_symbol = osi

    @staticmethod
    def encode_date(value: date) -> str:
        """``date(2022, 9, 16)`` -> ``"16SEP2022"`` (locale independent)."""
        return f"{value.day:02d}{_MONTHS[value.month - 1]}{value.year:04d}"

    @staticmethod
    def decode_date(symbolic_date: str) -> date:
        """``"16SEP2022"`` -> ``date(2022, 9, 16)``."""
        try:
            month = _MONTHS.index(symbolic_date[2:5].upper()) + 1
            return date(int(symbolic_date[5:]), month, int(symbolic_date[:2]))
        except ValueError as exc:
            raise InvalidInputError(
                f"Invalid option expiration: {symbolic_date}", value=symbolic_date
            ) from exc

    @classmethod
    def decode_notation(cls, symbol: str) -> OptionProperties:
        """Parse a notation string.

        Raises:
            InvalidInputError: ``symbol`` does not match the grammar or holds
                an impossible date
        """
        match = _NOTATION.match(symbol)
        if match is None:
            raise InvalidInputError(f"Invalid Tradernet option symbol: {symbol}", value=symbol)

        ticker, _, expiration, right, strike, _ = match.groups()
        try:
            strike_value = Decimal(strike)
        except InvalidOperation as exc:
            raise InvalidInputError(f"Invalid strike in {symbol}", value=symbol) from exc

        return OptionProperties(
            ticker=ticker,
            right=-1 if right == "P" else 1,
            strike=strike_value,
            maturity_date=cls.decode_date(expiration),
            symbolic_expiration=expiration,
        )

    def _key(self) -> tuple[str, date, Decimal, int]:
        return (self.ticker, self.maturity_date, self.strike, self.right)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TradernetOption):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: TradernetOption) -> bool:
        if not isinstance(other, TradernetOption):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        right = "Put" if self.right == -1 else "Call"
        return f"{self.underlying} @ {self.strike} {right} {self.maturity_date.isoformat()}"

    def __repr__(self) -> str:
        return f"TradernetOption({self.symbol!r})"


def parse_option(symbol: str) -> TradernetOption:
    """Shorthand for ``TradernetOption(symbol)``."""
    return TradernetOption(symbol)
