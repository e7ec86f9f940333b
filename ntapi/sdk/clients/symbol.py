"""Candle download helper."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from .tradernet import Tradernet

# Candle timestamps are reported in Moscow time
SERVER_UTC_OFFSET = timedelta(hours=3)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _series(response: Any, key: str, symbol: str) -> list[Any]:
    if not isinstance(response, dict):
        return []
    section = response.get(key)
    if not isinstance(section, dict):
        return []
    values = section.get(symbol)
    return values if isinstance(values, list) else []


def parse_timestamps(response: Any, symbol: str) -> list[datetime]:
    return [
        datetime.fromtimestamp(seconds, tz=timezone.utc).replace(tzinfo=None) + SERVER_UTC_OFFSET
        for seconds in _series(response, "xSeries", symbol)
        if _is_int(seconds)
    ]


def parse_candles(response: Any, symbol: str) -> list[list[float]]:
    """``[high, low, open, close]`` rows; short or non-numeric rows are skipped."""
    rows = []
    for entry in _series(response, "hloc", symbol):
        if isinstance(entry, list) and len(entry) >= 4 and all(map(_is_number, entry[:4])):
            rows.append([float(value) for value in entry[:4]])
    return rows


def parse_volumes(response: Any, symbol: str) -> list[int]:
    return [value for value in _series(response, "vl", symbol) if _is_int(value)]


class TradernetSymbol:
    """Candles, timestamps and volumes for one symbol over a date range.

    Examples:
        >>> data = TradernetSymbol(  # doctest: +SKIP
        ...     "AAPL.US", start=datetime(2024, 1, 1), end=datetime(2024, 2, 1)
        ... ).get_data()
        >>> data.candles[0]  # doctest: +SKIP
        [187.33, 183.89, 187.15, 185.64]
    """

    def __init__(
        self,
        symbol: str,
        api: Tradernet | None = None,
        *,
        start: datetime,
        end: datetime,
        timeframe: int = 86_400,
    ) -> None:
        self.symbol = symbol
        self.api = api
        self.start = start
        self.end = end
        self.timeframe = timeframe
        self.timestamps: list[datetime] = []
        self.candles: list[list[float]] = []
        self.volumes: list[int] = []

    def get_data(self) -> TradernetSymbol:
        """Download candles and fill ``timestamps``, ``candles`` and ``volumes``."""
        if self.api is None:
            self.api = Tradernet()

        response = self.api.get_candles(self.symbol, self.start, self.end, self.timeframe)
        self.timestamps = parse_timestamps(response, self.symbol)
        self.candles = parse_candles(response, self.symbol)
        self.volumes = parse_volumes(response, self.symbol)
        return self
