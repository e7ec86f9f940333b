"""Tradernet streaming client."""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterable, Sequence
from typing import Any

from ..core.client import BaseCore
from ..runtime.ws import StreamConfig, StreamRunner, SubscriptionSpec, subscriptions


class TradernetWebsocket:
    """Subscribe to live Tradernet updates.

    Each method returns an async iterator over event payloads. The
    connection opens on first iteration and closes when iteration stops.

    Examples:
        >>> ws = TradernetWebsocket(AsyncCore.from_config("tradernet.ini"))  # doctest: +SKIP
        >>> async for quote in ws.quotes(["AAPL.US"]):  # doctest: +SKIP
        ...     print(quote)
    """

    def __init__(self, core: BaseCore, config: StreamConfig | None = None) -> None:
        self.core = core
        self._runner = StreamRunner(core, config)

    def quotes(self, symbols: str | Iterable[str]) -> AsyncIterator[Any]:
        """Quote updates (``q`` events) for ``symbols``."""
        if isinstance(symbols, str):
            symbols = [symbols]
        return self._runner.run(subscriptions.quotes(symbols))

    def market_depth(self, symbol: str) -> AsyncIterator[Any]:
        """Order book updates (``b`` events) for one symbol."""
        return self._runner.run(subscriptions.market_depth(symbol))

    def portfolio(self) -> AsyncIterator[Any]:
        return self._runner.run(subscriptions.portfolio())

    def orders(self) -> AsyncIterator[Any]:
        return self._runner.run(subscriptions.orders())

    def markets(self) -> AsyncIterator[Any]:
        return self._runner.run(subscriptions.markets())

    def stream(
        self, commands: Sequence[Sequence[Any]], allowed_events: Iterable[str]
    ) -> AsyncIterator[Any]:
        """Send arbitrary subscription commands and yield allow-listed events."""
        spec = SubscriptionSpec(
            id="custom", commands=tuple(commands), allowed_events=frozenset(allowed_events)
        )
        return self._runner.run(spec)
