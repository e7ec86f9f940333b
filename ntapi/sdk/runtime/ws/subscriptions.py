"""Subscription specifications for the Tradernet streaming API."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from .runner import SubscriptionSpec


def quotes(symbols: Iterable[str]) -> SubscriptionSpec:
    return SubscriptionSpec(
        id="quotes",
        commands=(("quotes", list(symbols)),),
        allowed_events=frozenset({"q", "error"}),
    )


def market_depth(symbol: str) -> SubscriptionSpec:
    return SubscriptionSpec(
        id="market_depth",
        commands=(("orderBook", [symbol]),),
        allowed_events=frozenset({"b", "error"}),
    )


def portfolio() -> SubscriptionSpec:
    return SubscriptionSpec(
        id="portfolio",
        commands=(("portfolio",),),
        allowed_events=frozenset({"portfolio", "error"}),
    )


def orders() -> SubscriptionSpec:
    return SubscriptionSpec(
        id="orders",
        commands=(("orders",),),
        allowed_events=frozenset({"orders", "error"}),
    )


def markets() -> SubscriptionSpec:
    return SubscriptionSpec(
        id="markets",
        commands=(("markets",),),
        allowed_events=frozenset({"markets", "error"}),
    )


SUBSCRIPTIONS: dict[str, Callable[..., SubscriptionSpec]] = {
    "quotes": quotes,
    "market_depth": market_depth,
    "portfolio": portfolio,
    "orders": orders,
    "markets": markets,
}


def build_spec(name: str, *args, **kwargs) -> SubscriptionSpec:
    """Look up a subscription builder by name.

    Raises:
        ValueError: ``name`` is not registered
    """
    try:
        builder = SUBSCRIPTIONS[name]
    except KeyError:
        raise ValueError(f"Unknown subscription: {name}") from None
    return builder(*args, **kwargs)
