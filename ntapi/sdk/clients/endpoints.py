"""Tradernet API command definitions.

Architecture:
    Each public function builds one ``ApiRequest`` envelope: the command
    name, its parameters and whether the call is plain or signed. The
    blocking and non-blocking clients both dispatch these envelopes, so
    parameter shaping and local validation live here once and run before
    any network call.

Design Decisions:
    - Functions are pure; they never touch the transport
    - Optional parameters are omitted from the payload rather than sent as
      ``null``
    - Validation failures raise ``InvalidInputError`` with the offending
      value attached
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Mapping
from datetime import date, datetime, time
from typing import Any

from ..core.config import MAX_EXPORT_SIZE
from ..core.exceptions import InvalidInputError, SerializationError
from ..models.user_data import UserDataResponse, decode_user_data
from ..runtime.rest import ApiRequest, ResponseAdapter

EXPORT_PATH = "/securities/export"

DURATIONS = {"day": 1, "ext": 2, "gtc": 3}

# Emulated: placed as a day order, then cancelled right away
IOC = "ioc"

_HISTORY_FORMAT = "%Y-%m-%dT%H:%M:%S"
_CANDLE_FORMAT = "%d.%m.%Y %H:%M"


class UserDataAdapter(ResponseAdapter):
    """Decode the ``getOPQ`` payload into a typed snapshot."""

    def parse(self, response: Any, request: ApiRequest) -> UserDataResponse:
        return decode_user_data(response)


def duration_code(duration: str) -> int | None:
    """Map an order duration name to its upstream code (case-insensitive).

    Examples:
        >>> duration_code("GTC")
        3
        >>> duration_code("ioc") is None
        True
    """
    return DURATIONS.get(duration.lower())


def is_ioc(duration: str) -> bool:
    return duration.lower() == IOC


def _finite_price(price: float) -> float:
    try:
        value = float(price)
    except (TypeError, ValueError):
        raise InvalidInputError(f"Invalid price {price!r}", value=price) from None
    if not math.isfinite(value):
        raise InvalidInputError(f"Invalid price {price!r}", value=price)
    return value


def action_id(quantity: int, use_margin: bool) -> int:
    """Buy cash 1, buy margin 2, sell cash 3, sell margin 4."""
    if quantity > 0:
        return 2 if use_margin else 1
    return 4 if use_margin else 3


def build_trade_params(
    symbol: str,
    quantity: int,
    price: float = 0.0,
    duration: str = "day",
    use_margin: bool = True,
    custom_order_id: int | None = None,
) -> dict[str, Any]:
    """Validate an order and build the ``putTradeOrder`` parameters.

    Args:
        symbol: Instrument, e.g. ``AAPL.US``
        quantity: Signed size; positive buys, negative sells
        price: Limit price; ``0`` places a market order
        duration: ``day``, ``ext`` or ``gtc``
        use_margin: Trade on margin rather than cash
        custom_order_id: Caller-assigned order id

    Raises:
        InvalidInputError: Zero quantity, unknown duration or non-finite price
    """
    if quantity == 0:
        raise InvalidInputError("Zero quantity", value=quantity)

    code = duration_code(duration)
    if code is None:
        raise InvalidInputError(f"Unknown duration {duration}", value=duration)

    limit_price = _finite_price(price)

    params: dict[str, Any] = {
        "instr_name": symbol,
        "action_id": action_id(quantity, use_margin),
        "order_type_id": 2 if limit_price != 0 else 1,
        "qty": abs(quantity),
        "limit_price": limit_price,
        "expiration_id": code,
    }
    if custom_order_id is not None:
        params["user_order_id"] = custom_order_id
    return params


def require_positive(quantity: int) -> None:
    if quantity <= 0:
        raise InvalidInputError("Quantity must be positive", value=quantity)


# ============================================================================
# Account and onboarding
# ============================================================================


def user_info() -> ApiRequest:
    return ApiRequest("GetAllUserTexInfo")


def get_user_data() -> ApiRequest:
    return ApiRequest("getOPQ")


def new_user(
    login: str,
    reception: int | str,
    phone: str,
    lastname: str,
    firstname: str,
    password: str | None = None,
    utm_campaign: str | None = None,
    tariff: int | None = None,
) -> ApiRequest:
    params: dict[str, Any] = {
        "login": login,
        "pwd": password or "",
        "reception": str(reception),
        "phone": phone,
        "lastname": lastname,
        "firstname": firstname,
    }
    if tariff is not None:
        params["tariff_id"] = tariff
    if utm_campaign is not None:
        params["utm_campaign"] = utm_campaign
    return ApiRequest("registerNewUser", params, auth=False)


def check_missing_fields(step: int, office: str) -> ApiRequest:
    return ApiRequest("checkStep", {"step": step, "office": office})


def get_profile_fields(reception: int) -> ApiRequest:
    return ApiRequest("getProfileFields", {"reception": reception})


def account_summary() -> ApiRequest:
    return ApiRequest("getPositionJson")


def get_tariffs_list() -> ApiRequest:
    return ApiRequest("GetListTariffs")


def get_requests_history(
    start: datetime,
    end: datetime,
    doc_id: int | None = None,
    exec_id: int | None = None,
    limit: int | None = None,
    offset: int | None = None,
    status: int | None = None,
) -> ApiRequest:
    params: dict[str, Any] = {
        "date_from": start.strftime(_HISTORY_FORMAT),
        "date_to": end.strftime(_HISTORY_FORMAT),
    }
    optional = {
        "cpsDocId": doc_id,
        "id": exec_id,
        "limit": limit,
        "offset": offset,
        "cps_status": status,
    }
    params.update({key: value for key, value in optional.items() if value is not None})
    return ApiRequest("getClientCpsHistory", params)


def get_order_files(order_id: int | None = None, internal_id: int | None = None) -> ApiRequest:
    """Files attached to a request; ``internal_id`` wins when both are given.

    Raises:
        InvalidInputError: Neither id is given
    """
    if internal_id is not None:
        params = {"internal_id": internal_id}
    elif order_id is not None:
        params = {"id": order_id}
    else:
        raise InvalidInputError("Either order_id or internal_id must be specified")
    return ApiRequest("getCpsFiles", params)


def get_broker_report(
    start: date,
    end: date,
    period: time = time(23, 59, 59),
    data_block_type: str | None = None,
) -> ApiRequest:
    params: dict[str, Any] = {
        "date_start": start.isoformat(),
        "date_end": end.isoformat(),
        "time_period": period.strftime("%H:%M:%S"),
        "format": "json",
    }
    if data_block_type is not None:
        params["type"] = data_block_type
    return ApiRequest("getBrokerReport", params)


def corporate_actions(reception: int = 35) -> ApiRequest:
    return ApiRequest("getPlannedCorpActions", {"reception": reception})


# ============================================================================
# Market data
# ============================================================================


def get_market_status(market: str = "*", mode: str | None = None) -> ApiRequest:
    params = {"market": market}
    if mode is not None:
        params["mode"] = mode
    return ApiRequest("getMarketStatus", params)


def get_most_traded(
    instrument_type: str = "stocks",
    exchange: str = "usa",
    gainers: bool = True,
    limit: int = 10,
) -> ApiRequest:
    params = {
        "type": instrument_type,
        "exchange": exchange,
        "gainers": int(gainers),
        "limit": limit,
    }
    return ApiRequest("getTopSecurities", params, auth=False)


def security_info(symbol: str, sup: bool = True) -> ApiRequest:
    return ApiRequest("getSecurityInfo", {"ticker": symbol, "sup": sup})


def get_options(underlying: str, exchange: str) -> ApiRequest:
    return ApiRequest("getOptionsByMkt", {"underlying": underlying, "mkt": exchange})


def get_candles(
    symbol: str,
    start: datetime,
    end: datetime,
    timeframe: int = 86_400,
) -> ApiRequest:
    """Candles between ``start`` and ``end``; ``timeframe`` is in seconds."""
    params = {
        "id": symbol,
        "count": -1,
        "timeframe": timeframe // 60,
        "date_from": start.strftime(_CANDLE_FORMAT),
        "date_to": end.strftime(_CANDLE_FORMAT),
        "intervalMode": "OpenRay",
    }
    return ApiRequest("getHloc", params)


def get_quotes(symbols: Iterable[str]) -> ApiRequest:
    return ApiRequest("getStockQuotesJson", {"tickers": ",".join(_as_list(symbols))})


def get_trades_history(
    start: date,
    end: date,
    trade_id: int | None = None,
    limit: int | None = None,
    symbol: str | None = None,
    currency: str | None = None,
) -> ApiRequest:
    params: dict[str, Any] = {"beginDate": start.isoformat(), "endDate": end.isoformat()}
    optional = {"tradeId": trade_id, "max": limit, "nt_ticker": symbol, "curr": currency}
    params.update({key: value for key, value in optional.items() if value is not None})
    return ApiRequest("getTradesHistory", params)


def find_symbol(symbol: str, exchange: str | None = None) -> ApiRequest:
    text = f"{symbol}@{exchange}" if exchange else symbol
    return ApiRequest("tickerFinder", {"text": text}, auth=False)


def get_news(
    query: str,
    symbol: str | None = None,
    story_id: str | None = None,
    limit: int = 30,
) -> ApiRequest:
    params: dict[str, Any] = {"searchFor": query, "limit": limit}
    if symbol is not None:
        params["ticker"] = symbol
    if story_id is not None:
        params["storyId"] = story_id
    return ApiRequest("getNews", params)


def symbol(symbol: str, lang: str = "en") -> ApiRequest:
    return ApiRequest("getStockData", {"ticker": symbol, "lang": lang})


def symbols(exchange: str | None = None) -> ApiRequest:
    params = {"mkt": exchange.lower()} if exchange else None
    return ApiRequest("getReadyList", params)


def export_params(
    symbols: Iterable[str], fields: Iterable[str] | None = None
) -> Iterator[dict[str, str]]:
    """Query parameters for ``/securities/export``, at most 100 symbols each.

    Examples:
        >>> [p["tickers"] for p in export_params(["A", "B", "C"])]
        ['A B C']
    """
    tickers = _as_list(symbols)
    field_list = " ".join(fields) if fields is not None else None
    for start in range(0, len(tickers), MAX_EXPORT_SIZE):
        params = {"tickers": " ".join(tickers[start : start + MAX_EXPORT_SIZE])}
        if field_list is not None:
            params["params"] = field_list
        yield params


def export_rows(payload: Any) -> list[Any]:
    if not isinstance(payload, list):
        raise SerializationError(f"Expected a JSON array from {EXPORT_PATH}")
    return payload


# ============================================================================
# Price alerts
# ============================================================================


def get_price_alerts(symbol: str | None = None) -> ApiRequest:
    params = {"ticker": symbol} if symbol is not None else None
    return ApiRequest("getAlertsList", params)


def add_price_alert(
    symbol: str,
    price: float | str | Iterable[float | str],
    trigger_type: str = "crossing",
    quote_type: str = "ltp",
    send_to: str = "email",
    frequency: int = 0,
    expire: int = 0,
) -> ApiRequest:
    prices = [price] if isinstance(price, (int, float, str)) else list(price)
    params = {
        "ticker": symbol,
        "price": [str(value) for value in prices],
        "trigger_type": trigger_type,
        "quote_type": quote_type,
        "notification_type": send_to,
        "alert_period": frequency,
        "expire": expire,
    }
    return ApiRequest("addPriceAlert", params)


def delete_price_alert(alert_id: int) -> ApiRequest:
    return ApiRequest("addPriceAlert", {"id": alert_id, "del": True})


# ============================================================================
# Orders
# ============================================================================


def trade(
    symbol: str,
    quantity: int = 1,
    price: float = 0.0,
    duration: str = "day",
    use_margin: bool = True,
    custom_order_id: int | None = None,
) -> ApiRequest:
    params = build_trade_params(symbol, quantity, price, duration, use_margin, custom_order_id)
    return ApiRequest("putTradeOrder", params)


def stop(symbol: str, price: float) -> ApiRequest:
    return ApiRequest("putStopLoss", {"instr_name": symbol, "stop_loss": _finite_price(price)})


def trailing_stop(symbol: str, percent: int = 1) -> ApiRequest:
    params = {
        "instr_name": symbol,
        "stop_loss_percent": percent,
        "stoploss_trailing_percent": percent,
    }
    return ApiRequest("putStopLoss", params)


def take_profit(symbol: str, price: float) -> ApiRequest:
    return ApiRequest("putStopLoss", {"instr_name": symbol, "take_profit": _finite_price(price)})


def cancel(order_id: int) -> ApiRequest:
    return ApiRequest("delTradeOrder", {"order_id": order_id})


def get_placed(active: bool = True) -> ApiRequest:
    return ApiRequest("getNotifyOrderJson", {"active_only": int(active)})


def get_historical(start: datetime, end: datetime) -> ApiRequest:
    params = {"from": start.strftime(_HISTORY_FORMAT), "till": end.strftime(_HISTORY_FORMAT)}
    return ApiRequest("getOrdersHistory", params)


def placed_order_id(order: Any) -> int | None:
    """``order_id`` of a ``putTradeOrder`` response, if present."""
    if isinstance(order, Mapping):
        value = order.get("order_id")
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def active_order_ids(placed: Any) -> list[int]:
    """Order ids listed at ``result.orders.order[*].id`` of ``getNotifyOrderJson``."""
    node = placed
    for key in ("result", "orders", "order"):
        if not isinstance(node, Mapping):
            return []
        node = node.get(key)
    if not isinstance(node, list):
        return []

    ids = []
    for order in node:
        if isinstance(order, Mapping):
            value = order.get("id")
            if isinstance(value, int) and not isinstance(value, bool):
                ids.append(value)
    return ids


def _as_list(values: Iterable[str]) -> list[str]:
    if isinstance(values, str):
        return [values]
    return list(values)
