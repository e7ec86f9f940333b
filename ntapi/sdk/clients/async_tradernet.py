"""Non-blocking Tradernet REST client.

Architecture:
    ``AsyncTradernet`` mirrors ``Tradernet`` call for call. Every method
    builds an ``ApiRequest`` through ``clients.endpoints`` and awaits an
    ``AsyncRestRunner`` bound to an ``AsyncCore``. Composite operations
    run their sub-calls sequentially within the calling task:
    - ``trade`` with ``duration="ioc"``: day order plus best-effort cancel
    - ``cancel_all``: fetch active orders, cancel each independently
    - ``export_securities``: chunked ``/securities/export`` calls
    - ``get_refbook`` / ``get_all``: refbook listing, download and filtering

Design Decisions:
    - Local validation runs inside the endpoint builders, before any I/O
    - The IOC follow-up cancel never masks the placed order: its failure is
      logged and the placement response is returned
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping
from datetime import date, datetime, time
from typing import Any

from ..core.client import AsyncCore
from ..core.config import DEFAULT_TIMEOUT, DOMAIN
from ..core.exceptions import TradernetError
from ..models.user_data import UserDataResponse
from ..runtime.rest import ApiRequest, AsyncRestRunner, ResponseAdapter
from . import endpoints, refbooks

logger = logging.getLogger(__name__)


class AsyncTradernet:
    """Non-blocking client for the Tradernet REST API.

    Examples:
        >>> async with AsyncTradernet.from_config("tradernet.ini") as client:  # doctest: +SKIP
        ...     await client.get_quotes(["AAPL.US"])
    """

    def __init__(
        self,
        public: str | None = None,
        private: str | None = None,
        *,
        core: AsyncCore | None = None,
        domain: str = DOMAIN,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._core = core or AsyncCore(public, private, domain=domain, timeout=timeout)
        self._runner = AsyncRestRunner(self._core)

    @classmethod
    def from_config(cls, path: str | os.PathLike[str], **kwargs: Any) -> AsyncTradernet:
        """Create a client from an INI file with an ``[auth]`` section."""
        return cls(core=AsyncCore.from_config(path, **kwargs))

    @property
    def core(self) -> AsyncCore:
        return self._core

    async def _run(self, request: ApiRequest, adapter: ResponseAdapter | None = None) -> Any:
        return await self._runner.run(request, adapter)

    async def close(self) -> None:
        await self._core.close()

    async def __aenter__(self) -> AsyncTradernet:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # Account and onboarding

    async def user_info(self) -> Any:
        return await self._run(endpoints.user_info())

    async def new_user(
        self,
        login: str,
        reception: int | str,
        phone: str,
        lastname: str,
        firstname: str,
        password: str | None = None,
        utm_campaign: str | None = None,
        tariff: int | None = None,
    ) -> Any:
        """Register a new user (unsigned)."""
        return await self._run(
            endpoints.new_user(
                login, reception, phone, lastname, firstname, password, utm_campaign, tariff
            )
        )

    async def check_missing_fields(self, step: int, office: str) -> Any:
        return await self._run(endpoints.check_missing_fields(step, office))

    async def get_profile_fields(self, reception: int) -> Any:
        return await self._run(endpoints.get_profile_fields(reception))

    async def get_user_data(self) -> UserDataResponse:
        """Account snapshot (OPQ) decoded into typed models.

        Raises:
            DecodeError: A field could not be decoded; ``path`` names it
        """
        return await self._run(endpoints.get_user_data(), endpoints.UserDataAdapter())

    async def account_summary(self) -> Any:
        return await self._run(endpoints.account_summary())

    async def get_tariffs_list(self) -> Any:
        return await self._run(endpoints.get_tariffs_list())

    async def get_requests_history(
        self,
        start: datetime,
        end: datetime,
        doc_id: int | None = None,
        exec_id: int | None = None,
        limit: int | None = None,
        offset: int | None = None,
        status: int | None = None,
    ) -> Any:
        return await self._run(
            endpoints.get_requests_history(start, end, doc_id, exec_id, limit, offset, status)
        )

    async def get_order_files(
        self, order_id: int | None = None, internal_id: int | None = None
    ) -> Any:
        return await self._run(endpoints.get_order_files(order_id, internal_id))

    async def get_broker_report(
        self,
        start: date,
        end: date,
        period: time = time(23, 59, 59),
        data_block_type: str | None = None,
    ) -> Any:
        return await self._run(endpoints.get_broker_report(start, end, period, data_block_type))

    async def corporate_actions(self, reception: int = 35) -> Any:
        return await self._run(endpoints.corporate_actions(reception))

    async def list_security_sessions(self) -> Any:
        return await self._core.list_security_sessions()

    # Market data

    async def get_market_status(self, market: str = "*", mode: str | None = None) -> Any:
        return await self._run(endpoints.get_market_status(market, mode))

    async def get_most_traded(
        self,
        instrument_type: str = "stocks",
        exchange: str = "usa",
        gainers: bool = True,
        limit: int = 10,
    ) -> Any:
        return await self._run(endpoints.get_most_traded(instrument_type, exchange, gainers, limit))

    async def export_securities(
        self, symbols: Iterable[str], fields: Iterable[str] | None = None
    ) -> list[Any]:
        """Export security records, at most 100 symbols per upstream call."""
        results: list[Any] = []
        for params in endpoints.export_params(symbols, fields):
            response = await self._core.get_request(endpoints.EXPORT_PATH, params)
            results.extend(endpoints.export_rows(response.json()))
        return results

    async def security_info(self, symbol: str, sup: bool = True) -> Any:
        return await self._run(endpoints.security_info(symbol, sup))

    async def get_options(self, underlying: str, exchange: str) -> Any:
        return await self._run(endpoints.get_options(underlying, exchange))

    async def get_candles(
        self, symbol: str, start: datetime, end: datetime, timeframe: int = 86_400
    ) -> Any:
        return await self._run(endpoints.get_candles(symbol, start, end, timeframe))

    async def get_quotes(self, symbols: Iterable[str]) -> Any:
        return await self._run(endpoints.get_quotes(symbols))

    async def get_trades_history(
        self,
        start: date,
        end: date,
        trade_id: int | None = None,
        limit: int | None = None,
        symbol: str | None = None,
        currency: str | None = None,
    ) -> Any:
        return await self._run(
            endpoints.get_trades_history(start, end, trade_id, limit, symbol, currency)
        )

    async def find_symbol(self, symbol: str, exchange: str | None = None) -> Any:
        return await self._run(endpoints.find_symbol(symbol, exchange))

    async def get_news(
        self,
        query: str,
        symbol: str | None = None,
        story_id: str | None = None,
        limit: int = 30,
    ) -> Any:
        return await self._run(endpoints.get_news(query, symbol, story_id, limit))

    async def symbol(self, symbol: str, lang: str = "en") -> Any:
        return await self._run(endpoints.symbol(symbol, lang))

    async def symbols(self, exchange: str | None = None) -> Any:
        return await self._run(endpoints.symbols(exchange))

    async def get_refbook(self, name: str | None = None) -> list[dict[str, Any]]:
        """Records of one refbook archive of the latest date, or of all of them.

        Args:
            name: Archive name (e.g. ``"usa"``); ``None`` or ``"all"`` loads
                every archive
        """
        listing = (await self._core.get_request(refbooks.dates_path())).text()
        reference_date = refbooks.parse_latest_date(listing)

        if name is None or name == refbooks.ALL:
            response = await self._core.get_request(refbooks.names_path(reference_date))
            names = refbooks.parse_names(response.text())
        else:
            names = [name]

        records: list[dict[str, Any]] = []
        for refbook in names:
            path = refbooks.archive_path(reference_date, refbook)
            response = await self._core.get_request(path)
            records.extend(refbooks.parse_archive(response.content))
        return records

    async def get_all(
        self, filters: Mapping[str, Any] | None = None, show_expired: bool = False
    ) -> list[Any]:
        """Refbook records matching every filter.

        Unless ``show_expired`` is set only tradable rows (``istrade=1``) are
        kept. A string ``mkt_short_code`` filter selects the archive to load.
        """
        criteria = refbooks.build_filters(filters, show_expired)
        records = await self.get_refbook(refbooks.refbook_name(criteria))
        return refbooks.select(records, criteria)

    # Price alerts

    async def get_price_alerts(self, symbol: str | None = None) -> Any:
        return await self._run(endpoints.get_price_alerts(symbol))

    async def add_price_alert(
        self,
        symbol: str,
        price: float | str | Iterable[float | str],
        trigger_type: str = "crossing",
        quote_type: str = "ltp",
        send_to: str = "email",
        frequency: int = 0,
        expire: int = 0,
    ) -> Any:
        return await self._run(
            endpoints.add_price_alert(
                symbol, price, trigger_type, quote_type, send_to, frequency, expire
            )
        )

    async def delete_price_alert(self, alert_id: int) -> Any:
        return await self._run(endpoints.delete_price_alert(alert_id))

    # Orders

    async def buy(
        self,
        symbol: str,
        quantity: int = 1,
        price: float = 0.0,
        duration: str = "day",
        use_margin: bool = True,
        custom_order_id: int | None = None,
    ) -> Any:
        """Place a buy order; ``quantity`` must be positive."""
        endpoints.require_positive(quantity)
        return await self.trade(symbol, quantity, price, duration, use_margin, custom_order_id)

    async def sell(
        self,
        symbol: str,
        quantity: int = 1,
        price: float = 0.0,
        duration: str = "day",
        use_margin: bool = True,
        custom_order_id: int | None = None,
    ) -> Any:
        """Place a sell order; ``quantity`` must be positive."""
        endpoints.require_positive(quantity)
        return await self.trade(symbol, -quantity, price, duration, use_margin, custom_order_id)

    async def trade(
        self,
        symbol: str,
        quantity: int = 1,
        price: float = 0.0,
        duration: str = "day",
        use_margin: bool = True,
        custom_order_id: int | None = None,
    ) -> Any:
        """Place an order.

        Args:
            symbol: Instrument, e.g. ``AAPL.US``
            quantity: Signed size; positive buys, negative sells
            price: Limit price; ``0`` places a market order
            duration: ``day``, ``ext``, ``gtc`` or ``ioc``
            use_margin: Trade on margin rather than cash
            custom_order_id: Caller-assigned order id

        Raises:
            InvalidInputError: Zero quantity, unknown duration or non-finite
                price; raised before any request is sent
        """
        if endpoints.is_ioc(duration):
            order = await self.trade(symbol, quantity, price, "day", use_margin, custom_order_id)
            order_id = endpoints.placed_order_id(order)
            if order_id is not None:
                try:
                    await self.cancel(order_id)
                except TradernetError as exc:
                    logger.warning(f"IOC cancel of order {order_id} failed: {exc}")
            return order

        return await self._run(
            endpoints.trade(symbol, quantity, price, duration, use_margin, custom_order_id)
        )

    async def stop(self, symbol: str, price: float) -> Any:
        return await self._run(endpoints.stop(symbol, price))

    async def trailing_stop(self, symbol: str, percent: int = 1) -> Any:
        return await self._run(endpoints.trailing_stop(symbol, percent))

    async def take_profit(self, symbol: str, price: float) -> Any:
        return await self._run(endpoints.take_profit(symbol, price))

    async def cancel(self, order_id: int) -> Any:
        return await self._run(endpoints.cancel(order_id))

    async def cancel_all(self) -> list[Any]:
        """Cancel every active order.

        Returns:
            One entry per active order: the cancel response, or the
            ``TradernetError`` raised for that order

        Raises:
            TradernetError: Fetching the active orders failed
        """
        placed = await self.get_placed(active=True)
        results: list[Any] = []
        for order_id in endpoints.active_order_ids(placed):
            try:
                results.append(await self.cancel(order_id))
            except TradernetError as exc:
                logger.warning(f"Cancel of order {order_id} failed: {exc}")
                results.append(exc)
        return results

    async def get_placed(self, active: bool = True) -> Any:
        return await self._run(endpoints.get_placed(active))

    async def get_historical(self, start: datetime, end: datetime) -> Any:
        return await self._run(endpoints.get_historical(start, end))
