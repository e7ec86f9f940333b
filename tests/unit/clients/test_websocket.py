"""Unit tests for the streaming client."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from ntapi.sdk.clients import TradernetWebsocket
from ntapi.sdk.runtime.ws import StreamConfig


class FakeWebSocket:
    def __init__(self, messages):
        self._messages = list(messages)
        self.send = AsyncMock()

    def __aiter__(self):
        return self

    async def __anext__(self):
        if not self._messages:
            raise StopAsyncIteration
        return self._messages.pop(0)


def _connect_returning(websocket):
    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=websocket)
    context.__aexit__ = AsyncMock(return_value=False)
    return context


@pytest.fixture
def core():
    core = MagicMock()
    core.websocket_url = "wss://wss.freedom24.com"
    core.websocket_auth.return_value = {"X-NtApi-PublicKey": "pub", "X-NtApi-Timestamp": "1"}
    return core


class TestTradernetWebsocket:
    """Test subscriptions sent and events yielded."""

    @pytest.mark.asyncio
    async def test_quotes_single_symbol(self, core):
        """Test a bare symbol is wrapped in a list."""
        websocket = FakeWebSocket([json.dumps(["q", {"c": "AAPL.US", "ltp": 1.0}])])
        with patch("websockets.connect", return_value=_connect_returning(websocket)):
            events = [event async for event in TradernetWebsocket(core).quotes("AAPL.US")]

        assert events == [{"c": "AAPL.US", "ltp": 1.0}]
        websocket.send.assert_awaited_once_with('["quotes",["AAPL.US"]]')

    @pytest.mark.asyncio
    async def test_market_depth_filters(self, core):
        """Test only order book events are yielded."""
        websocket = FakeWebSocket(
            [
                json.dumps(["q", {}]),
                json.dumps(["b", {"i": "AAPL.US"}]),
                json.dumps(["userData", {}]),
            ]
        )
        with patch("websockets.connect", return_value=_connect_returning(websocket)):
            events = [event async for event in TradernetWebsocket(core).market_depth("AAPL.US")]

        assert events == [{"i": "AAPL.US"}]
        websocket.send.assert_awaited_once_with('["orderBook",["AAPL.US"]]')

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["portfolio", "orders", "markets"])
    async def test_account_streams(self, core, method):
        """Test parameterless subscriptions."""
        websocket = FakeWebSocket([json.dumps([method, {"n": 1}])])
        with patch("websockets.connect", return_value=_connect_returning(websocket)):
            events = [event async for event in getattr(TradernetWebsocket(core), method)()]

        assert events == [{"n": 1}]
        websocket.send.assert_awaited_once_with(f'["{method}"]')

    @pytest.mark.asyncio
    async def test_custom_stream(self, core):
        """Test arbitrary commands and allow-lists."""
        websocket = FakeWebSocket([json.dumps(["news", {"id": 1}]), json.dumps(["q", {}])])
        client = TradernetWebsocket(core, StreamConfig(ping_interval=5))
        with patch("websockets.connect", return_value=_connect_returning(websocket)) as connect:
            events = [event async for event in client.stream([["news", "AAPL.US"]], ["news"])]

        assert events == [{"id": 1}]
        assert connect.call_args.kwargs["ping_interval"] == 5
