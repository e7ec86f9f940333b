"""Unit tests for request envelopes and runners."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from ntapi.sdk.runtime.rest import ApiRequest, AsyncRestRunner, ResponseAdapter, RestRunner


class _Upper(ResponseAdapter):
    def parse(self, response, request):
        return {"cmd": request.cmd, "value": response["value"].upper()}


class TestApiRequest:
    """Test the request envelope."""

    def test_defaults(self):
        """Test requests default to signed, API version 2."""
        request = ApiRequest("getOPQ")
        assert request.params is None
        assert request.auth is True
        assert request.version == 2


class TestRestRunner:
    """Test the blocking runner."""

    def test_signed_dispatch(self):
        """Test signed envelopes go to authorized_request."""
        core = MagicMock()
        core.authorized_request.return_value = {"value": "ok"}

        result = RestRunner(core).run(ApiRequest("getNews", {"limit": 1}, version=3))

        assert result == {"value": "ok"}
        core.authorized_request.assert_called_once_with("getNews", {"limit": 1}, 3)
        core.plain_request.assert_not_called()

    def test_plain_dispatch(self):
        """Test plain envelopes go to plain_request."""
        core = MagicMock()
        RestRunner(core).run(ApiRequest("tickerFinder", {"text": "A"}, auth=False))
        core.plain_request.assert_called_once_with("tickerFinder", {"text": "A"})

    def test_adapter_applied(self):
        """Test the adapter receives the response and the envelope."""
        core = MagicMock()
        core.authorized_request.return_value = {"value": "ok"}
        result = RestRunner(core).run(ApiRequest("getOPQ"), _Upper())
        assert result == {"cmd": "getOPQ", "value": "OK"}


class TestAsyncRestRunner:
    """Test the non-blocking runner."""

    @pytest.mark.asyncio
    async def test_signed_dispatch(self):
        """Test signed envelopes are awaited on authorized_request."""
        core = MagicMock()
        core.authorized_request = AsyncMock(return_value={"value": "ok"})
        result = await AsyncRestRunner(core).run(ApiRequest("getOPQ"), _Upper())
        assert result == {"cmd": "getOPQ", "value": "OK"}
        core.authorized_request.assert_awaited_once_with("getOPQ", None, 2)

    @pytest.mark.asyncio
    async def test_plain_dispatch(self):
        """Test plain envelopes are awaited on plain_request."""
        core = MagicMock()
        core.plain_request = AsyncMock(return_value=[])
        assert await AsyncRestRunner(core).run(ApiRequest("getTopSecurities", auth=False)) == []
        core.plain_request.assert_awaited_once_with("getTopSecurities", None)
