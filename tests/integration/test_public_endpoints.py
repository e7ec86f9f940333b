"""Integration tests for commands that need no API keypair."""

import os

import pytest

from ntapi.sdk import AsyncTradernet, Tradernet

pytestmark = pytest.mark.skipif(
    os.environ.get("RUN_NTAPI_NETWORK_TESTS") != "1",
    reason="Requires network access to the public Tradernet API",
)


class TestPublicEndpointsIntegration:
    """Test unsigned commands against the live API."""

    def test_find_symbol(self):
        """Test the symbol finder returns matches for a well-known ticker."""
        with Tradernet() as client:
            result = client.find_symbol("AAPL")

        assert result is not None
        assert "found" in result

    def test_most_traded(self):
        """Test the most traded list is served without keys."""
        with Tradernet() as client:
            result = client.get_most_traded(limit=5)

        assert result is not None

    def test_refbook_listing(self):
        """Test the refbook directory lists at least one date."""
        with Tradernet() as client:
            listing = client.core.get_request("/refbooks").text()

        assert "/" in listing

    @pytest.mark.asyncio
    async def test_async_find_symbol(self):
        """Test the non-blocking client against the same command."""
        async with AsyncTradernet() as client:
            result = await client.find_symbol("TSLA", "usa")

        assert result is not None
