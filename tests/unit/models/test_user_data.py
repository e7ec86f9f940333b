"""Unit tests for the account snapshot decoder."""

from __future__ import annotations

import copy

import pytest
from pydantic import ValidationError

from ntapi.sdk.core.exceptions import DecodeError
from ntapi.sdk.models import UserDataResponse, decode_user_data


class TestDecodeUserData:
    """Test decoding the getOPQ payload."""

    def test_fixture(self, user_data_payload):
        """Test the fixture decodes into typed models."""
        data = decode_user_data(user_data_payload)

        assert isinstance(data, UserDataResponse)
        assert data.opq.brief_nm == "000000"
        assert data.opq.home_currency == "USD"
        assert len(data.opq.quotes.q) == 1
        assert data.opq.user_info.id == 100000000
        assert len(data.opq.user_options.grid_portfolio) == 3

    def test_drifted_wire_types(self, user_data_payload):
        """Test numbers sent as strings, empties and booleans are normalized."""
        opq = decode_user_data(user_data_payload).opq

        assert opq.init_margin == 0
        assert opq.reception == 1
        quote = opq.quotes.q[0]
        assert quote.rev == 5840
        assert quote.bbp == pytest.approx(189.8)
        assert quote.x_istrade == 1
        assert quote.x_min_lot_q == "1"
        assert quote.close_price == pytest.approx(191.05)
        assert quote.quote_type == 1
        assert opq.ps.acc[0].t2_in == 0.0
        assert opq.ps.pos[0].q == 10
        assert opq.markets.markets.m[0].dt == -300
        assert opq.markets.markets.m[0].date[0].from_ == "2024-03-29"
        assert opq.user_info.currently_available_ipos is None

    def test_stock_lists_merged(self, user_data_payload):
        """Test list-of-maps watchlists are merged."""
        lists = decode_user_data(user_data_payload).opq.user_lists.user_stock_lists
        assert lists.default == ["AAPL.US", "TSLA.US"]
        assert lists.model_extra == {"tech": ["NVDA.US"]}

    def test_error_path_points_at_field(self, user_data_payload):
        """Test a bad leaf reports its dotted path."""
        payload = copy.deepcopy(user_data_payload)
        payload["OPQ"]["quotes"]["q"][0]["rev"] = "not-a-number"

        with pytest.raises(DecodeError) as exc_info:
            decode_user_data(payload)

        assert exc_info.value.path == "OPQ.quotes.q.0.rev"
        assert str(exc_info.value).startswith("OPQ.quotes.q.0.rev: ")
        assert exc_info.value.errors

    def test_missing_required_field(self, user_data_payload):
        """Test a missing required field is reported by path."""
        payload = copy.deepcopy(user_data_payload)
        del payload["OPQ"]["brief_nm"]

        with pytest.raises(DecodeError) as exc_info:
            decode_user_data(payload)
        assert exc_info.value.path == "OPQ.brief_nm"

    def test_not_an_object(self):
        """Test a non-object payload is reported at the root path."""
        with pytest.raises(DecodeError) as exc_info:
            decode_user_data(["OPQ"])
        assert exc_info.value.path == "<root>"

    def test_unknown_keys_ignored(self, user_data_payload):
        """Test additive upstream fields do not break decoding."""
        payload = copy.deepcopy(user_data_payload)
        payload["OPQ"]["brand_new_field"] = {"x": 1}
        assert decode_user_data(payload).opq.brief_nm == "000000"

    def test_models_are_frozen(self, user_data_payload):
        """Test decoded models cannot be mutated."""
        data = decode_user_data(user_data_payload)
        with pytest.raises(ValidationError):
            data.opq.brief_nm = "changed"
