"""Unit tests for lenient field coercion."""

from __future__ import annotations

import logging

import pytest
from pydantic import BaseModel, ValidationError

from ntapi.sdk.models.fields import (
    LenientFloat,
    LenientInt,
    LenientStr,
    OptionalFloat,
    OptionalInt,
    merge_named_lists,
)
from ntapi.sdk.models.user_data import UserLists


class Row(BaseModel):
    rev: LenientInt = 0
    size: OptionalInt = None
    price: LenientFloat = 0.0
    change: OptionalFloat = None
    label: LenientStr = ""


class TestLenientInt:
    """Test integer coercion."""

    @pytest.mark.parametrize("wire", ["", 1.0, "1", 1])
    def test_integral_values_decode_silently(self, wire, caplog):
        """Test integral wire values decode without an anomaly warning."""
        with caplog.at_level(logging.WARNING, logger="ntapi.sdk.models.fields"):
            row = Row(rev=wire)
        assert row.rev == (0 if wire == "" else 1)
        assert caplog.records == []

    def test_fractional_number_truncated_and_flagged(self, caplog):
        """Test 1.5 becomes 1 and the loss is logged with the field name."""
        with caplog.at_level(logging.WARNING, logger="ntapi.sdk.models.fields"):
            row = Row(rev=1.5)
        assert row.rev == 1
        assert len(caplog.records) == 1
        assert "rev" in caplog.records[0].getMessage()

    def test_fractional_string_truncated_and_flagged(self, caplog):
        """Test a fractional numeric string falls back to float parse."""
        with caplog.at_level(logging.WARNING, logger="ntapi.sdk.models.fields"):
            row = Row(rev=" -2.7 ")
        assert row.rev == -2
        assert len(caplog.records) == 1

    def test_null_and_bool(self):
        """Test null maps to zero and booleans to 0/1."""
        assert Row(rev=None).rev == 0
        assert Row(rev=True).rev == 1
        assert Row(rev=False).rev == 0

    def test_optional_absent_values(self):
        """Test optional fields map null and empty string to None."""
        assert Row(size=None).size is None
        assert Row(size="").size is None
        assert Row(size="  ").size is None
        assert Row(size="7").size == 7

    @pytest.mark.parametrize("wire", ["abc", [1], {"a": 1}, float("inf")])
    def test_unparseable_rejected(self, wire):
        """Test values with no integer reading fail validation."""
        with pytest.raises(ValidationError) as exc_info:
            Row(rev=wire)
        assert exc_info.value.errors()[0]["loc"] == ("rev",)


class TestLenientFloat:
    """Test float coercion."""

    def test_string_numbers(self):
        """Test numeric strings parse as floats."""
        assert Row(price="189.80").price == pytest.approx(189.8)

    def test_absent_values(self):
        """Test empty and null map to zero or None."""
        assert Row(price="").price == 0.0
        assert Row(price=None).price == 0.0
        assert Row(change="").change is None

    def test_bool(self):
        """Test booleans map to 1.0 and 0.0."""
        assert Row(price=True).price == 1.0


class TestLenientStr:
    """Test string coercion."""

    def test_numbers_become_strings(self):
        """Test numbers and booleans are rendered as text."""
        assert Row(label=1).label == "1"
        assert Row(label=True).label == "true"
        assert Row(label=None).label == ""


class TestNamedLists:
    """Test the three accepted watchlist shapes."""

    def test_shapes_are_equivalent(self):
        """Test map, list of maps and flat list decode to the same value."""
        common = {"userStockListSelected": "default", "stocksArray": []}
        as_map = UserLists.model_validate(
            {**common, "userStockLists": {"default": ["AAPL.US", "TSLA.US"]}}
        )
        as_entries = UserLists.model_validate(
            {**common, "userStockLists": [{"default": ["AAPL.US", "TSLA.US"]}]}
        )
        as_flat = UserLists.model_validate({**common, "userStockLists": ["AAPL.US", "TSLA.US"]})

        assert as_map == as_entries == as_flat
        assert as_flat.user_stock_lists.default == ["AAPL.US", "TSLA.US"]

    def test_entries_merged(self):
        """Test single-entry maps merge into one map."""
        assert merge_named_lists([{"default": ["A"]}, {"tech": ["B"]}]) == {
            "default": ["A"],
            "tech": ["B"],
        }

    def test_empty_and_null(self):
        """Test empty list and null produce an empty map."""
        assert merge_named_lists([]) == {}
        assert merge_named_lists(None) == {}

    def test_mixed_list_rejected(self):
        """Test lists mixing strings and maps are rejected."""
        with pytest.raises(ValueError):
            merge_named_lists(["AAPL.US", {"default": []}])
