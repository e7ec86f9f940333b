"""Shared fixtures for unit tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from ntapi.sdk.runtime.rest import HTTPResponse

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def user_data_payload() -> dict:
    """Raw ``getOPQ`` response."""
    return json.loads((FIXTURES / "get_user_data.json").read_text(encoding="utf-8"))


@pytest.fixture
def make_response():
    """Build an ``HTTPResponse`` from a JSON value, text or bytes."""

    def _make(body=None, status: int = 200, url: str = "https://freedom24.com/api") -> HTTPResponse:
        if isinstance(body, bytes):
            content = body
        elif isinstance(body, str):
            content = body.encode("utf-8")
        else:
            content = json.dumps(body).encode("utf-8")
        return HTTPResponse(status=status, url=url, content=content)

    return _make
