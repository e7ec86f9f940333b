"""HTTP client helpers.

Two transports share one contract: ``request(method, url, headers, params,
data)`` returns an ``HTTPResponse`` or raises ``TransportError``. Any
non-2xx status is an error and nothing is retried.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import aiohttp
import requests

from ...core.config import DEFAULT_TIMEOUT
from ...core.exceptions import SerializationError, TransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HTTPResponse:
    """Fully read HTTP response, detached from its connection."""

    status: int
    url: str
    content: bytes = b""
    headers: Mapping[str, str] = field(default_factory=dict)

    def text(self, encoding: str = "utf-8") -> str:
        return self.content.decode(encoding, errors="replace")

    def json(self) -> Any:
        try:
            return json.loads(self.content)
        except ValueError as exc:
            raise SerializationError(f"Malformed JSON from {self.url}: {exc}") from exc


def _check_status(status: int, url: str, body: bytes) -> None:
    if not 200 <= status < 300:
        snippet = body[:200].decode("utf-8", errors="replace")
        raise TransportError(f"HTTP {status} from {url}: {snippet}", status_code=status, url=url)


class HTTPClient:
    """Async HTTP client wrapper (suspends the calling task on I/O)."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def request(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, str] | None = None,
        data: str | None = None,
    ) -> HTTPResponse:
        logger.debug(f"{method} {url} params={params}")
        try:
            async with self.session.request(
                method,
                url,
                headers=dict(headers) if headers else None,
                params=dict(params) if params else None,
                data=data.encode("utf-8") if data is not None else None,
            ) as response:
                body = await response.read()
                _check_status(response.status, url, body)
                return HTTPResponse(
                    status=response.status,
                    url=url,
                    content=body,
                    headers=dict(response.headers),
                )
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise TransportError(f"{method} {url} failed: {exc}", url=url) from exc

    async def get(
        self,
        url: str,
        params: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> HTTPResponse:
        """GET request."""
        return await self.request("GET", url, headers=headers, params=params)

    async def post(
        self,
        url: str,
        data: str,
        headers: Mapping[str, str] | None = None,
    ) -> HTTPResponse:
        """POST request with a pre-serialized body."""
        return await self.request("POST", url, headers=headers, data=data)

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> HTTPClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


class SyncHTTPClient:
    """Blocking HTTP client wrapper (occupies the calling thread)."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.timeout = timeout
        self._session: requests.Session | None = None

    @property
    def session(self) -> requests.Session:
        """Get or create session."""
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def request(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, str] | None = None,
        data: str | None = None,
    ) -> HTTPResponse:
        logger.debug(f"{method} {url} params={params}")
        try:
            response = self.session.request(
                method,
                url,
                headers=dict(headers) if headers else None,
                params=dict(params) if params else None,
                data=data.encode("utf-8") if data is not None else None,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise TransportError(f"{method} {url} failed: {exc}", url=url) from exc

        body = response.content
        _check_status(response.status_code, url, body)
        return HTTPResponse(
            status=response.status_code,
            url=url,
            content=body,
            headers=dict(response.headers),
        )

    def get(
        self,
        url: str,
        params: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> HTTPResponse:
        """GET request."""
        return self.request("GET", url, headers=headers, params=params)

    def post(
        self,
        url: str,
        data: str,
        headers: Mapping[str, str] | None = None,
    ) -> HTTPResponse:
        """POST request with a pre-serialized body."""
        return self.request("POST", url, headers=headers, data=data)

    def close(self) -> None:
        """Close session."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def __enter__(self) -> SyncHTTPClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
