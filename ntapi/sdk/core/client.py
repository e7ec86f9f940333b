"""Authenticated request core.

Architecture:
    ``BaseCore`` owns the credential pair and the base domain and knows how
    to shape the two request kinds the upstream API accepts:
    - plain: ``GET {base}/api?q=<json>``, no signature
    - authorized: ``POST {base}/api/{cmd}`` with a JSON body and
      ``X-NtApi-*`` headers signed over ``body + timestamp``
    ``Core`` and ``AsyncCore`` add a blocking or a non-blocking transport
    with identical semantics. Everything up to the network call is shared,
    so validation (keypair, API version, serialization) fails before I/O.

Design Decisions:
    - In-band ``errMsg`` responses are logged and returned as data; callers
      that recognize the field decide whether it is an error
    - Credentials and the transport handle are read-only after construction
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from typing import Any, TypeVar

from ..runtime.rest.http_client import HTTPClient, HTTPResponse, SyncHTTPClient
from ..utils.strings import http_build_query, stringify
from .auth import Credentials, build_signed_headers, current_timestamp, websocket_auth
from .config import (
    DEFAULT_API_VERSION,
    DEFAULT_TIMEOUT,
    DOMAIN,
    SUPPORTED_API_VERSIONS,
    get_base_url,
    get_ws_base_url,
    load_keypair,
)
from .exceptions import UnsupportedApiVersionError

logger = logging.getLogger(__name__)

CoreT = TypeVar("CoreT", bound="BaseCore")


class BaseCore:
    """Credential, URL and request-shaping logic shared by both cores."""

    def __init__(
        self,
        public: str | None = None,
        private: str | None = None,
        *,
        domain: str = DOMAIN,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.credentials = Credentials(public, private)
        self.domain = domain
        self.timeout = timeout
        if not self.credentials.complete:
            logger.warning(
                "A keypair was not set. It can be generated here: "
                f"{self.url}/tradernet-api/auth-api"
            )

    @classmethod
    def from_config(cls: type[CoreT], path: str | os.PathLike[str], **kwargs: Any) -> CoreT:
        """Create a core from an INI file with an ``[auth]`` section."""
        public, private = load_keypair(path)
        return cls(public, private, **kwargs)

    @property
    def public(self) -> str | None:
        return self.credentials.public

    @property
    def url(self) -> str:
        return get_base_url(self.domain)

    @property
    def websocket_url(self) -> str:
        return get_ws_base_url(self.domain)

    def websocket_auth(self) -> dict[str, str]:
        """Query parameters authenticating a streaming connection."""
        return websocket_auth(self.credentials)

    def _plain_query(self, cmd: str, params: Mapping[str, Any] | None) -> dict[str, str]:
        message: dict[str, Any] = {"cmd": cmd}
        if params is not None:
            message["params"] = dict(params)
        return {"q": stringify(message)}

    def _prepare_authorized(
        self,
        cmd: str,
        params: Mapping[str, Any] | None,
        version: int,
    ) -> tuple[str, dict[str, str], str]:
        self.credentials.require()
        _check_version(version)

        payload = stringify(dict(params or {}))
        headers = {"Content-Type": "application/json"}
        headers.update(build_signed_headers(self.credentials, current_timestamp(), payload))
        return f"{self.url}/api/{cmd}", headers, payload

    def _path_url(self, path: str, params: Mapping[str, Any] | None) -> str:
        url = f"{self.url}{path}"
        if params:
            url = f"{url}?{http_build_query(params)}"
        return url

    def _prepare_authorized_get(
        self, path: str, params: Mapping[str, Any] | None, version: int
    ) -> tuple[str, dict[str, str]]:
        self.credentials.require()
        _check_version(version)

        headers = dict(build_signed_headers(self.credentials, current_timestamp()))
        return self._path_url(path, params), headers

    @staticmethod
    def _inspect(response: HTTPResponse) -> Any:
        result = response.json()
        if isinstance(result, dict) and "errMsg" in result:
            logger.warning(f"Error: {result.get('errMsg')!r}")
        return result


def _check_version(version: int) -> None:
    if version not in SUPPORTED_API_VERSIONS:
        raise UnsupportedApiVersionError(version)


class Core(BaseCore):
    """Blocking request core."""

    def __init__(
        self,
        public: str | None = None,
        private: str | None = None,
        *,
        domain: str = DOMAIN,
        timeout: float = DEFAULT_TIMEOUT,
        http: SyncHTTPClient | None = None,
    ) -> None:
        super().__init__(public, private, domain=domain, timeout=timeout)
        self._http = http or SyncHTTPClient(timeout=timeout)

    def plain_request(self, cmd: str, params: Mapping[str, Any] | None = None) -> Any:
        """Unauthenticated ``GET /api`` with the command and params in ``q``."""
        logger.debug("Making a simple request to API")
        query = self._plain_query(cmd, params)
        logger.debug(f"Query: {query}")
        return self._http.get(f"{self.url}/api", params=query).json()

    def authorized_request(
        self,
        cmd: str,
        params: Mapping[str, Any] | None = None,
        version: int = DEFAULT_API_VERSION,
    ) -> Any:
        """Signed ``POST /api/{cmd}`` (API v2/v3).

        Raises:
            MissingKeypairError: Either key is absent
            UnsupportedApiVersionError: ``version`` is not 2 or 3
            TransportError: Non-2xx status or connection failure
            SerializationError: Params or response are not valid JSON
        """
        url, headers, payload = self._prepare_authorized(cmd, params, version)
        logger.debug(f"Sending POST to {url}")
        return self._inspect(self._http.post(url, data=payload, headers=headers))

    def authorized_get_request(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        version: int = DEFAULT_API_VERSION,
    ) -> HTTPResponse:
        """Signed GET to an API path; only the timestamp is signed."""
        url, headers = self._prepare_authorized_get(path, params, version)
        logger.debug(f"Sending GET to {url}")
        return self._http.get(url, headers=headers)

    def get_request(self, path: str, params: Mapping[str, Any] | None = None) -> HTTPResponse:
        """Unauthenticated GET to an API path."""
        url = self._path_url(path, params)
        logger.debug(f"Sending GET to {url}")
        return self._http.get(url)

    def list_security_sessions(self) -> Any:
        """Trading sessions for available securities."""
        return self.authorized_request("getSecuritySessions")

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> Core:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class AsyncCore(BaseCore):
    """Non-blocking request core."""

    def __init__(
        self,
        public: str | None = None,
        private: str | None = None,
        *,
        domain: str = DOMAIN,
        timeout: float = DEFAULT_TIMEOUT,
        http: HTTPClient | None = None,
    ) -> None:
        super().__init__(public, private, domain=domain, timeout=timeout)
        self._http = http or HTTPClient(timeout=timeout)

    async def plain_request(self, cmd: str, params: Mapping[str, Any] | None = None) -> Any:
        """Unauthenticated ``GET /api`` with the command and params in ``q``."""
        logger.debug("Making a simple request to API")
        query = self._plain_query(cmd, params)
        logger.debug(f"Query: {query}")
        response = await self._http.get(f"{self.url}/api", params=query)
        return response.json()

    async def authorized_request(
        self,
        cmd: str,
        params: Mapping[str, Any] | None = None,
        version: int = DEFAULT_API_VERSION,
    ) -> Any:
        """Signed ``POST /api/{cmd}`` (API v2/v3).

        Raises:
            MissingKeypairError: Either key is absent
            UnsupportedApiVersionError: ``version`` is not 2 or 3
            TransportError: Non-2xx status or connection failure
            SerializationError: Params or response are not valid JSON
        """
        url, headers, payload = self._prepare_authorized(cmd, params, version)
        logger.debug(f"Sending POST to {url}")
        response = await self._http.post(url, data=payload, headers=headers)
        return self._inspect(response)

    async def authorized_get_request(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        version: int = DEFAULT_API_VERSION,
    ) -> HTTPResponse:
        """Signed GET to an API path; only the timestamp is signed."""
        url, headers = self._prepare_authorized_get(path, params, version)
        logger.debug(f"Sending GET to {url}")
        return await self._http.get(url, headers=headers)

    async def get_request(
        self, path: str, params: Mapping[str, Any] | None = None
    ) -> HTTPResponse:
        """Unauthenticated GET to an API path."""
        url = self._path_url(path, params)
        logger.debug(f"Sending GET to {url}")
        return await self._http.get(url)

    async def list_security_sessions(self) -> Any:
        """Trading sessions for available securities."""
        return await self.authorized_request("getSecuritySessions")

    async def close(self) -> None:
        await self._http.close()

    async def __aenter__(self) -> AsyncCore:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
