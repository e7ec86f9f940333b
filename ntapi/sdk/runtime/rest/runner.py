"""REST request runners using request envelopes and response adapters."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ...core.config import DEFAULT_API_VERSION

if TYPE_CHECKING:
    from ...core.client import AsyncCore, Core


@dataclass(frozen=True)
class ApiRequest:
    """One API call: command, parameters and how to dispatch it.

    Built fresh per call by the endpoint functions and never reused.
    """

    cmd: str
    params: Mapping[str, Any] | None = None
    auth: bool = True  # False -> plain GET /api?q=...
    version: int = DEFAULT_API_VERSION


class ResponseAdapter:
    def parse(self, response: Any, request: ApiRequest) -> Any:
        return response


_PASSTHROUGH = ResponseAdapter()


class RestRunner:
    """Dispatch envelopes through a blocking core."""

    def __init__(self, core: Core) -> None:
        self._core = core

    def run(self, request: ApiRequest, adapter: ResponseAdapter | None = None) -> Any:
        if request.auth:
            data = self._core.authorized_request(request.cmd, request.params, request.version)
        else:
            data = self._core.plain_request(request.cmd, request.params)
        return (adapter or _PASSTHROUGH).parse(data, request)


class AsyncRestRunner:
    """Dispatch envelopes through a non-blocking core."""

    def __init__(self, core: AsyncCore) -> None:
        self._core = core

    async def run(self, request: ApiRequest, adapter: ResponseAdapter | None = None) -> Any:
        if request.auth:
            data = await self._core.authorized_request(
                request.cmd, request.params, request.version
            )
        else:
            data = await self._core.plain_request(request.cmd, request.params)
        return (adapter or _PASSTHROUGH).parse(data, request)
