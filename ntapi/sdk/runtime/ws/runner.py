"""Streaming subscription runner.

Architecture:
    A subscription is data, not code: ``SubscriptionSpec`` names the
    command frames to send after connecting and the event tags to keep.
    ``StreamRunner`` is the only engine; every subscription flavor runs
    through it.

    Connection lifecycle:
    connect (auth in the query string) -> send command frames -> yield
    decoded payloads until the server closes or the consumer stops.

Design Decisions:
    - Pull based: the runner is an async generator and spawns no tasks.
      Closing the generator closes the connection; no unsubscribe frame is
      sent.
    - Inbound frames are ``[tag, payload]`` JSON arrays. Tags outside the
      allow-list are dropped silently. Malformed frames become
      ``StreamError`` items and the stream continues.
    - Connection failures raise ``StreamingError``. There is no reconnect;
      callers own retry policy.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterator, Iterable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

import websockets

from ...core.exceptions import StreamingError
from ...models.events import StreamError
from ...utils.strings import stringify
from .transport import StreamConfig, connect

if TYPE_CHECKING:
    from ...core.client import BaseCore

logger = logging.getLogger(__name__)

# Marker returned by ``parse_frame`` for frames outside the allow-list
DROP = object()


@dataclass(frozen=True)
class SubscriptionSpec:
    """Command frames to send and event tags to yield for one subscription."""

    id: str
    commands: Sequence[Sequence[Any]]
    allowed_events: frozenset[str] = field(default_factory=frozenset)


def parse_frame(message: str | bytes, allowed_events: Iterable[str]) -> Any:
    """Decode one inbound frame.

    Returns:
        The payload for an allow-listed tag, ``DROP`` for any other tag, or
        a ``StreamError`` when the frame is not a text ``[tag, payload]``
        array
    """
    if not isinstance(message, str):
        return StreamError("unexpected non-text frame", raw=message)
    try:
        parsed = json.loads(message)
    except json.JSONDecodeError as exc:
        return StreamError(f"invalid JSON frame: {exc}", raw=message)
    if not isinstance(parsed, list) or len(parsed) != 2 or not isinstance(parsed[0], str):
        return StreamError("expected a [tag, payload] array", raw=message)

    event, payload = parsed
    if event not in allowed_events:
        return DROP
    return payload


class StreamRunner:
    """Run subscriptions on authenticated WebSocket connections."""

    def __init__(self, core: BaseCore, config: StreamConfig | None = None) -> None:
        self._core = core
        self.config = config or StreamConfig()

    def build_url(self) -> str:
        """Streaming URL with the authentication query parameters."""
        return f"{self._core.websocket_url}?{urlencode(self._core.websocket_auth())}"

    async def run(self, spec: SubscriptionSpec) -> AsyncIterator[Any]:
        """Yield payloads for ``spec`` until the connection closes.

        Raises:
            StreamingError: Connecting, sending or receiving failed
            SerializationError: A command frame is not JSON serializable
        """
        frames = [stringify(list(command)) for command in spec.commands]
        allowed = frozenset(spec.allowed_events)
        url = self.build_url()

        try:
            async with connect(url, self.config) as websocket:
                for frame in frames:
                    logger.debug(f"Subscribing ({spec.id}): {frame}")
                    await websocket.send(frame)

                async for message in websocket:
                    item = parse_frame(message, allowed)
                    if item is DROP:
                        continue
                    if isinstance(item, StreamError):
                        logger.warning(f"Malformed frame on {spec.id} stream: {item.message}")
                    yield item
        except websockets.exceptions.ConnectionClosedOK:
            logger.debug(f"{spec.id} stream closed by server")
        except (OSError, asyncio.TimeoutError, websockets.exceptions.WebSocketException) as exc:
            raise StreamingError(f"{spec.id} stream failed: {exc}") from exc
