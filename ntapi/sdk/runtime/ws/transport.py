"""WebSocket connection settings and the connect helper."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import websockets


@dataclass
class StreamConfig:
    """Keepalive and buffering settings for a streaming connection.

    ``None`` for ``max_size`` or ``max_queue`` leaves the websockets default
    in place.
    """

    ping_interval: float | None = 30
    ping_timeout: float | None = 10
    close_timeout: float | None = 10
    max_size: int | None = None
    max_queue: int | None = 1024


def connect(url: str, config: StreamConfig | None = None) -> Any:
    """Open ``url`` with the keepalive and buffer limits of ``config``.

    Returns the ``websockets.connect`` object; enter it with ``async with``.
    """
    settings = config or StreamConfig()
    options: dict[str, Any] = {
        "ping_interval": settings.ping_interval,
        "ping_timeout": settings.ping_timeout,
        "close_timeout": settings.close_timeout,
    }
    for name in ("max_size", "max_queue"):
        value = getattr(settings, name)
        if value is not None:
            options[name] = value
    return websockets.connect(url, **options)
