"""Runtime WebSocket helpers."""

from .runner import DROP, StreamRunner, SubscriptionSpec, parse_frame
from .subscriptions import SUBSCRIPTIONS, build_spec
from .transport import StreamConfig, connect

__all__ = [
    "DROP",
    "StreamConfig",
    "StreamRunner",
    "SubscriptionSpec",
    "SUBSCRIPTIONS",
    "build_spec",
    "connect",
    "parse_frame",
]
