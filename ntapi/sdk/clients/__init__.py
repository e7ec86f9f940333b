"""High-level Tradernet clients."""

from .async_tradernet import AsyncTradernet
from .symbol import TradernetSymbol
from .tradernet import Tradernet
from .websocket import TradernetWebsocket

__all__ = [
    "AsyncTradernet",
    "Tradernet",
    "TradernetSymbol",
    "TradernetWebsocket",
]
