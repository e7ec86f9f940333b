"""Tradernet SDK - REST and streaming client for the Tradernet brokerage API."""

from .clients import AsyncTradernet, Tradernet, TradernetSymbol, TradernetWebsocket
from .core import (
    AsyncCore,
    Core,
    DecodeError,
    InvalidInputError,
    MissingKeypairError,
    SerializationError,
    StreamingError,
    TradernetError,
    TransportError,
    UnsupportedApiVersionError,
)
from .models import (
    OptionProperties,
    StreamError,
    TradernetOption,
    UserDataResponse,
    decode_user_data,
    parse_option,
)
from .runtime.ws import StreamConfig

__version__ = "0.1.0"

__all__ = [
    # Clients
    "Tradernet",
    "AsyncTradernet",
    "TradernetWebsocket",
    "TradernetSymbol",
    # Core
    "Core",
    "AsyncCore",
    "StreamConfig",
    # Models
    "UserDataResponse",
    "decode_user_data",
    "TradernetOption",
    "OptionProperties",
    "parse_option",
    "StreamError",
    # Exceptions
    "TradernetError",
    "MissingKeypairError",
    "UnsupportedApiVersionError",
    "InvalidInputError",
    "TransportError",
    "SerializationError",
    "DecodeError",
    "StreamingError",
]
