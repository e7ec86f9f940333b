"""Core components."""

from .exceptions import (
    DecodeError,
    InvalidInputError,
    MissingKeypairError,
    SerializationError,
    StreamingError,
    TradernetError,
    TransportError,
    UnsupportedApiVersionError,
)
from .auth import Credentials, build_signed_headers, current_timestamp, websocket_auth
from .client import AsyncCore, BaseCore, Core
from .config import load_keypair

__all__ = [
    "AsyncCore",
    "BaseCore",
    "Core",
    "Credentials",
    "build_signed_headers",
    "current_timestamp",
    "websocket_auth",
    "load_keypair",
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
