"""Custom exception hierarchy."""

from __future__ import annotations

from typing import Any


class TradernetError(Exception):
    """Base exception for all library errors."""

    pass


class MissingKeypairError(TradernetError):
    """A signed call was attempted without both public and private keys."""

    def __init__(self, message: str = "missing API keypair") -> None:
        super().__init__(message)


class UnsupportedApiVersionError(TradernetError):
    """Signed calls accept API versions 2 and 3 only."""

    def __init__(self, version: int) -> None:
        super().__init__(f"unsupported API version: {version}")
        self.version = version


class InvalidInputError(TradernetError):
    """Caller-supplied value failed local validation.

    Raised before any network call is attempted. ``value`` carries the
    offending input when there is a single one to blame.
    """

    def __init__(self, message: str, value: Any = None) -> None:
        super().__init__(message)
        self.value = value


class TransportError(TradernetError):
    """Non-2xx HTTP status or connection failure."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class SerializationError(TradernetError):
    """Malformed JSON in either direction."""

    pass


class DecodeError(TradernetError):
    """Typed decode of a response failed at a known field path.

    Architecture:
        The account snapshot carries well over eighty leaf fields, so the
        error always names the dotted location of the first offending field
        (e.g. ``OPQ.quotes.q.0.rev``). The complete list of validation
        errors is kept in ``errors`` for callers that want every failure.
    """

    def __init__(
        self,
        message: str,
        path: str,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path
        self.errors = errors or []


class StreamingError(TradernetError):
    """Connection-level failure of a streaming subscription."""

    pass
