"""Credential pair and signed-header construction.

Architecture:
    Signing is kept apart from transport so the contract can be audited and
    unit-tested without any I/O:
    - ``Credentials`` holds the optional keypair and refuses to sign when
      either half is missing
    - ``build_signed_headers`` is a pure function returning an immutable
      header mapping for one request
    - The timestamp is taken per call; signatures are never cached

Signed message shapes:
    - REST body calls: ``payload + timestamp``
    - GET calls and streaming auth: ``timestamp`` only
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from ..utils.strings import sign
from .config import PUBLIC_KEY_HEADER, SIGNATURE_HEADER, TIMESTAMP_HEADER
from .exceptions import MissingKeypairError


def current_timestamp() -> str:
    """Unix time in whole seconds, as sent in ``X-NtApi-Timestamp``."""
    return str(int(time.time()))


@dataclass(frozen=True)
class Credentials:
    """Public identifier and private secret, both optional at construction."""

    public: str | None = None
    private: str | None = None

    @property
    def complete(self) -> bool:
        return bool(self.public) and bool(self.private)

    def require(self) -> tuple[str, str]:
        """Return ``(public, private)`` or raise when either is absent."""
        if not self.public or not self.private:
            raise MissingKeypairError()
        return self.public, self.private

    def __repr__(self) -> str:
        masked = "***" if self.private else None
        return f"Credentials(public={self.public!r}, private={masked!r})"


def build_signed_headers(
    credentials: Credentials,
    timestamp: str,
    payload: str = "",
) -> Mapping[str, str]:
    """Build the authentication headers for one request.

    Args:
        credentials: Keypair; both halves must be present
        timestamp: Value sent in the timestamp header and appended to the
            signed message
        payload: Canonical body; empty for timestamp-only signatures

    Returns:
        Read-only mapping of the three ``X-NtApi-*`` headers

    Raises:
        MissingKeypairError: Either key is absent
    """
    public, private = credentials.require()
    return MappingProxyType(
        {
            PUBLIC_KEY_HEADER: public,
            TIMESTAMP_HEADER: timestamp,
            SIGNATURE_HEADER: sign(private, f"{payload}{timestamp}"),
        }
    )


def websocket_auth(credentials: Credentials, timestamp: str | None = None) -> dict[str, str]:
    """Query parameters that authenticate a streaming connection.

    Missing keys are sent empty; the server then treats the connection as
    anonymous (public market data only).
    """
    timestamp = timestamp or current_timestamp()
    return {
        PUBLIC_KEY_HEADER: credentials.public or "",
        TIMESTAMP_HEADER: timestamp,
        SIGNATURE_HEADER: sign(credentials.private or "", timestamp),
    }
