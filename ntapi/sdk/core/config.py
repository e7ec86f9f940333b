"""Shared Tradernet constants and credential loading.

This module centralizes the domain, URLs, header names and limits used by
the request cores, the domain clients and the streaming engine so they all
agree on one set of values.
"""

from __future__ import annotations

import configparser
import os
from pathlib import Path

# Base API domain used for REST and WebSocket URLs
DOMAIN = "freedom24.com"

# Default session time-to-live (seconds)
SESSION_TIME = 18_000

# Chunk size used in batched export operations
CHUNK_SIZE = 7_000

# Max number of symbols per export request (upstream caps request size)
MAX_EXPORT_SIZE = 100

# Blocking and non-blocking transports share this total timeout (seconds)
DEFAULT_TIMEOUT = 300.0

SUPPORTED_API_VERSIONS = (2, 3)
DEFAULT_API_VERSION = 2

PUBLIC_KEY_HEADER = "X-NtApi-PublicKey"
TIMESTAMP_HEADER = "X-NtApi-Timestamp"
SIGNATURE_HEADER = "X-NtApi-Sig"

AUTH_SECTION = "auth"


def get_base_url(domain: str = DOMAIN) -> str:
    """Get the HTTPS base URL for the REST API.

    Examples:
        >>> get_base_url()
        'https://freedom24.com'
    """
    return f"https://{domain}"


def get_ws_base_url(domain: str = DOMAIN) -> str:
    """Get the WSS base URL for the streaming API.

    Examples:
        >>> get_ws_base_url()
        'wss://wss.freedom24.com'
    """
    return f"wss://wss.{domain}"


def load_keypair(path: str | os.PathLike[str]) -> tuple[str | None, str | None]:
    """Read the ``[auth]`` section of an INI file.

    Args:
        path: Path to a file containing ``public=`` and ``private=`` keys

    Returns:
        ``(public, private)``; a key missing from the file is ``None``

    Raises:
        OSError: The file cannot be read
    """
    parser = configparser.ConfigParser(interpolation=None)
    with Path(path).open(encoding="utf-8") as handle:
        parser.read_file(handle)

    if not parser.has_section(AUTH_SECTION):
        return None, None

    section = parser[AUTH_SECTION]
    public = section.get("public")
    private = section.get("private")
    return (public.strip() if public else None, private.strip() if private else None)
