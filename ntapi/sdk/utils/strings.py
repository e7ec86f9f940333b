"""Signing and canonical serialization helpers.

The body that is signed and the body that is transmitted must come out of
the same routine, so every JSON payload in the library goes through
``stringify``. Query strings of GET calls to non-command paths go through
``http_build_query``.
"""

from __future__ import annotations

import hashlib
import hmac
import json
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

from ..core.exceptions import SerializationError


def sign(key: str, message: str) -> str:
    """Return the hex HMAC-SHA256 digest of ``message`` keyed by ``key``.

    Examples:
        >>> sign("secret", "payload123")
        '2d0b504df2ec038ce920731d9e4a3e0e9743cabbb6fc2c88ab923f1c52368b61'
    """
    return hmac.new(key.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).hexdigest()


def stringify(value: Any) -> str:
    """Serialize ``value`` to compact JSON with sorted keys.

    Raises:
        SerializationError: The value holds something JSON cannot express
            (including NaN and infinities)
    """
    try:
        return json.dumps(
            value,
            separators=(",", ":"),
            sort_keys=True,
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"Cannot serialize payload: {exc}") from exc


def _flatten(value: Any, key: str, out: dict[str, Any]) -> None:
    if isinstance(value, Mapping):
        for child_key, child in value.items():
            _flatten(child, f"{key}[{child_key}]", out)
    elif isinstance(value, (list, tuple)):
        for index, child in enumerate(value):
            _flatten(child, f"{key}[{index}]", out)
    else:
        out[key] = value


def _encode(value: Any) -> str:
    if isinstance(value, str):
        return quote(value, safe="")
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def http_build_query(params: Mapping[str, Any]) -> str:
    """Build a canonical query string from a possibly nested mapping.

    Nested maps and lists are flattened into ``parent[key]`` and
    ``parent[index]`` keys, pairs are sorted and string values are
    percent-encoded. Keys are not encoded.

    Examples:
        >>> http_build_query({"b": "x y", "a": {"z": True, "y": [1, None]}})
        'a[y][0]=1&a[y][1]=null&a[z]=true&b=x%20y'
    """
    flat: dict[str, Any] = {}
    for key, value in params.items():
        _flatten(value, str(key), flat)
    return "&".join(sorted(f"{key}={_encode(value)}" for key, value in flat.items()))
