"""Lenient field types for payloads whose wire types drift.

Architecture:
    The upstream API sends the same logical value in several shapes: numbers
    as strings (``""`` meaning zero or absent), floats for integer fields,
    booleans for flags and ``null`` in place of missing values. Each logical
    type gets one reusable ``Annotated`` alias with a ``BeforeValidator``
    that normalizes the wire value before pydantic validates the target
    type. Models declare the alias per field; there are no per-field
    converters.

Coercion table (required / optional):
    - native number: accepted; fractional value in an int field is
      truncated and logged
    - string: trimmed; empty -> ``0`` / ``None``; else int parse, falling
      back to float parse plus truncation
    - boolean: ``1`` / ``0``
    - null: ``0`` / ``None``

Anything else raises ``ValueError``, which pydantic reports with the
field's location.

An empty string in an optional int field decodes to ``None``, not ``0``:
the field is treated as absent rather than zero.
"""

from __future__ import annotations

import logging
import math
from typing import Annotated, Any

from pydantic import BeforeValidator, ValidationInfo

logger = logging.getLogger(__name__)


def _truncate(value: float, source: str, field: str | None) -> int:
    if not math.isfinite(value):
        raise ValueError(f"expected integer, got non-finite {source} {value!r}")
    truncated = math.trunc(value)
    if value != truncated:
        logger.warning(
            f"int field `{field}` received fractional {source} value {value}, truncating"
        )
    return truncated


def _to_int(value: Any, field: str | None, absent: int | None) -> int | None:
    if value is None:
        return absent
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return _truncate(value, "number", field)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return absent
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            raise ValueError(f"expected integer, got {value!r}") from None
        return _truncate(number, "string", field)
    raise ValueError(f"expected integer, got {type(value).__name__}")


def _to_float(value: Any, absent: float | None) -> float | None:
    if value is None:
        return absent
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return absent
        try:
            return float(text)
        except ValueError:
            raise ValueError(f"expected float, got {value!r}") from None
    raise ValueError(f"expected float, got {type(value).__name__}")


def _to_str(value: Any, absent: str | None) -> str | None:
    if value is None:
        return absent
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    raise ValueError(f"expected string or number, got {type(value).__name__}")


def _required_int(value: Any, info: ValidationInfo) -> int:
    return _to_int(value, info.field_name, 0)


def _optional_int(value: Any, info: ValidationInfo) -> int | None:
    return _to_int(value, info.field_name, None)


def _required_float(value: Any) -> float:
    return _to_float(value, 0.0)


def _optional_float(value: Any) -> float | None:
    return _to_float(value, None)


def _required_str(value: Any) -> str:
    return _to_str(value, "")


def _optional_str(value: Any) -> str | None:
    return _to_str(value, None)


LenientInt = Annotated[int, BeforeValidator(_required_int)]
OptionalInt = Annotated[int | None, BeforeValidator(_optional_int)]
LenientFloat = Annotated[float, BeforeValidator(_required_float)]
OptionalFloat = Annotated[float | None, BeforeValidator(_optional_float)]
LenientStr = Annotated[str, BeforeValidator(_required_str)]
OptionalStr = Annotated[str | None, BeforeValidator(_optional_str)]


def merge_named_lists(value: Any) -> Any:
    """Normalize a map of named symbol lists sent in one of three shapes.

    - ``{"default": [...], ...}``: kept as is
    - ``[{"default": [...]}, {...}]``: entries merged into one map
    - ``["AAPL.US", ...]``: read as the ``default`` list
    """
    if value is None:
        return {}
    if isinstance(value, dict):
        return value
    if isinstance(value, list):
        if all(isinstance(item, str) for item in value):
            return {"default": value} if value else {}
        merged: dict[str, Any] = {}
        for item in value:
            if not isinstance(item, dict):
                raise ValueError("expected object, array of objects or array of strings")
            merged.update(item)
        return merged
    raise ValueError("expected object, array of objects or array of strings")
