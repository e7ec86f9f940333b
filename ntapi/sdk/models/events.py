"""Items produced by streaming subscriptions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class StreamError:
    """A frame that could not be decoded.

    Yielded inline so one bad frame does not end the subscription.
    """

    message: str
    raw: Any = None
