"""Data models for Tradernet payloads.

Architecture:
    Pydantic v2 models for the account snapshot (frozen, alias-aware,
    tolerant of wire-type drift) plus small frozen dataclasses for option
    contracts and stream items.

Model Categories:
    - Account snapshot: UserDataResponse, Opq and its sub-records
    - Instruments: TradernetOption, OptionProperties
    - Streaming: StreamError
"""

from .events import StreamError
from .option import OptionProperties, TradernetOption, parse_option
from .user_data import (
    Market,
    Opq,
    PortfolioAccount,
    PortfolioPosition,
    Quote,
    UserDataResponse,
    UserInfo,
    UserLists,
    UserOptions,
    UserStockLists,
    decode_user_data,
)

__all__ = [
    "Market",
    "Opq",
    "OptionProperties",
    "PortfolioAccount",
    "PortfolioPosition",
    "Quote",
    "StreamError",
    "TradernetOption",
    "UserDataResponse",
    "UserInfo",
    "UserLists",
    "UserOptions",
    "UserStockLists",
    "decode_user_data",
    "parse_option",
]
