"""Utility functions."""

from .strings import http_build_query, sign, stringify

__all__ = ["http_build_query", "sign", "stringify"]
