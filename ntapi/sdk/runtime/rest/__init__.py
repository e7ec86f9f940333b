"""REST runtime abstractions."""

from .http_client import HTTPClient, HTTPResponse, SyncHTTPClient
from .runner import ApiRequest, AsyncRestRunner, ResponseAdapter, RestRunner

__all__ = [
    "HTTPClient",
    "SyncHTTPClient",
    "HTTPResponse",
    "ApiRequest",
    "ResponseAdapter",
    "RestRunner",
    "AsyncRestRunner",
]
