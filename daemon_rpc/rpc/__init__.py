"""
JSON-RPC Implementation Module

- envelope: request/response shapes and result decoding
- client: HTTP client and the process-wide default client
"""

from .envelope import Request, Response, ResultType, decode_response
from .client import Client, basic_auth_header, do, get_default_client

__all__ = [
    "Client",
    "Request",
    "Response",
    "ResultType",
    "basic_auth_header",
    "decode_response",
    "do",
    "get_default_client",
]
