"""
daemon-rpc: JSON-RPC over HTTP client

Calls a named method on a daemon and decodes the reply into either a generic
value or a shape chosen at the call site:

1. Envelope: ``Request`` / ``Response`` with a ``result_type`` hint
2. Client: ``Client.do`` over an HTTP transport with optional Basic auth
3. Errors: transport failures are raised, daemon errors land in ``Response.error``
"""

from daemon_rpc.config import ClientConfig
from daemon_rpc.errors import (
    DaemonConnectionError,
    DecodeError,
    HTTPError,
    RpcClientError,
    RpcError,
    SerializeError,
    TransportError,
)
from daemon_rpc.rpc import Client, Request, Response, ResultType, decode_response, do, get_default_client

__version__ = "0.1.0"

__all__ = [
    "Client",
    "ClientConfig",
    "DaemonConnectionError",
    "DecodeError",
    "HTTPError",
    "Request",
    "Response",
    "ResultType",
    "RpcClientError",
    "RpcError",
    "SerializeError",
    "TransportError",
    "decode_response",
    "do",
    "get_default_client",
]
