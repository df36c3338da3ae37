"""
Error types raised by the RPC client.

Transport, serialization and decode failures are raised to the caller of
``Client.do``. Protocol-level failures reported by the remote side are not
raised; they are carried in ``Response.error`` as an ``RpcError``.
"""

CONNECTION_REFUSED_MESSAGE = "failed to connect to daemon, is it running?"


class RpcClientError(Exception):
    """Base class for every failure of a single RPC call."""


class SerializeError(RpcClientError):
    """Raised when a request cannot be encoded to the wire format."""


class TransportError(RpcClientError):
    """Raised by a transport when the request could not be delivered."""


class DaemonConnectionError(TransportError, ConnectionError):
    """Raised when the endpoint refused the connection."""

    def __init__(self, message: str = CONNECTION_REFUSED_MESSAGE):
        super().__init__(message)


class HTTPError(RpcClientError):
    """Raised when the server answers with a status other than 200.

    Args:
        status_code: Numeric HTTP status
        status_line: Status line, e.g. ``"404 Not Found"``
        body: Response body text, kept verbatim
    """

    def __init__(self, status_code: int, status_line: str, body: str):
        super().__init__(f"{status_line}: {body}")
        self.status_code = status_code
        self.status_line = status_line
        self.body = body


class DecodeError(RpcClientError, ValueError):
    """Raised when a response body is malformed or does not match the expected result shape."""


class RpcError(Exception):
    """Error object reported by the remote side inside a response envelope."""

    def __init__(self, code: int = 0, message: str = ""):
        super().__init__(code, message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"error {self.code}: {self.message}"

    def __repr__(self) -> str:
        return f"RpcError(code={self.code!r}, message={self.message!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, RpcError):
            return NotImplemented
        return self.code == other.code and self.message == other.message

    def __hash__(self) -> int:
        return hash((self.code, self.message))

    def to_dict(self):
        return {"code": self.code, "message": self.message}
