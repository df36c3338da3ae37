from .transport import HttpTransport, is_connection_refused

__all__ = [
    "HttpTransport",
    "is_connection_refused",
]
