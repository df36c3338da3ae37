"""
Transport adapter interface

Defines the capability the RPC client needs from a transport: send one
request and return status, headers and body. Keeping the client on this
interface lets the HTTP stack be swapped (or faked in tests) without touching
the call logic.
"""

import abc
from dataclasses import dataclass, field
from typing import Dict


@dataclass(frozen=True)
class TransportResponse:
    """Fully read response of one round trip."""

    status_code: int
    reason: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def status_line(self) -> str:
        """Status line, e.g. ``"404 Not Found"``."""
        if self.reason:
            return f"{self.status_code} {self.reason}"
        return str(self.status_code)

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class TransportInterface(abc.ABC):
    """Transport adapter interface, every transport must implement these methods"""

    @abc.abstractmethod
    def send(self, method: str, url: str, headers: Dict[str, str], body: bytes) -> TransportResponse:
        """Send one request and wait for the complete response

        Args:
            method: HTTP method
            url: Target URL
            headers: Request headers
            body: Request body

        Returns:
            TransportResponse: Status, headers and fully read body

        Raises:
            TransportError: The request could not be delivered
        """
        pass

    @abc.abstractmethod
    def close(self) -> None:
        """Close the transport and release resources"""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
