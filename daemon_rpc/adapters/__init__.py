"""
Transport Adapters Module

- adapter_interface: transport capability used by the client
- http: httpx-backed HTTP transport
"""

from .adapter_interface import TransportInterface, TransportResponse

__all__ = [
    "TransportInterface",
    "TransportResponse",
]
