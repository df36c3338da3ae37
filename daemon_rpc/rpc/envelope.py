"""
JSON-RPC envelope model

Request and response shapes exchanged with the daemon. A single ``Response``
type serves every remote method: the caller sets ``result_type`` before the
call and the ``result`` payload is decoded into that shape.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Optional, TypeVar, Union

from daemon_rpc.errors import DecodeError, RpcError
from daemon_rpc.utils.serialization import ResultType, deserialize, serialize

T = TypeVar("T")


@dataclass(frozen=True)
class Request:
    """Outgoing call. ``jsonrpc`` is left off the wire when empty."""

    method: str
    params: Any = None
    id: int = 0
    jsonrpc: str = ""

    def __post_init__(self):
        if not isinstance(self.method, str) or not self.method:
            raise ValueError("method name must be a non-empty string")
        if isinstance(self.id, bool) or not isinstance(self.id, int):
            raise ValueError(f"request id must be an integer, got {self.id!r}")

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.jsonrpc:
            data["jsonrpc"] = self.jsonrpc
        data["method"] = self.method
        data["params"] = self.params
        data["id"] = self.id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Request":
        return cls(
            method=data.get("method", ""),
            params=data.get("params"),
            id=data.get("id", 0),
            jsonrpc=data.get("jsonrpc", ""),
        )

    def to_json(self) -> bytes:
        """Encode the request for the wire.

        Raises:
            SerializeError: ``params`` holds content JSON cannot represent
        """
        return serialize(self.to_dict())

    @classmethod
    def from_json(cls, data: Union[bytes, str]) -> "Request":
        """Decode a request from the wire.

        Raises:
            DecodeError: Malformed JSON or an invalid method/id
        """
        value = deserialize(data)
        if not isinstance(value, dict):
            raise DecodeError(f"request must be a JSON object, got {type(value).__name__}")
        try:
            return cls.from_dict(value)
        except ValueError as e:
            raise DecodeError(f"invalid request: {e}") from e


@dataclass
class Response(Generic[T]):
    """Incoming envelope, filled in place by ``decode``.

    Exactly one of ``result`` and ``error`` is meaningful. ``result_type`` is
    supplied by the caller and never read from the wire.
    """

    result: Optional[T] = None
    error: Optional[RpcError] = None
    result_type: Any = field(default=None, compare=False)

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> "Response[T]":
        """Raise the carried ``RpcError``, if any."""
        if self.error is not None:
            raise self.error
        return self

    def decode(self, data: Union[bytes, str]) -> "Response[T]":
        return decode_response(data, self)


def _decode_error(raw: Any) -> Optional[RpcError]:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise DecodeError(f"error member must be an object, got {type(raw).__name__}")

    code = raw.get("code", 0)
    message = raw.get("message", "")
    if code is None:
        code = 0
    if message is None:
        message = ""
    if isinstance(code, bool) or not isinstance(code, int):
        raise DecodeError(f"error code must be an integer, got {json.dumps(code)}")
    if not isinstance(message, str):
        raise DecodeError(f"error message must be a string, got {json.dumps(message)}")
    return RpcError(code, message)


def decode_response(data: Union[bytes, str],
                    response: Response,
                    result_type: Optional[ResultType] = None) -> Response:
    """Decode a raw envelope into ``response``

    The envelope is parsed generically first. ``result`` is decoded into
    ``response.result_type`` when one is set, otherwise kept as a generic
    value; a missing or null result leaves ``response.result`` as ``None``.
    ``response`` is only updated once the whole envelope decoded.

    Args:
        data: Raw response body
        response: Destination, possibly carrying a ``result_type`` hint
        result_type: Already resolved descriptor of ``response.result_type``

    Returns:
        The same ``response`` instance

    Raises:
        DecodeError: Malformed body or result/hint mismatch
        TypeError: ``response.result_type`` is not a supported shape
    """
    envelope = deserialize(data)
    if envelope is None:
        envelope = {}
    if not isinstance(envelope, dict):
        raise DecodeError(f"response must be a JSON object, got {type(envelope).__name__}")

    error = _decode_error(envelope.get("error"))

    result = envelope.get("result")
    if result is not None:
        if result_type is None:
            result_type = ResultType.of(response.result_type)
        if result_type is not None:
            result = result_type.decode(result)

    response.error = error
    response.result = result
    return response
