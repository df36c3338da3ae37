"""
JSON serialization/deserialization tools

Converts request values to JSON bytes and decodes JSON payloads either into
generic Python values or into a shape chosen by the caller. Protobuf message
types are decoded with ``json_format``; every other shape (plain types,
typing generics, dataclasses, pydantic models) goes through a pydantic
``TypeAdapter`` in strict mode.
"""

import dataclasses
import json
from typing import Any, Callable, Dict, Optional, Type, Union

from google.protobuf import json_format
from google.protobuf.message import Message
from pydantic import BaseModel, PydanticUserError, TypeAdapter, ValidationError

from daemon_rpc.errors import DecodeError, SerializeError


def protobuf_to_dict(message: Message) -> Dict[str, Any]:
    """Convert Protobuf message to dictionary

    Args:
        message: Protobuf message object

    Returns:
        Dict: Dictionary containing message fields
    """
    if message is None:
        return {}

    return json_format.MessageToDict(message, preserving_proto_field_name=True)


def dict_to_protobuf(data: Any, message_type: Type[Message]) -> Message:
    """Convert a JSON value to a new Protobuf message

    Args:
        data: Dictionary data, or the JSON form of a well-known type (e.g. ``42`` for ``Int64Value``)
        message_type: Protobuf message type

    Returns:
        Message: Protobuf message object

    Raises:
        DecodeError: Data does not fit the message type
    """
    message = message_type()
    try:
        json_format.ParseDict(data, message, ignore_unknown_fields=True)
    except (json_format.ParseError, TypeError, ValueError, AttributeError) as e:
        raise DecodeError(f"cannot decode into {message_type.__name__}: {e}") from e
    return message


def _encode_default(value: Any) -> Any:
    if isinstance(value, Message):
        return protobuf_to_dict(value)
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def serialize(value: Any) -> bytes:
    """Encode a value as compact UTF-8 JSON

    Dataclass instances, pydantic models and Protobuf messages are encoded as JSON objects.

    Raises:
        SerializeError: The value contains content JSON cannot represent
    """
    try:
        return json.dumps(
            value,
            default=_encode_default,
            allow_nan=False,
            separators=(",", ":"),
        ).encode("utf-8")
    except (TypeError, ValueError, RecursionError) as e:
        raise SerializeError(f"cannot serialize value: {e}") from e


def deserialize(data: Union[bytes, str], result_type: Any = None) -> Any:
    """Decode JSON bytes, optionally into the shape described by ``result_type``

    Args:
        data: Raw JSON document
        result_type: Optional shape hint, see ``ResultType.of``

    Returns:
        Generic value (dict/list/str/int/float/bool/None) or a new instance of the hinted shape

    Raises:
        DecodeError: Malformed JSON or shape mismatch
    """
    try:
        if isinstance(data, (bytes, bytearray)):
            data = data.decode("utf-8")
        value = json.loads(data)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DecodeError(f"malformed JSON: {e}") from e

    if result_type is None:
        return value
    return decode_as(value, result_type)


def shape_name(shape: Any) -> str:
    """Readable name of a shape hint, used in error messages."""
    if isinstance(shape, ResultType):
        return shape.name
    if isinstance(shape, type):
        return shape.__name__
    return str(shape).replace("typing.", "")


def _protobuf_decoder(message_type: Type[Message]) -> Callable[[Any], Message]:
    # Well-known types (wrappers, Struct, ListValue...) have non-object JSON forms
    well_known = message_type.DESCRIPTOR.full_name.startswith("google.protobuf.")

    def decode(value: Any) -> Message:
        if not well_known and not isinstance(value, dict):
            raise DecodeError(f"cannot decode {type(value).__name__} into {message_type.__name__}")
        return dict_to_protobuf(value, message_type)

    return decode


def _adapter_decoder(shape: Any, name: str) -> Callable[[Any], Any]:
    try:
        adapter = TypeAdapter(shape)
    except (PydanticUserError, TypeError) as e:
        raise TypeError(f"unsupported result type: {name}") from e

    def decode(value: Any) -> Any:
        # Validated from JSON so strict mode still accepts objects for dataclasses and models
        try:
            return adapter.validate_json(json.dumps(value), strict=True)
        except ValidationError as e:
            raise DecodeError(f"cannot decode result into {name}: {e}") from e

    return decode


class ResultType:
    """Descriptor of the shape a response result is decoded into.

    Pairs a readable ``name`` with a ``decode`` factory that builds a new
    instance from the generic JSON payload.

    Args:
        name: Shape name used in logs and error messages
        decode: Callable taking the generic payload and returning the decoded instance
    """

    def __init__(self, name: str, decode: Callable[[Any], Any]):
        self.name = name
        self.decode = decode

    @classmethod
    def of(cls, shape: Any) -> Optional["ResultType"]:
        """Build a descriptor from a shape hint; ``None`` stays ``None``.

        Raises:
            TypeError: The shape is not supported
        """
        if shape is None or isinstance(shape, ResultType):
            return shape
        name = shape_name(shape)
        if isinstance(shape, type) and issubclass(shape, Message):
            return cls(name, _protobuf_decoder(shape))
        return cls(name, _adapter_decoder(shape, name))

    def __repr__(self) -> str:
        return f"ResultType({self.name})"


def decode_as(value: Any, shape: Any) -> Any:
    """Decode a generic JSON value into a new instance of ``shape``

    Raises:
        DecodeError: The value does not match the shape
        TypeError: The shape itself is not supported
    """
    return ResultType.of(shape).decode(value)
