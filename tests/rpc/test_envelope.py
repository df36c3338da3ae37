"""
Envelope model tests

Request encoding round trips and response decoding with and without a result type hint.
"""
import json
import sys
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import pytest
from google.protobuf.struct_pb2 import Struct
from google.protobuf.wrappers_pb2 import Int64Value
from pydantic import BaseModel

from daemon_rpc.errors import DecodeError, RpcError, SerializeError
from daemon_rpc.rpc.envelope import Request, Response, ResultType, decode_response


@dataclass
class BlockInfo:
    height: int
    hash: str
    tx: List[str] = field(default_factory=list)
    difficulty: Optional[float] = None


@dataclass
class ChainInfo:
    chain: str
    tip: BlockInfo
    peers: Dict[str, int] = field(default_factory=dict)


@dataclass
class Tip:
    height: int
    difficulty: "float | None" = None


class TipModel(BaseModel):
    height: int
    hash: str


class TestRequest:
    """Test request construction and encoding"""

    @pytest.mark.parametrize("params", [
        {"address": "t1abc", "minconf": 1},
        ["t1abc", 1, True, None],
        "scalar",
        12.5,
        None,
    ])
    def test_round_trip(self, params):
        """Encoding then decoding yields an equal request for any params shape"""
        request = Request(method="getbalance", params=params, id=7, jsonrpc="1.0")
        assert Request.from_json(request.to_json()) == request

    def test_wire_format(self):
        """Request is encoded with method, params and id"""
        request = Request(method="getinfo", params=[1, 2], id=3)
        assert json.loads(request.to_json()) == {"method": "getinfo", "params": [1, 2], "id": 3}

    def test_jsonrpc_included_when_set(self):
        request = Request(method="getinfo", id=1, jsonrpc="2.0")
        assert json.loads(request.to_json())["jsonrpc"] == "2.0"

    def test_absent_params_encoded_as_null(self):
        data = json.loads(Request(method="getinfo").to_json())
        assert "params" in data
        assert data["params"] is None

    def test_empty_method_rejected(self):
        with pytest.raises(ValueError, match="non-empty"):
            Request(method="")

    def test_non_integer_id_rejected(self):
        with pytest.raises(ValueError, match="integer"):
            Request(method="getinfo", id="1")  # type: ignore

    @pytest.mark.parametrize("data", [
        b'{"method": "", "id": 1}',
        b'{"params": [], "id": 1}',
        b'{"method": "x", "id": "1"}',
        b'{"method": "x", "id": true}',
    ])
    def test_invalid_request_from_json(self, data):
        """Wire requests with a bad method or id raise DecodeError"""
        with pytest.raises(DecodeError, match="invalid request"):
            Request.from_json(data)

    def test_unserializable_params(self):
        """Non-JSON content in params raises SerializeError"""
        with pytest.raises(SerializeError):
            Request(method="getinfo", params={"when": object()}).to_json()

    def test_nan_params_rejected(self):
        with pytest.raises(SerializeError):
            Request(method="getinfo", params=[float("nan")]).to_json()

    def test_dataclass_params_encoded_as_object(self):
        params = BlockInfo(height=10, hash="00ab")
        data = json.loads(Request(method="submit", params=params).to_json())
        assert data["params"] == {"height": 10, "hash": "00ab", "tx": [], "difficulty": None}


class TestResponseDecoding:
    """Test response decoding"""

    def test_generic_result(self):
        """Without a hint the result is a generic value"""
        response = decode_response(b'{"result": 42}', Response())
        assert response.result == 42
        assert isinstance(response.result, int)
        assert response.error is None
        assert response.ok

    def test_generic_nested_result(self):
        body = b'{"result": {"blocks": [1, 2], "synced": true, "fee": 0.5, "note": null}}'
        response = decode_response(body, Response())
        assert response.result == {"blocks": [1, 2], "synced": True, "fee": 0.5, "note": None}

    def test_hinted_integer_container(self):
        """A wrapper message hint exposes the value through its own field"""
        hint = Int64Value
        response = decode_response(b'{"result": 42}', Response(result_type=hint))
        assert isinstance(response.result, Int64Value)
        assert response.result.value == 42
        assert response.result_type is hint

    def test_hinted_plain_int(self):
        response = decode_response(b'{"result": 42}', Response(result_type=int))
        assert response.result == 42

    def test_hinted_dataclass(self):
        body = json.dumps({
            "result": {
                "chain": "main",
                "tip": {"height": 100, "hash": "00ff", "tx": ["a", "b"], "extra": 1},
                "peers": {"10.0.0.1": 3},
            }
        })
        response = decode_response(body, Response(result_type=ChainInfo))
        assert response.result == ChainInfo(
            chain="main",
            tip=BlockInfo(height=100, hash="00ff", tx=["a", "b"]),
            peers={"10.0.0.1": 3},
        )

    def test_hinted_protobuf_message(self):
        response = decode_response(b'{"result": {"a": 1, "b": "x"}}', Response(result_type=Struct))
        assert isinstance(response.result, Struct)
        assert response.result["b"] == "x"

    def test_hinted_typing_generic(self):
        response = decode_response(b'{"result": [1, 2, 3]}', Response(result_type=List[int]))
        assert response.result == [1, 2, 3]

    def test_hint_allocates_new_instance(self):
        """The decoded value replaces the hint, the hint is not filled in"""
        hint = ResultType("height", lambda value: {"height": value})
        response = decode_response(b'{"result": 5}', Response(result_type=hint))
        assert response.result == {"height": 5}
        assert response.result_type is hint

    def test_hint_mismatch(self):
        """Wrong field type under a hint raises DecodeError"""
        body = b'{"result": {"height": "tall", "hash": "00"}}'
        with pytest.raises(DecodeError, match="(?s)into BlockInfo.*height"):
            decode_response(body, Response(result_type=BlockInfo))

    def test_hint_missing_required_field(self):
        with pytest.raises(DecodeError, match="(?s)hash.*Field required"):
            decode_response(b'{"result": {"height": 1}}', Response(result_type=BlockInfo))

    def test_hinted_pydantic_model(self):
        response = decode_response(b'{"result": {"height": 3, "hash": "0a", "extra": true}}',
                                   Response(result_type=TipModel))
        assert response.result == TipModel(height=3, hash="0a")

    @pytest.mark.skipif(sys.version_info < (3, 10), reason="PEP 604 unions need Python 3.10")
    def test_hinted_dataclass_with_pep604_optional(self):
        """A ``float | None`` field decodes like ``Optional[float]``"""
        body = b'{"result": {"height": 1, "difficulty": 2.5}}'
        response = decode_response(body, Response(result_type=Tip))
        assert response.result == Tip(height=1, difficulty=2.5)
        assert decode_response(b'{"result": {"height": 2}}', Response(result_type=Tip)).result == Tip(height=2)

    @pytest.mark.parametrize("body, hint", [
        (b'{"result": false}', Int64Value),
        (b'{"result": 0}', Struct),
        (b'{"result": ""}', Struct),
        (b'{"result": []}', Struct),
    ])
    def test_falsy_result_checked_against_protobuf_hint(self, body, hint):
        with pytest.raises(DecodeError):
            decode_response(body, Response(result_type=hint))

    def test_zero_decodes_into_wrapper(self):
        response = decode_response(b'{"result": 0}', Response(result_type=Int64Value))
        assert response.result == Int64Value(value=0)

    def test_hint_structural_mismatch(self):
        with pytest.raises(DecodeError):
            decode_response(b'{"result": [1, 2]}', Response(result_type=BlockInfo))

    def test_bool_is_not_int(self):
        with pytest.raises(DecodeError):
            decode_response(b'{"result": true}', Response(result_type=int))

    def test_bad_wrapper_value(self):
        with pytest.raises(DecodeError):
            decode_response(b'{"result": "forty-two"}', Response(result_type=Int64Value))

    @pytest.mark.parametrize("hint", [None, int, BlockInfo, Int64Value])
    def test_error_response(self, hint):
        """An error envelope fills error and leaves result unset, whatever the hint"""
        body = b'{"error": {"code": 7, "message": "boom"}}'
        response = decode_response(body, Response(result_type=hint))
        assert response.error == RpcError(7, "boom")
        assert response.error.code == 7
        assert response.error.message == "boom"
        assert response.result is None
        assert not response.ok

    @pytest.mark.parametrize("body", [b'{}', b'{"result": null}', b'{"result": null, "error": null}'])
    def test_absent_result_with_hint(self, body):
        response = decode_response(body, Response(result_type=BlockInfo))
        assert response.result is None
        assert response.error is None

    def test_error_defaults(self):
        response = decode_response(b'{"error": {}}', Response())
        assert response.error == RpcError(0, "")

    def test_malformed_error_member(self):
        with pytest.raises(DecodeError):
            decode_response(b'{"error": "boom"}', Response())
        with pytest.raises(DecodeError):
            decode_response(b'{"error": {"code": "7", "message": "boom"}}', Response())

    @pytest.mark.parametrize("body", [b"", b"not json", b'{"result": ', b"\xff\xfe"])
    def test_malformed_body(self, body):
        with pytest.raises(DecodeError):
            decode_response(body, Response())

    def test_non_object_body(self):
        with pytest.raises(DecodeError, match="JSON object"):
            decode_response(b"[1, 2]", Response())

    def test_decode_mutates_in_place(self):
        response = Response()
        assert response.decode(b'{"result": "ok"}') is response
        assert response.result == "ok"

    def test_raise_for_error(self):
        response = decode_response(b'{"error": {"code": -32601, "message": "Method not found"}}', Response())
        with pytest.raises(RpcError) as exc_info:
            response.raise_for_error()
        assert exc_info.value.code == -32601
        assert str(exc_info.value) == "error -32601: Method not found"

    def test_raise_for_error_passes_success(self):
        response = decode_response(b'{"result": 1}', Response())
        assert response.raise_for_error() is response

    def test_reused_destination_drops_previous_result(self):
        """A payload-less reply clears the result left by an earlier decode"""
        response = Response(result_type=int)
        decode_response(b'{"result": 5}', response)
        decode_response(b'{"error": {"code": 1, "message": "busy"}}', response)
        assert response.result is None
        assert response.error == RpcError(1, "busy")

        decode_response(b'{"result": 6}', response)
        assert response.result == 6
        assert response.error is None

    def test_failed_decode_leaves_destination_unchanged(self):
        response = Response(result_type=int)
        decode_response(b'{"result": 5}', response)
        with pytest.raises(DecodeError):
            decode_response(b'{"result": "five", "error": {"code": 2, "message": "x"}}', response)
        assert response.result == 5
        assert response.error is None
