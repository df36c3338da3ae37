"""
JSON-RPC over HTTP client

Serializes a ``Request``, POSTs it to the daemon and decodes the reply into a
caller-supplied ``Response``. Transport, HTTP status and decode failures are
raised; an error object returned by the daemon is left in ``Response.error``.
"""

import base64
import itertools
import logging
import threading
import time
from contextlib import nullcontext
from typing import Any, Dict, Optional

from daemon_rpc.adapters.adapter_interface import TransportInterface
from daemon_rpc.adapters.http.transport import HttpTransport, is_connection_refused
from daemon_rpc.config import DEFAULT_HOST, ClientConfig
from daemon_rpc.errors import (
    DaemonConnectionError,
    DecodeError,
    HTTPError,
    SerializeError,
    TransportError,
)
from daemon_rpc.rpc.envelope import Request, Response, ResultType, decode_response
from daemon_rpc.telemetry.metrics import get_client_metrics
from daemon_rpc.telemetry.tracer import create_span, inject_trace_context

logger = logging.getLogger(__name__)


def basic_auth_header(user: str, password: str) -> str:
    """``Authorization`` header value for HTTP Basic authentication."""
    token = base64.b64encode(f"{user}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


class Client:
    """
    JSON-RPC client for one daemon endpoint.

    Holds only its configuration, so a single instance can serve concurrent
    calls from several threads.
    """

    def __init__(self,
                 host: str = DEFAULT_HOST,
                 user: str = "",
                 password: str = "",
                 transport: Optional[TransportInterface] = None,
                 enable_tracing: bool = True):
        """Initialize RPC client

        Args:
            host: Endpoint URL the requests are POSTed to
            user: Basic auth user name, auth is disabled when empty
            password: Basic auth password
            transport: Transport adapter, an ``HttpTransport`` by default
            enable_tracing: Wrap calls in spans and propagate trace headers
        """
        self._host = host
        self._user = user
        self._password = password
        self._transport = transport if transport is not None else HttpTransport()
        self._enable_tracing = enable_tracing
        self._ids = itertools.count(1)
        self._ids_lock = threading.Lock()
        logger.info(f"RPC client created for {host}, auth: {'on' if user else 'off'}")

    @classmethod
    def from_config(cls, config: ClientConfig, transport: Optional[TransportInterface] = None) -> "Client":
        """Create a client (and its HTTP transport) from a ``ClientConfig``"""
        if transport is None:
            transport = HttpTransport(timeout=config.timeout_seconds)
        return cls(
            host=config.host,
            user=config.user,
            password=config.password,
            transport=transport,
            enable_tracing=config.enable_tracing,
        )

    @property
    def host(self) -> str:
        return self._host

    @property
    def user(self) -> str:
        return self._user

    @property
    def password(self) -> str:
        return self._password

    @property
    def transport(self) -> TransportInterface:
        return self._transport

    def close(self) -> None:
        self._transport.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._user:
            headers["Authorization"] = basic_auth_header(self._user, self._password)
        return headers

    def do(self, request: Request, out: Response) -> Response:
        """Execute one RPC call and decode the reply into ``out``

        Args:
            request: Call to send
            out: Destination envelope; set ``out.result_type`` beforehand to get a typed result

        Returns:
            Response: ``out``, with ``result`` and/or ``error`` filled in

        Raises:
            SerializeError: The request parameters cannot be encoded
            DaemonConnectionError: The daemon refused the connection
            TransportError: Any other delivery failure, unchanged
            HTTPError: The daemon answered with a status other than 200
            DecodeError: The body is malformed or does not match ``out.result_type``
            TypeError: ``out.result_type`` is not a supported shape, raised before sending
        """
        method = request.method
        span = (
            create_span("rpc.client.call", {"rpc.system": "jsonrpc", "rpc.method": method, "rpc.jsonrpc.request_id": request.id})
            if self._enable_tracing else nullcontext()
        )
        with span:
            return self._do(request, out)

    def _do(self, request: Request, out: Response) -> Response:
        method = request.method
        stats = get_client_metrics()
        try:
            result_type = ResultType.of(out.result_type)
        except TypeError as e:
            logger.error(f"Unsupported result type for {method}: {e}")
            stats.record_failure(method, "result_type")
            raise

        try:
            body = request.to_json()
        except SerializeError as e:
            logger.error(f"Failed to serialize request for {method}: {e}")
            stats.record_failure(method, "serialize")
            raise

        headers = self._headers()
        if self._enable_tracing:
            inject_trace_context(headers)

        logger.debug(f"Sending request to {self._host}: {body[:200]!r}")
        stats.record_request(method)
        start_time = time.time()

        try:
            resp = self._transport.send("POST", self._host, headers, body)
        except TransportError as e:
            if is_connection_refused(e):
                logger.error(f"Connection to {self._host} refused")
                stats.record_failure(method, "connection_refused")
                raise DaemonConnectionError() from e
            logger.error(f"Transport error calling {method}: {e}")
            stats.record_failure(method, "transport")
            raise

        latency_ms = (time.time() - start_time) * 1000
        stats.record_latency(method, latency_ms)
        logger.debug(f"Received {resp.status_line} for {method}, latency: {latency_ms:.2f}ms")

        if resp.status_code != 200:
            logger.error(f"HTTP error calling {method}: {resp.status_line}")
            stats.record_failure(method, "http", status=str(resp.status_code))
            raise HTTPError(resp.status_code, resp.status_line, resp.text)

        try:
            decode_response(resp.body, out, result_type)
        except DecodeError as e:
            logger.error(f"Invalid response for {method}: {e}")
            stats.record_failure(method, "decode")
            raise

        if out.error is not None:
            logger.warning(f"RPC call {method} returned error {out.error.code}: {out.error.message}")
            stats.record_rpc_error(method, out.error.code)
        else:
            stats.record_success(method)
        return out

    def next_id(self) -> int:
        with self._ids_lock:
            return next(self._ids)

    def call(self,
             method: str,
             params: Any = None,
             result_type: Any = None,
             request_id: Optional[int] = None,
             jsonrpc: str = "") -> Response:
        """Build a request and destination, then ``do`` the call

        Args:
            method: Remote method name
            params: Method parameters (object, array, scalar or None)
            result_type: Shape the result is decoded into
            request_id: Request id, taken from a per-client counter when omitted
            jsonrpc: Protocol version tag, omitted from the wire when empty

        Returns:
            Response: Decoded response
        """
        if request_id is None:
            request_id = self.next_id()
        request = Request(method=method, params=params, id=request_id, jsonrpc=jsonrpc)
        return self.do(request, Response(result_type=result_type))


_default_client: Optional[Client] = None
_default_client_lock = threading.Lock()


def get_default_client() -> Client:
    """Process-wide client for ``DEFAULT_HOST`` without credentials, created on first use"""
    global _default_client
    if _default_client is None:
        with _default_client_lock:
            if _default_client is None:
                _default_client = Client.from_config(ClientConfig.default())
    return _default_client


def do(request: Request, out: Response) -> Response:
    """``Client.do`` on the process-wide default client"""
    return get_default_client().do(request, out)
