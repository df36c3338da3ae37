"""
HTTP transport adapter

Sends RPC requests over HTTP using a shared ``httpx.Client``. Responses are
streamed inside a ``with`` block and read completely, so the connection is
returned to the pool on every exit path.
"""

import errno
import logging
from typing import Dict, Optional

import httpx

from daemon_rpc.adapters.adapter_interface import TransportInterface, TransportResponse
from daemon_rpc.errors import TransportError

logger = logging.getLogger(__name__)

_REFUSED_MARKERS = ("connection refused", "actively refused")


def is_connection_refused(exc: BaseException) -> bool:
    """Best-effort check whether an error chain was caused by a refused connection

    Matches ``ConnectionRefusedError``, any ``OSError`` carrying
    ``ECONNREFUSED``, or a message mentioning a refused connection.
    """
    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, ConnectionRefusedError):
            return True
        if isinstance(current, OSError) and current.errno == errno.ECONNREFUSED:
            return True
        text = str(current).lower()
        if any(marker in text for marker in _REFUSED_MARKERS):
            return True
        current = current.__cause__ or current.__context__
    return False


class HttpTransport(TransportInterface):
    """HTTP transport backed by httpx, safe to share between threads"""

    def __init__(self, timeout: float = 30.0, client: Optional[httpx.Client] = None):
        """Initialize HTTP transport

        Args:
            timeout: Request timeout in seconds, ignored when ``client`` is given
            client: Preconfigured httpx client (e.g. one using ``httpx.MockTransport``)
        """
        self.timeout = timeout
        self._owns_client = client is None
        self.client = client if client is not None else httpx.Client(timeout=timeout)
        logger.info(f"HTTP transport created, timeout: {timeout}s")

    def send(self, method: str, url: str, headers: Dict[str, str], body: bytes) -> TransportResponse:
        try:
            with self.client.stream(method, url, headers=headers, content=body) as resp:
                data = resp.read()
                return TransportResponse(
                    status_code=resp.status_code,
                    reason=resp.reason_phrase,
                    headers=dict(resp.headers),
                    body=data,
                )
        except (httpx.RequestError, httpx.InvalidURL) as e:
            logger.debug(f"HTTP {method} {url} failed: {e!r}")
            raise TransportError(f"{method} {url}: {e}") from e

    def close(self) -> None:
        if self._owns_client:
            self.client.close()
