"""
Transports: send a PreparedRequest and return the raw status and body.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import httpx

from notebook_rpc.errors import TransportError
from notebook_rpc.protocol import PreparedRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransportResponse:
    """Status code and body of an HTTP response."""
    status_code: int
    content: bytes

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")


class Transport(Protocol):
    """Anything that can perform a PreparedRequest."""

    def send(self, request: PreparedRequest) -> TransportResponse:
        ...

    def close(self) -> None:
        ...


class HTTPTransport:
    """
    Synchronous transport backed by an httpx.Client.

    Connection-level failures (refused connections, timeouts, broken
    pipes) surface as TransportError. Error statuses are returned like any
    other response; interpreting them is the resolver's job.
    """

    def __init__(self, timeout: Optional[float] = None, client: Optional[httpx.Client] = None):
        """
        Initialize the transport.

        Args:
            timeout: Per-request timeout in seconds, None to wait forever
            client: Pre-configured httpx client to use instead of a new one
        """
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)

    def send(self, request: PreparedRequest) -> TransportResponse:
        logger.debug("%s %s", request.method, request.url)
        try:
            response = self._client.request(
                request.method,
                request.url,
                headers=request.headers,
                content=request.content,
                params=request.params,
            )
        except (httpx.TransportError, httpx.InvalidURL) as e:
            raise TransportError(f"{request.method} {request.url} failed: {e}") from e
        logger.debug("%s %s -> %d", request.method, request.url, response.status_code)
        return TransportResponse(status_code=response.status_code, content=response.content)

    def close(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
