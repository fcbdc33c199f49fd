"""
NotebookClient: performs evaluate, call and static requests against a server.
"""

import atexit
import logging
import threading
from typing import Any, Iterable, Mapping, Optional

from notebook_rpc.codec import Codec, get_codec
from notebook_rpc.config import ClientSettings
from notebook_rpc.protocol import build_call, build_eval, build_static
from notebook_rpc.resolver import check_status, resolve_call, resolve_eval
from notebook_rpc.transport import HTTPTransport, Transport

logger = logging.getLogger(__name__)


class NotebookClient:
    """
    Connection to a notebook server.

    Holds the settings, the transport and the codec shared by every
    NotebookReference created from it. All operations block until the
    server answers; nothing is retried.
    """

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        transport: Optional[Transport] = None,
        codec: Optional[Codec] = None,
    ):
        """
        Initialize the client.

        Args:
            settings: Connection settings, read from the environment when omitted
            transport: Transport to send requests with, an HTTPTransport by default
            codec: Wire codec, chosen from settings.codec by default
        """
        self.settings = settings or ClientSettings.from_env()
        self._owns_transport = transport is None
        self.transport = transport or HTTPTransport(timeout=self.settings.timeout)
        self.codec = codec or get_codec(self.settings.codec)

    def _host(self, host: Optional[str]) -> str:
        return host if host is not None else self.settings.host

    def evaluate(
        self,
        output: str,
        identifier: str,
        inputs: Optional[Mapping[str, Any]] = None,
        host: Optional[str] = None,
    ) -> Any:
        """
        Evaluate one output of a notebook for the given inputs.

        Args:
            output: Variable to read
            identifier: Notebook filename/path on the server
            inputs: Values bound to input variables for this evaluation
            host: Server base URL, the configured host when omitted

        Returns:
            The output's value

        Example:
            >>> client.evaluate("c", "EuclideanDistance.jl", {"a": 5.0, "b": 12.0})
            13.0
        """
        request = build_eval(output, identifier, self._host(host), inputs or {}, self.codec)
        return resolve_eval(self.transport.send(request), output, self.codec)

    def call(
        self,
        function: str,
        args: Iterable[Any],
        kwargs: Optional[Mapping[str, Any]],
        identifier: str,
        host: Optional[str] = None,
    ) -> Any:
        """Call a function defined in a notebook and return its result."""
        request = build_call(function, args, kwargs or {}, identifier, self._host(host), self.codec)
        return resolve_call(self.transport.send(request), self.codec)

    def static_function(
        self,
        output: str,
        inputs: Iterable[str],
        identifier: str,
        host: Optional[str] = None,
    ) -> str:
        """
        Fetch the code computing ``output`` from ``inputs``.

        The returned source comes straight from the server. Running it
        executes whatever the host sent.
        """
        host = self._host(host)
        logger.warning("Ensure you trust %s, as the function returned could be malicious", host)
        request = build_static(output, list(inputs), identifier, host)
        return check_status(self.transport.send(request)).text

    def notebook(self, identifier: str, host: Optional[str] = None):
        """Reference a notebook on this client's server."""
        from notebook_rpc.notebook import NotebookReference
        return NotebookReference(identifier, host=self._host(host), client=self)

    def close(self):
        """Close the transport if this client created it."""
        if self._owns_transport:
            self.transport.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


_default_client: Optional[NotebookClient] = None
_default_lock = threading.Lock()


def default_client() -> NotebookClient:
    """
    Client shared by every NotebookReference created without one.

    Built on first use from ClientSettings.from_env() and closed when the
    interpreter exits.
    """
    global _default_client
    with _default_lock:
        if _default_client is None:
            _default_client = NotebookClient(settings=ClientSettings.from_env())
            atexit.register(_default_client.close)
        return _default_client
