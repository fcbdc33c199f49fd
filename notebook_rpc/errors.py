"""
Error types raised by notebook-rpc.
"""

from typing import Any, Optional


class NotebookRPCError(Exception):
    """Base class for every error raised by the client."""


class TransportError(NotebookRPCError):
    """The request never produced an HTTP response (connection refused, timeout, ...)."""


class RemoteError(NotebookRPCError):
    """
    The server answered with a status code of 300 or above.

    Attributes:
        status_code: HTTP status returned by the server
        detail: Response body text, the server's diagnostic message
    """

    def __init__(self, detail: str, status_code: Optional[int] = None):
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code

    def __repr__(self) -> str:
        return f"RemoteError(status_code={self.status_code!r}, detail={self.detail!r})"


class MissingOutput(NotebookRPCError, KeyError):
    """The decoded evaluation response does not contain the requested output."""

    def __init__(self, output: str, available: Optional[list[Any]] = None):
        self.output = output
        self.available = list(available or [])
        super().__init__(output)

    def __str__(self) -> str:
        return f"Output {self.output!r} missing from response (got: {', '.join(map(str, self.available)) or 'nothing'})"


class CodecError(NotebookRPCError):
    """Base class for wire serialization failures."""


class EncodeError(CodecError):
    """A request payload could not be serialized."""


class DecodeError(CodecError):
    """A response payload was malformed or not what the operation expects."""
