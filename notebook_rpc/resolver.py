"""
Response resolution: turn transport responses into values or errors.

The server does not say up front whether a name is a variable or a
function. Evaluating a function name fails, and the failure message
mentions "function"; ``is_function_error`` is the only place that relies on
that message.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Union

from notebook_rpc.codec import Codec
from notebook_rpc.errors import DecodeError, MissingOutput, RemoteError
from notebook_rpc.transport import TransportResponse

if TYPE_CHECKING:
    from notebook_rpc.notebook import CallableReference, NotebookReference

logger = logging.getLogger(__name__)

FUNCTION_MARKER = "function"


def check_status(response: TransportResponse) -> TransportResponse:
    """Raise RemoteError for any status of 300 or above."""
    if response.status_code >= 300:
        raise RemoteError(response.text, status_code=response.status_code)
    return response


def resolve_eval(response: TransportResponse, output: str, codec: Codec) -> Any:
    """
    Extract the value of ``output`` from an /eval response.

    Args:
        response: Raw transport response
        output: The output name that was requested
        codec: Codec the request was made with

    Returns:
        The decoded value of the output
    """
    check_status(response)
    decoded = codec.decode(response.content)
    if not isinstance(decoded, Mapping):
        raise DecodeError(f"Expected a mapping of outputs, got {type(decoded).__name__}")
    if output not in decoded:
        raise MissingOutput(output, list(decoded.keys()))
    return decoded[output]


def resolve_call(response: TransportResponse, codec: Codec) -> Any:
    """Decode a /call response; the payload is the function's return value."""
    check_status(response)
    return codec.decode(response.content)


def is_function_error(error: BaseException) -> bool:
    """True when the server rejected a variable read because the name is a function."""
    return isinstance(error, RemoteError) and FUNCTION_MARKER in error.detail


@dataclass(frozen=True)
class ResolvedValue:
    """A name that resolved to a plain value."""
    value: Any

    def unwrap(self) -> Any:
        return self.value


@dataclass(frozen=True)
class ResolvedCallable:
    """A name that resolved to a function living in the notebook."""
    callable: "CallableReference"

    def unwrap(self) -> "CallableReference":
        return self.callable


Resolved = Union[ResolvedValue, ResolvedCallable]


def resolve_property(notebook: "NotebookReference", name: str, evaluate: Callable[[str], Any]) -> Resolved:
    """
    Evaluate ``name`` and classify the result as a value or a callable.

    Args:
        notebook: Notebook the name belongs to
        name: Variable or function name
        evaluate: Performs the evaluate round trip for a single output

    Returns:
        ResolvedValue on success, ResolvedCallable when the server reports
        that ``name`` is a function. Every other error propagates.
    """
    from notebook_rpc.notebook import CallableReference

    try:
        return ResolvedValue(evaluate(name))
    except RemoteError as e:
        if is_function_error(e):
            logger.debug("%s is a function in %s", name, notebook.identifier)
            return ResolvedCallable(CallableReference(notebook, name))
        raise
