"""
Request construction for the notebook server's REST API.

Endpoints:
- POST /v1/notebook/{escaped-id}/eval    evaluate outputs for a set of inputs
- POST /v1/notebook/{escaped-id}/call    call a function defined in the notebook
- GET  /v1/notebook/{id}/static          fetch code computing an output from inputs
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional
from urllib.parse import quote

from pydantic import BaseModel, Field

from notebook_rpc.codec import Codec


class EvalRequest(BaseModel):
    """Body of an /eval request."""
    outputs: list[str]
    inputs: dict[str, Any] = Field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to the dictionary that goes over the wire."""
        return {
            "outputs": list(self.outputs),
            "inputs": dict(self.inputs),
        }


class CallRequest(BaseModel):
    """Body of a /call request."""
    function: str
    args: list[Any] = Field(default_factory=list)
    kwargs: dict[str, Any] = Field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to the dictionary that goes over the wire."""
        return {
            "function": self.function,
            "args": list(self.args),
            "kwargs": dict(self.kwargs),
        }


@dataclass(frozen=True)
class PreparedRequest:
    """A fully built HTTP request, ready to hand to a transport."""
    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    content: Optional[bytes] = None
    params: Optional[dict[str, str]] = None


def escape_identifier(identifier: str) -> str:
    """Percent-encode a notebook identifier so it fits in one path segment."""
    return quote(identifier, safe="")


def notebook_url(host: str, identifier: str, action: str, escape: bool = True) -> str:
    """Build ``<host>/v1/notebook/<identifier>/<action>``."""
    segment = escape_identifier(identifier) if escape else identifier
    return f"{host.removesuffix('/')}/v1/notebook/{segment}/{action}"


def _codec_headers(codec: Codec) -> dict[str, str]:
    return {
        "Accept": codec.media_type,
        "Content-Type": codec.media_type,
    }


def build_eval(
    output: str,
    identifier: str,
    host: str,
    inputs: Mapping[str, Any],
    codec: Codec,
) -> PreparedRequest:
    """
    Build the request evaluating a single output.

    Args:
        output: Name of the variable to read
        identifier: Notebook filename/path on the server
        host: Base URL of the server
        inputs: Values to bind to input variables before evaluating
        codec: Wire codec for the body

    Returns:
        POST request for the /eval endpoint
    """
    if not output:
        raise ValueError("An output name is required")

    payload = EvalRequest(outputs=[output], inputs=dict(inputs))
    return PreparedRequest(
        method="POST",
        url=notebook_url(host, identifier, "eval"),
        headers=_codec_headers(codec),
        content=codec.encode(payload.to_dict()),
    )


def build_call(
    function: str,
    args: Iterable[Any],
    kwargs: Mapping[str, Any],
    identifier: str,
    host: str,
    codec: Codec,
) -> PreparedRequest:
    """
    Build the request calling a notebook function.

    Args:
        function: Name of the function in the notebook
        args: Positional arguments, order preserved
        kwargs: Keyword arguments
        identifier: Notebook filename/path on the server
        host: Base URL of the server
        codec: Wire codec for the body

    Returns:
        POST request for the /call endpoint
    """
    payload = CallRequest(function=function, args=list(args), kwargs=dict(kwargs))
    return PreparedRequest(
        method="POST",
        url=notebook_url(host, identifier, "call"),
        headers=_codec_headers(codec),
        content=codec.encode(payload.to_dict()),
    )


def build_static(output: str, inputs: Iterable[str], identifier: str, host: str) -> PreparedRequest:
    """
    Build the request fetching the static code for ``output``.

    The identifier is inserted into the path as-is, unlike /eval and /call;
    servers in the wild expect it that way.
    """
    return PreparedRequest(
        method="GET",
        url=notebook_url(host, identifier, "static", escape=False),
        params={
            "outputs": output,
            "inputs": ",".join(inputs),
        },
    )
