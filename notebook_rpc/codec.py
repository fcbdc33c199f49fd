"""
Wire codecs: turn request payloads into bytes and response bytes back into values.

A codec is anything with a ``media_type`` attribute and ``encode`` / ``decode``
methods. The server and the client must agree on it; the media type is sent
in both the ``Accept`` and ``Content-Type`` headers.
"""

import json
from typing import Any, Protocol

import dill

from notebook_rpc.errors import DecodeError, EncodeError


class Codec(Protocol):
    """Encode/decode boundary between Python values and the wire."""

    media_type: str

    def encode(self, payload: Any) -> bytes:
        ...

    def decode(self, data: bytes) -> Any:
        ...


class DillCodec:
    """
    Serializes payloads with dill.

    dill handles functions, lambdas and class instances on top of everything
    pickle supports, which lets notebook values cross the wire unchanged.
    Only use it against servers you trust: decoding runs arbitrary code.
    """

    media_type = "application/x-python-dill"

    def encode(self, payload: Any) -> bytes:
        try:
            return dill.dumps(payload)
        except Exception as e:
            raise EncodeError(f"Cannot serialize payload: {e}") from e

    def decode(self, data: bytes) -> Any:
        try:
            return dill.loads(data)
        except Exception as e:
            raise DecodeError(f"Malformed dill payload: {e}") from e


class JSONCodec:
    """Serializes payloads as UTF-8 JSON."""

    media_type = "application/json"

    def encode(self, payload: Any) -> bytes:
        try:
            return json.dumps(payload).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise EncodeError(f"Cannot serialize payload: {e}") from e

    def decode(self, data: bytes) -> Any:
        try:
            return json.loads(data)
        except ValueError as e:
            raise DecodeError(f"Malformed JSON payload: {e}") from e


CODECS = {
    "dill": DillCodec,
    "json": JSONCodec,
}


def get_codec(name: str) -> Codec:
    """Look up a codec by its configuration name."""
    try:
        return CODECS[name]()
    except KeyError:
        raise ValueError(f"Unknown codec: {name}. Must be one of: {', '.join(CODECS)}.") from None
