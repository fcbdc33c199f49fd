"""
notebook-rpc: Read variables and call functions of notebooks running on a remote server.

This package provides a small client where:
- Reading an attribute of a notebook reference evaluates that variable on the server
- Calling the reference binds input variables for the next read
- Names that are functions in the notebook come back as callable references
"""

from notebook_rpc.client import NotebookClient
from notebook_rpc.codec import Codec, DillCodec, JSONCodec
from notebook_rpc.config import ClientSettings, DEFAULT_HOST
from notebook_rpc.errors import (
    NotebookRPCError,
    TransportError,
    RemoteError,
    MissingOutput,
    CodecError,
    EncodeError,
    DecodeError,
)
from notebook_rpc.notebook import NotebookReference, BoundParameters, CallableReference
from notebook_rpc.resolver import Resolved, ResolvedValue, ResolvedCallable
from notebook_rpc.static import compile_snippet, resolve_static

__version__ = "0.1.0"
__all__ = [
    "NotebookClient",
    "Codec",
    "DillCodec",
    "JSONCodec",
    "ClientSettings",
    "DEFAULT_HOST",
    "NotebookRPCError",
    "TransportError",
    "RemoteError",
    "MissingOutput",
    "CodecError",
    "EncodeError",
    "DecodeError",
    "NotebookReference",
    "BoundParameters",
    "CallableReference",
    "Resolved",
    "ResolvedValue",
    "ResolvedCallable",
    "compile_snippet",
    "resolve_static",
]
