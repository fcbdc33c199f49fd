"""Pytest fixtures shared across all test modules."""

import math

import httpx
import pytest

from notebook_rpc import ClientSettings, DillCodec, NotebookClient, NotebookReference
from notebook_rpc.transport import HTTPTransport


class StubServer:
    """
    In-process stand-in for a notebook server, plugged into httpx.MockTransport.

    Handlers are keyed by the last path segment (eval, call, static) and
    receive the request and its decoded payload.
    """

    def __init__(self, codec):
        self.codec = codec
        self.requests: list[httpx.Request] = []
        self.handlers = {}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        action = request.url.path.rsplit("/", 1)[-1]
        handler = self.handlers.get(action)
        if handler is None:
            return httpx.Response(404, text=f"No route for {request.url.path}")
        payload = self.codec.decode(request.content) if request.content else None
        return handler(request, payload)

    def reply(self, value, status_code: int = 200) -> httpx.Response:
        return httpx.Response(status_code, content=self.codec.encode(value))

    def payloads(self) -> list:
        return [self.codec.decode(r.content) for r in self.requests if r.content]


def euclidean_server(server: StubServer) -> StubServer:
    """Serve a notebook with inputs a, b, outputs c (hypotenuse), m (mean) and a distance function."""

    def handle_eval(request, payload):
        inputs = {"a": 3.0, "b": 4.0, **payload["inputs"]}
        (output,) = payload["outputs"]
        if output == "distance":
            return httpx.Response(400, text="distance is a function, use the /call endpoint")
        values = {
            "a": inputs["a"],
            "b": inputs["b"],
            "c": math.sqrt(inputs["a"] ** 2 + inputs["b"] ** 2),
            "m": (inputs["a"] + inputs["b"]) / 2,
        }
        if output not in values:
            return httpx.Response(400, text=f"UndefVarError: {output} not defined")
        return server.reply({output: values[output]})

    def handle_call(request, payload):
        if payload["function"] != "distance":
            return httpx.Response(404, text=f"{payload['function']} not found")
        return server.reply(math.sqrt(sum(x ** 2 for x in payload["args"])))

    def handle_static(request, payload):
        return httpx.Response(200, text="lambda a, b: (a ** 2 + b ** 2) ** 0.5")

    server.handlers.update({"eval": handle_eval, "call": handle_call, "static": handle_static})
    return server


@pytest.fixture
def codec():
    return DillCodec()


@pytest.fixture
def server(codec):
    return StubServer(codec)


@pytest.fixture
def client(server, codec):
    http = httpx.Client(transport=httpx.MockTransport(server))
    nb_client = NotebookClient(
        settings=ClientSettings(),
        transport=HTTPTransport(client=http),
        codec=codec,
    )
    yield nb_client
    http.close()


@pytest.fixture
def notebook(client, server):
    """NotebookReference to EuclideanDistance.jl served by the stub server."""
    euclidean_server(server)
    return NotebookReference("EuclideanDistance.jl", client=client)
