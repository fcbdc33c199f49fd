"""
Tests for request construction.
"""

from urllib.parse import unquote

import pytest

from notebook_rpc.codec import DillCodec, JSONCodec
from notebook_rpc.protocol import (
    CallRequest,
    EvalRequest,
    build_call,
    build_eval,
    build_static,
    escape_identifier,
    notebook_url,
)

HOST = "http://localhost:1234"


class TestEscapeIdentifier:
    """Notebook identifiers in /eval and /call paths."""

    @pytest.mark.parametrize("identifier", [
        "EuclideanDistance.jl",
        "my notebook.jl",
        "dir/sub dir/notebook.jl",
        "weird?name#with&reserved=chars%.jl",
        "ünïcödé.jl",
        "a+b;c,d@e.jl",
    ])
    def test_escaped_segment_decodes_to_identifier(self, identifier):
        segment = escape_identifier(identifier)
        assert "/" not in segment
        assert "?" not in segment
        assert "#" not in segment
        assert unquote(segment) == identifier

    def test_unreserved_characters_untouched(self):
        assert escape_identifier("Abc-123_x.y~z") == "Abc-123_x.y~z"

    def test_space_and_slash_encoded(self):
        assert escape_identifier("a b/c") == "a%20b%2Fc"


class TestNotebookUrl:
    """URL assembly."""

    def test_escaped(self):
        assert notebook_url(HOST, "a b.jl", "eval") == f"{HOST}/v1/notebook/a%20b.jl/eval"

    def test_unescaped(self):
        assert notebook_url(HOST, "a b.jl", "static", escape=False) == f"{HOST}/v1/notebook/a b.jl/static"

    def test_trailing_slash_on_host(self):
        assert notebook_url(HOST + "/", "nb.jl", "call") == f"{HOST}/v1/notebook/nb.jl/call"

    def test_only_one_trailing_slash_stripped(self):
        assert notebook_url(HOST + "//", "nb.jl", "call") == f"{HOST}//v1/notebook/nb.jl/call"


class TestBuildEval:
    """POST /eval requests."""

    def setup_method(self):
        self.codec = DillCodec()

    def test_url_and_method(self):
        request = build_eval("c", "EuclideanDistance.jl", HOST, {"a": 5.0}, self.codec)
        assert request.method == "POST"
        assert request.url == f"{HOST}/v1/notebook/EuclideanDistance.jl/eval"

    def test_headers_use_codec_media_type(self):
        request = build_eval("c", "nb.jl", HOST, {}, self.codec)
        assert request.headers == {
            "Accept": "application/x-python-dill",
            "Content-Type": "application/x-python-dill",
        }

    def test_body(self):
        request = build_eval("c", "nb.jl", HOST, {"a": 5.0, "b": 12.0}, self.codec)
        assert self.codec.decode(request.content) == {
            "outputs": ["c"],
            "inputs": {"a": 5.0, "b": 12.0},
        }

    def test_body_without_inputs(self):
        request = build_eval("c", "nb.jl", HOST, {}, self.codec)
        assert self.codec.decode(request.content) == {"outputs": ["c"], "inputs": {}}

    def test_identifier_escaped(self):
        request = build_eval("c", "my dir/nb.jl", HOST, {}, self.codec)
        assert request.url == f"{HOST}/v1/notebook/my%20dir%2Fnb.jl/eval"

    def test_empty_output_rejected(self):
        with pytest.raises(ValueError):
            build_eval("", "nb.jl", HOST, {}, self.codec)

    def test_json_codec(self):
        codec = JSONCodec()
        request = build_eval("c", "nb.jl", HOST, {"a": 1}, codec)
        assert request.headers["Content-Type"] == "application/json"
        assert request.content == b'{"outputs": ["c"], "inputs": {"a": 1}}'


class TestBuildCall:
    """POST /call requests."""

    def setup_method(self):
        self.codec = DillCodec()

    def test_url(self):
        request = build_call("add", (1, 2), {}, "my nb.jl", HOST, self.codec)
        assert request.method == "POST"
        assert request.url == f"{HOST}/v1/notebook/my%20nb.jl/call"

    def test_body_positional(self):
        request = build_call("add", (1, 2), {}, "nb.jl", HOST, self.codec)
        assert self.codec.decode(request.content) == {"function": "add", "args": [1, 2], "kwargs": {}}

    def test_body_keywords(self):
        request = build_call("scale", [3], {"factor": 2}, "nb.jl", HOST, self.codec)
        assert self.codec.decode(request.content) == {
            "function": "scale",
            "args": [3],
            "kwargs": {"factor": 2},
        }

    def test_headers(self):
        request = build_call("f", (), {}, "nb.jl", HOST, self.codec)
        assert request.headers["Accept"] == self.codec.media_type
        assert request.headers["Content-Type"] == self.codec.media_type


class TestBuildStatic:
    """GET /static requests."""

    def test_identifier_not_escaped(self):
        request = build_static("c", ["a", "b"], "my notebook.jl", HOST)
        assert request.url == f"{HOST}/v1/notebook/my notebook.jl/static"

    def test_query(self):
        request = build_static("c", ["a", "b"], "nb.jl", HOST)
        assert request.method == "GET"
        assert request.params == {"outputs": "c", "inputs": "a,b"}
        assert request.content is None
        assert request.headers == {}

    def test_no_inputs(self):
        request = build_static("c", [], "nb.jl", HOST)
        assert request.params["inputs"] == ""


class TestPayloadModels:
    """Wire payload models."""

    def test_eval_request_to_dict(self):
        assert EvalRequest(outputs=["c"], inputs={"a": 1}).to_dict() == {"outputs": ["c"], "inputs": {"a": 1}}

    def test_eval_request_default_inputs(self):
        assert EvalRequest(outputs=["c"]).inputs == {}

    def test_call_request_to_dict(self):
        request = CallRequest(function="f", args=[1, "x"], kwargs={"k": None})
        assert request.to_dict() == {"function": "f", "args": [1, "x"], "kwargs": {"k": None}}
