"""
Unit tests for HTTPRequest.
"""

import io

import pytest

from chainrouter.http import HTTPRequest


def environ(**overrides) -> dict:
    base = {
        "REQUEST_METHOD": "GET",
        "PATH_INFO": "/",
        "QUERY_STRING": "",
        "SERVER_PROTOCOL": "HTTP/1.1",
        "wsgi.input": io.BytesIO(b""),
    }
    base.update(overrides)
    return base


class TestFromEnviron:
    """Tests for building requests from a WSGI environ."""

    def test_method_and_path(self):
        req = HTTPRequest.from_environ(environ(REQUEST_METHOD="post", PATH_INFO="/api/users"))

        assert req.method == "POST"
        assert req.path == "/api/users"
        assert req.version == "HTTP/1.1"

    def test_empty_path_defaults_to_root(self):
        req = HTTPRequest.from_environ(environ(PATH_INFO=""))

        assert req.path == "/"

    def test_utf8_path(self):
        raw = "/user/zoë".encode("utf-8").decode("latin-1")

        req = HTTPRequest.from_environ(environ(PATH_INFO=raw))

        assert req.path == "/user/zoë"

    def test_headers(self):
        req = HTTPRequest.from_environ(environ(
            HTTP_USER_AGENT="pytest",
            HTTP_X_REQUEST_ID="abc",
            CONTENT_TYPE="application/json; charset=utf-8",
        ))

        assert req.get_header("User-Agent") == "pytest"
        assert req.headers["x-request-id"] == "abc"
        assert req.content_type == "application/json"
        assert req.user_agent == "pytest"

    def test_query_params(self):
        req = HTTPRequest.from_environ(environ(QUERY_STRING="page=1&tag=a&tag=b&empty="))

        assert req.query_params == {"page": ["1"], "tag": ["a", "b"], "empty": [""]}
        assert req.get_query("tag") == "a"
        assert req.get_query("missing", "x") == "x"

    def test_body(self):
        body = b'{"name": "John"}'
        req = HTTPRequest.from_environ(environ(
            REQUEST_METHOD="POST",
            CONTENT_LENGTH=str(len(body)),
            CONTENT_TYPE="application/json",
            **{"wsgi.input": io.BytesIO(body)},
        ))

        assert req.body == body
        assert req.json == {"name": "John"}

    def test_invalid_content_length(self):
        req = HTTPRequest.from_environ(environ(CONTENT_LENGTH="abc"))

        assert req.body == b""

    def test_client_address(self):
        req = HTTPRequest.from_environ(environ(REMOTE_ADDR="10.0.0.1", REMOTE_PORT="5555"))

        assert req.client_address == ("10.0.0.1", 5555)

    def test_path_params_start_empty(self):
        req = HTTPRequest.from_environ(environ())

        assert req.path_params == {}


class TestHTTPRequest:
    """Tests for request accessors."""

    def test_json_empty_body(self):
        assert HTTPRequest(method="POST", path="/").json is None

    def test_json_invalid(self):
        req = HTTPRequest(method="POST", path="/", body=b"{not json")

        with pytest.raises(ValueError):
            req.json

    def test_content_type_missing(self):
        assert HTTPRequest(method="GET", path="/").content_type is None

    def test_get_header_default(self):
        req = HTTPRequest(method="GET", path="/")

        assert req.get_header("X-Missing") == ""
        assert req.get_header("X-Missing", "none") == "none"
