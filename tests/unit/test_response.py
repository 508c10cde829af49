"""
Unit tests for the response sink and finished responses.
"""

import pytest

from chainrouter.handlers import NOT_FOUND_MESSAGE, default_not_found_handler, http_error
from chainrouter.http import HTTPRequest, HTTPResponse, HTTPStatus, ResponseWriter, reason_phrase


class TestHTTPResponse:
    """Tests for HTTPResponse class."""

    def test_status_line(self):
        response = HTTPResponse(status=HTTPStatus.OK)
        assert response.status_line == "HTTP/1.1 200 OK"

        response = HTTPResponse(status=HTTPStatus.NOT_FOUND)
        assert response.status_line == "HTTP/1.1 404 Not Found"

    def test_wsgi_status(self):
        assert HTTPResponse(status=500).wsgi_status == "500 Internal Server Error"
        assert HTTPResponse(status=299).wsgi_status == "299 Unknown"

    def test_wsgi_headers_sets_content_length(self):
        response = HTTPResponse(body=b"hello world", headers={"X-Custom": "value"})

        headers = dict(response.wsgi_headers())

        assert headers["Content-Length"] == "11"
        assert headers["X-Custom"] == "value"

    def test_wsgi_headers_keeps_explicit_content_length(self):
        response = HTTPResponse(body=b"abc", headers={"Content-Length": "3"})

        assert response.wsgi_headers().count(("Content-Length", "3")) == 1

    def test_set_header_chains(self):
        response = HTTPResponse().set_header("A", "1").set_header("B", "2")

        assert response.headers == {"A": "1", "B": "2"}


class TestResponseWriter:
    """Tests for ResponseWriter."""

    def test_defaults(self):
        res = ResponseWriter()

        assert res.status == 200
        assert not res.written
        assert res.body == b""

    def test_write_commits_200(self):
        res = ResponseWriter()

        assert res.write("hello") == 5

        assert res.written
        assert res.status == HTTPStatus.OK

    def test_write_appends(self):
        res = ResponseWriter()

        res.write("first")
        res.write(b"second")

        assert res.body == b"firstsecond"

    def test_write_encodes_utf8(self):
        res = ResponseWriter()

        assert res.write("héllo") == 6

        assert res.body == "héllo".encode("utf-8")

    def test_first_write_header_wins(self, caplog):
        res = ResponseWriter()

        res.write_header(404)
        with caplog.at_level("WARNING", logger="chainrouter"):
            res.write_header(500)

        assert res.status == 404
        assert "Superfluous" in caplog.text

    def test_write_header_after_write_is_ignored(self):
        res = ResponseWriter()

        res.write("x")
        res.write_header(500)

        assert res.status == 200

    @pytest.mark.parametrize("code", [0, 99, 600, 1000])
    def test_invalid_status(self, code):
        with pytest.raises(ValueError):
            ResponseWriter().write_header(code)

    def test_unnamed_status_code(self):
        res = ResponseWriter()

        res.write_header(299)

        assert res.status == 299

    def test_to_response(self):
        res = ResponseWriter()
        res.set_header("Content-Type", "text/plain")
        res.write_header(201)
        res.write("made")

        response = res.to_response()

        assert response.status == HTTPStatus.CREATED
        assert response.headers == {"Content-Type": "text/plain"}
        assert response.body == b"made"


class TestResponders:
    """Tests for the default responders."""

    def test_http_error(self):
        res = ResponseWriter()

        http_error(res, "nope", 403)

        assert res.status == 403
        assert res.body == b"nope"
        assert res.headers["Content-Type"] == "text/plain; charset=utf-8"
        assert res.headers["X-Content-Type-Options"] == "nosniff"

    def test_default_not_found(self):
        res = ResponseWriter()

        default_not_found_handler(res, HTTPRequest(method="GET", path="/x"))

        assert res.status == 404
        assert res.body == NOT_FOUND_MESSAGE.encode()


class TestStatusCodes:
    """Tests for HTTPStatus helpers."""

    def test_phrase(self):
        assert HTTPStatus.NOT_FOUND.phrase == "Not Found"
        assert reason_phrase(418) == "I'm a teapot"
        assert reason_phrase(799) == "Unknown"

    def test_classes(self):
        assert HTTPStatus.OK.is_success
        assert HTTPStatus.FOUND.is_redirect
        assert HTTPStatus.NOT_FOUND.is_client_error
        assert HTTPStatus.BAD_GATEWAY.is_server_error
        assert HTTPStatus.BAD_REQUEST.is_error
        assert not HTTPStatus.OK.is_error
