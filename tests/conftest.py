"""
pytest configuration and fixtures.
"""

import io
from typing import Callable, Dict, List, Tuple
from wsgiref.util import setup_testing_defaults
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from chainrouter import Router, RouterConfig
from chainrouter.http import HTTPRequest, ResponseWriter


@pytest.fixture
def router() -> Router:
    """Router with default configuration."""
    return Router()


@pytest.fixture
def request_mode_router() -> Router:
    """Router that resolves mounts per request."""
    return Router(RouterConfig(mount_resolution="request"))


@pytest.fixture
def make_request() -> Callable[..., HTTPRequest]:
    """Factory for bare requests."""
    def _make(method: str = "GET", path: str = "/", **kwargs) -> HTTPRequest:
        return HTTPRequest(method=method, path=path, **kwargs)
    return _make


@pytest.fixture
def dispatch() -> Callable[[Router, str, str], ResponseWriter]:
    """Run one request through router.serve() and return the sink."""
    def _dispatch(router: Router, method: str, path: str) -> ResponseWriter:
        res = ResponseWriter()
        router.serve(res, HTTPRequest(method=method, path=path))
        return res
    return _dispatch


class WSGIResult:
    """Captured output of one WSGI call."""

    def __init__(self, status: str, headers: List[Tuple[str, str]], body: bytes):
        self.status = status
        self.headers: Dict[str, str] = dict(headers)
        self.body = body

    @property
    def status_code(self) -> int:
        return int(self.status.split(" ", 1)[0])


@pytest.fixture
def wsgi_call() -> Callable[..., WSGIResult]:
    """Call a WSGI app with a minimal environ."""
    def _call(app, method: str = "GET", path: str = "/", body: bytes = b"",
              query: str = "", headers: Dict[str, str] = None) -> WSGIResult:
        environ = {
            "REQUEST_METHOD": method,
            "PATH_INFO": path,
            "QUERY_STRING": query,
            "CONTENT_LENGTH": str(len(body)) if body else "",
            "wsgi.input": io.BytesIO(body),
        }
        for name, value in (headers or {}).items():
            if name.lower() == "content-type":
                environ["CONTENT_TYPE"] = value
            else:
                environ["HTTP_" + name.upper().replace("-", "_")] = value
        setup_testing_defaults(environ)

        captured = {}

        def start_response(status, response_headers, exc_info=None):
            captured["status"] = status
            captured["headers"] = response_headers

        chunks = app(environ, start_response)
        return WSGIResult(captured["status"], captured["headers"], b"".join(chunks))
    return _call
