"""
Handler signatures and the default responders.

A handler is any callable taking the response sink and the request:

    def handler(res: ResponseWriter, req: HTTPRequest) -> None

Its return value is ignored. Handing control to the next handler is
explicit, through `router.context(req).next(res, req)`.
"""

from typing import Callable

from .http.request import HTTPRequest
from .http.response import ResponseWriter
from .http.status_codes import HTTPStatus


Handler = Callable[[ResponseWriter, HTTPRequest], None]

# (res, req, message, code)
ErrorHandler = Callable[[ResponseWriter, HTTPRequest, str, int], None]


NOT_FOUND_MESSAGE = "404 page not found"


def http_error(res: ResponseWriter, message: str, code: int) -> None:
    """Write `message` as a plain-text body with status `code`."""
    res.set_header("Content-Type", "text/plain; charset=utf-8")
    res.set_header("X-Content-Type-Options", "nosniff")
    res.write_header(code)
    res.write(message)


def default_error_handler(res: ResponseWriter, req: HTTPRequest, message: str, code: int) -> None:
    """Responder used by fail() when the router has no error_handler set."""
    http_error(res, message, code)


def default_not_found_handler(res: ResponseWriter, req: HTTPRequest) -> None:
    http_error(res, NOT_FOUND_MESSAGE, HTTPStatus.NOT_FOUND)


def noop_handler(res: ResponseWriter, req: HTTPRequest) -> None:
    """Terminal sentinel run when next() is called past the end of a chain."""
