"""
=============================================================================
MIDDLEWARE BASE CLASS
=============================================================================

Middleware here is just a handler that is usually mounted and that hands
control on by calling next() on the request's context.

    ┌─────────────────────────────────────────────────────────────────────┐
    │   A middleware can:                                                 │
    │   - Do work and call next()           (pass through)               │
    │   - Write a response and NOT call next() (short-circuit)           │
    │   - Call fail()                        (abort with an error)        │
    │   - Do work after next() returns       (post-processing)           │
    └─────────────────────────────────────────────────────────────────────┘

Because a handler only receives (res, req), a middleware object keeps a
reference to the router that dispatches it so it can reach the request's
context.

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from ..context import RequestContext
from ..http.request import HTTPRequest
from ..http.response import ResponseWriter

if TYPE_CHECKING:
    from ..routing.router import Router


class Middleware(ABC):
    """
    Abstract base class for middleware.

    Example:
        class RequireJSON(Middleware):
            def __call__(self, res, req):
                if req.content_type != "application/json":
                    self.fail(res, req, "expected JSON", 415)
                    return
                self.next(res, req)

        router.mount("/api", RequireJSON(router))
    """

    def __init__(self, router: "Router"):
        self.router = router

    @abstractmethod
    def __call__(self, res: ResponseWriter, req: HTTPRequest) -> None:
        """Handle the request; call self.next() to continue the chain."""
        pass

    def context(self, req: HTTPRequest) -> RequestContext:
        return self.router.context(req)

    def next(self, res: ResponseWriter, req: HTTPRequest) -> None:
        self.router.context(req).next(res, req)

    def fail(self, res: ResponseWriter, req: HTTPRequest, message: str, code: int) -> None:
        self.router.context(req).fail(res, req, message, code)
